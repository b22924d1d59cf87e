"""
Argv resolution: from raw process arguments to {command, options, args}.

Pipeline (each step is usable on its own)
1. resolve_command(tree, argv)
   walk leading tokens as subcommand names; flags met on the way are set aside
   and handed to the resolved command, so "git -q stash save" and
   "git stash save -q" mean the same thing.
2. parse_argv(command, argv, global_options)
   normalize_argv() the tokens, then match every flag against the command's
   option index. Unknown flags are collected (never fatal on the spot) so that
   all of them can be reported together.
3. validate_arguments(command, args)
   check positional arity: required, optional and variadic arguments.

resolve_argv(tree, argv, global_options) runs the three steps, raises a
CommandExit grouping every unknown flag, and returns a ParsedInvocation.

Argv conventions
- long flags: --flag, --flag value, --flag=value
- short flags: -f, -f value, clusters (-qcp ≡ -q -c -p)
- clusters with a value: -vp=8080 ≡ -v -p 8080
- numeric short tokens (-1337) are values, not flags, also after a flag
  (--offset -5)
- conjoined values that look like flags stay bound to their flag
  (--message=-abc, -vp=--x ≡ -v -p=--x)
"""
import collections
import math
import re

from .faults import (
    CommandExit,
    EmptyOptionValueWarning,
    FaultCode,
    InvalidOptionValueError,
    MissingArgumentError,
    MissingOptionValueError,
    TooManyArgumentsError,
    UnexpectedArgumentsError,
    UnknownOptionError,
    trigger,
)
from .utils import ordinal, pluralize
from .values import OptionArgument

FlagIndex = collections.namedtuple("FlagIndex", ("short", "long"))
ParsedArgv = collections.namedtuple("ParsedArgv", ("options", "global_options", "invalid_options", "args"))
ParsedInvocation = collections.namedtuple(
    "ParsedInvocation", ("command", "options", "global_options", "invalid_options", "args")
)

_CONJOINED = re.compile(r"(?P<flag>--?[^\W\d][\w-]*)=(?P<value>.*)", re.DOTALL)


def looks_like_flag(argument, /):
    """
    Anything starting with "-" followed by something; a lone "-" is a value.
    """
    return len(argument) > 1 and argument.startswith("-")


def is_short_flag(argument, /):
    return looks_like_flag(argument) and not argument.startswith("--")


def _is_numeric_flag(argument):
    return len(argument) > 1 and argument[0] == "-" and argument[1].isdigit()


def _is_value(argument):
    return not looks_like_flag(argument) or _is_numeric_flag(argument)


def normalize_argv(argv, /):
    """
    Massage argv until it is ready for consumption.

    - "--flag=value"/"-f=value" → "--flag", "value" (the flag part is normalized
      again, so "-vp=8080" → "-v", "-p", "8080");
    - a conjoined value that looks like a flag stays bound: "--message=-abc"
      is kept whole and "-vp=-abc" → "-v", "-p=-abc";
    - "-1337" is a value and stays as-is;
    - "-qcp" → "-q", "-c", "-p";
    - everything else passes through.

    Running it on its own output changes nothing.
    """
    normalized = []

    for argument in argv:
        if match := _CONJOINED.fullmatch(argument):
            *cluster, flag = normalize_argv([match["flag"]])
            normalized.extend(cluster)
            if _is_value(match["value"]):
                normalized.extend((flag, match["value"]))
            else:
                normalized.append(f"{flag}={match['value']}")
        elif _is_value(argument):
            normalized.append(argument)
        elif is_short_flag(argument) and len(argument) > 2:
            normalized.extend("-" + character for character in argument[1:])
        else:
            normalized.append(argument)

    return normalized


def resolve_command(tree, argv, /):
    """
    Separate the (sub)command from the arguments given to it.

    Leading flags are assumed not to take separate values (use "-p=8080" for
    that); they are relocated in front of the remaining arguments so that the
    resolved command's option set interprets them.

    returns
    - tuple[CommandTree, list[str]]
    """
    relocated = []
    stack = list(argv)
    command = tree

    while stack:
        name = stack[0]

        if looks_like_flag(name):
            relocated.append(stack.pop(0))
            continue

        # End of the subcommand tree.
        if name not in command.subcommands:
            break

        command = command.subcommands[name]
        stack.pop(0)

    return command, relocated + stack


def index_options(options, /):
    """
    Index an option mapping by short and long flag name (without dashes).
    """
    short, long = {}, {}

    for option in options.values():
        if option.usage.short is not None:
            short[option.usage.short] = option
        if option.usage.long is not None:
            long[option.usage.long] = option

    return FlagIndex(short, long)


def _resolve_option(index, flag):
    if is_short_flag(flag):
        return index.short.get(flag[1:])
    return index.long.get(flag[2:])


def _make_parse_error_factory(
        flag,
        factory=InvalidOptionValueError,
        prefix="Invalid value",
        code=FaultCode.INVALID_OPTION_VALUE,
):
    """
    Build a create_parse_error(message) callback scoped to one flag.
    """
    def create_parse_error(message):
        return factory(
            f"{prefix} at {flag}: {message}",
            code=code,
            title=prefix.lower(),
            hint=f"check the value given to {flag}",
            flag=flag,
        )
    return create_parse_error


def _parse_option(option, flag, value):
    """
    Turn one matched flag (and its possible value) into the option value.
    """
    if option.usage.argument is None:
        return True

    if value is None and option.usage.argument.required:
        raise _make_parse_error_factory(
            flag,
            MissingOptionValueError,
            "Missing value",
            FaultCode.MISSING_OPTION_VALUE,
        )(f"Expected argument <{option.usage.argument.name}>.")

    return option.parse_value(OptionArgument(value or "", flag, _make_parse_error_factory(flag)))


def parse_argv(command, argv, /, global_options=None, **options):
    """
    Split argv into options and positional arguments for `command`.

    Unknown flags land in invalid_options and parsing goes on. Options of the
    command win over global options that claim the same flag. Extra keyword
    options (shell, prog, ...) are handed to trigger() for warnings.

    examples
    - cmd -p 8080 cmd-arg --color=yes
    - cmd variadic -qsp 3000 args -v flag:param
    - cmd --offset -5 --message=-abc
    """
    parsed = ParsedArgv({}, {}, [], [])

    local = index_options(command.options)
    shared = index_options(global_options or {})
    stack = normalize_argv(argv)

    while stack:
        argument = stack.pop(0)

        if _is_value(argument):
            parsed.args.append(argument)
            continue

        # Only flag-looking values are still conjoined after normalize_argv().
        bound = None
        if match := _CONJOINED.fullmatch(argument):
            argument, bound = match["flag"], match["value"]

        option = _resolve_option(local, argument)
        bucket = parsed.options
        if option is None and (option := _resolve_option(shared, argument)) is not None:
            bucket = parsed.global_options

        if option is None:
            parsed.invalid_options.append(argument)
            continue

        value = bound
        if option.usage.argument is None:
            if bound is not None:
                parsed.args.append(bound)
        elif bound is None and stack and _is_value(stack[0]):
            value = stack.pop(0)
            if not value:
                trigger(EmptyOptionValueWarning(
                    f"Empty value for option {argument}.",
                    code=FaultCode.EMPTY_OPTION_VALUE,
                    title="empty option value",
                    flag=argument,
                    stacklevel=3,
                ), **options)
                value = None

        bucket[option.name] = _parse_option(option, argument, value)

    return parsed


def validate_arguments(command, args, /):
    """
    Check the positional arguments against the command's declared arity.
    """
    route = command.route
    required = [argument for argument in command.args if argument.required]
    maximum = sum(math.inf if argument.variadic else 1 for argument in command.args)

    # Arguments were given but the command doesn't accept any.
    if args and not command.args:
        raise UnexpectedArgumentsError(
            f"{route!r} doesn't take arguments (it was given {pluralize('argument', len(args))}).",
            code=FaultCode.UNEXPECTED_ARGUMENTS,
            title="unexpected arguments",
            hint=f"try '{route} --help' to see how it is used",
            command=route,
            given=tuple(args),
        )

    if len(args) > maximum:
        raise TooManyArgumentsError(
            f"{route!r} was given too many arguments.\n"
            f"At most there should be {maximum}, but it was given {len(args)}.",
            code=FaultCode.TOO_MANY_ARGUMENTS,
            title="too many arguments",
            hint=f"try '{route} --help' to see how it is used",
            command=route,
            given=tuple(args),
            maximum=maximum,
        )

    if len(args) >= len(required):
        return

    missing = required[len(args)]
    raise MissingArgumentError(
        f"The {missing.raw} argument is required "
        f"(missing the {ordinal(len(args) + 1)} argument of {route!r}).",
        code=FaultCode.MISSING_ARGUMENT,
        title="missing argument",
        hint=f"try '{route} --help' to see how it is used",
        command=route,
        argument=missing.name,
        given=tuple(args),
    )


def resolve_argv(tree, argv, /, global_options=None, **options):
    """
    Bring the whole pipeline together: command, flags, unknown flags, arity.

    Arity is not checked when a global option was given, since global options
    (help, version) end the run before the command would execute.
    """
    command, args = resolve_command(tree, argv)
    parsed = parse_argv(command, args, global_options, **options)

    if parsed.invalid_options:
        raise CommandExit([
            UnknownOptionError(
                f"Unknown option {flag} for {command.route!r}.",
                code=FaultCode.UNKNOWN_OPTION,
                title="unknown option",
                hint=f"try '{command.route} --help' to see all available options",
                flag=flag,
                command=command.route,
            )
            for flag in parsed.invalid_options
        ])

    if not parsed.global_options:
        validate_arguments(command, parsed.args)

    return ParsedInvocation(command, parsed.options, parsed.global_options, parsed.invalid_options, parsed.args)


__all__ = (
    "FlagIndex",
    "ParsedArgv",
    "ParsedInvocation",
    "looks_like_flag",
    "is_short_flag",
    "normalize_argv",
    "resolve_command",
    "index_options",
    "parse_argv",
    "validate_arguments",
    "resolve_argv",
)
