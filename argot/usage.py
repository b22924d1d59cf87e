"""
Usage grammars: positional argument lists and option usages.

Positional arguments ("<branch> [tracking]", "<files...>")
- parse_argument(text) parses a single <name>/[name]/<name...>/[name...] token.
- parse_command_usage(usage) parses a whitespace-separated list of them, keeping
  order, and enforces that required arguments come first and that a variadic
  argument, if any, comes last.

Option usages ("-q, --quiet", "--port <number>", "--color=[bool]")
- parse_option_usage(usage) walks the tokenizer and produces a Usage with at
  most one short flag, one long flag and one scalar argument.
- str(usage) re-serializes to the canonical form "-s, --long <arg>", which
  parses back to an equal Usage.

All grammar problems raise UsageSyntaxError with a caret frame pointing into
the usage string.
"""
import collections
import re

from .faults import FaultCode, UsageSyntaxError
from .stream import Loc, SourceStream
from .tokens import ArgumentToken, LongFlag, Punctuation, ShortFlag, Tokenizer, describe

Argument = collections.namedtuple("Argument", ("name", "required", "variadic", "raw"))
UsageArgument = collections.namedtuple("UsageArgument", ("required", "name"))

_ARGUMENT = re.compile(r"(?P<open>[<\[])(?P<name>(?:[^\W\d]|-)*)(?P<variadic>\.\.\.)?(?P<close>[>\]])")
_BOUNDARIES = {
    "-": "a hyphen",
    "_": "an underscore",
}


class Usage(collections.namedtuple("Usage", ("short", "long", "argument"))):
    """
    Parsed option usage: short flag name, long flag name, and scalar argument.

    Flag names are stored without their dashes ("q", "quiet").
    """
    __slots__ = ()

    def __str__(self):
        flags = []
        if self.short:
            flags.append("-" + self.short)
        if self.long:
            flags.append("--" + self.long)
        usage = ", ".join(flags)
        if self.argument:
            name = self.argument.name
            usage += " " + (f"<{name}>" if self.argument.required else f"[{name}]")
        return usage


def _malformed(text, reason):
    stream = SourceStream(text)
    return stream.generate_error(
        f"Couldn't parse argument {text!r}: {reason}",
        loc=Loc(0, 0),
        length=len(text),
        code=FaultCode.MALFORMED_ARGUMENT,
        argument=text,
    )


def parse_argument(text, /):
    """
    Parse one positional argument token into an Argument.

    Name characters are letters, hyphens and underscores; a name can't be empty
    and can't start or end with a hyphen or an underscore. A "..." right before
    the closing delimiter makes the argument variadic.
    """
    if not isinstance(text, str):
        raise TypeError("parse_argument() argument must be a string")

    match = _ARGUMENT.fullmatch(text)
    if not match:
        raise _malformed(text, "expected something like <name>, [name] or <name...>.")

    if {match["open"], match["close"]} not in ({"<", ">"}, {"[", "]"}):
        raise _malformed(text, f"{match['open']!r} can't be closed with {match['close']!r}.")

    if not (name := match["name"]):
        raise _malformed(text, "names can't be empty.")

    for character, label in _BOUNDARIES.items():
        if name.startswith(character):
            raise _malformed(text, f"names can't start with {label}.")
        if name.endswith(character):
            raise _malformed(text, f"names can't end in {label}.")

    return Argument(name, match["open"] == "<", bool(match["variadic"]), text)


def parse_command_usage(usage, /):
    """
    Parse a positional usage string ("<src> [dest...]") into a tuple of Arguments.
    """
    if not isinstance(usage, str):
        raise TypeError("parse_command_usage() argument must be a string")

    stream = SourceStream(usage)
    arguments = []

    for match in re.finditer(r"\S+", usage):
        start = match.start()
        loc = Loc(usage.count("\n", 0, start), start - (usage.rfind("\n", 0, start) + 1))

        try:
            argument = parse_argument(match.group())
        except UsageSyntaxError as error:
            raise stream.generate_error(
                error.options["reason"],
                loc=loc,
                length=len(match.group()),
                code=error.code,
                argument=match.group(),
            ) from None

        if arguments and arguments[-1].variadic:
            raise stream.generate_error(
                f"The variadic argument {arguments[-1].raw} must be the last argument "
                f"(found {argument.raw} after it).",
                loc=loc,
                length=len(argument.raw),
                code=FaultCode.ARGUMENT_ORDER,
            )

        if argument.required and (optional := next((x for x in arguments if not x.required), None)):
            raise stream.generate_error(
                f"Required arguments should come first "
                f"({argument.raw} is required but follows the optional {optional.raw}).",
                loc=loc,
                length=len(argument.raw),
                code=FaultCode.ARGUMENT_ORDER,
            )

        arguments.append(argument)

    return tuple(arguments)


def parse_option_usage(usage, /):
    """
    Parse an option usage string ("-p, --port <number>") into a Usage.

    rules
    - at most one short flag, one long flag and one argument;
    - two flags must be separated by a comma;
    - a comma must be followed by a flag, an "=" by an argument;
    - option arguments are scalar (no "...");
    - at least one flag is required.
    """
    if not isinstance(usage, str):
        raise TypeError("parse_option_usage() argument must be a string")

    tokenizer = Tokenizer(SourceStream(usage))
    parsed = {"short": None, "long": None, "argument": None}
    previous = None

    def assert_unique(token, field, label):
        if parsed[field] is not None:
            raise tokenizer.report_token(
                token,
                f"Each option is only allowed one {label}.",
                code=FaultCode.DUPLICATED_USAGE,
            )

    def expect_after(token, types, label):
        if tokenizer.eof():
            raise tokenizer.report_token(
                token,
                f"Expected {label} after {token.raw!r} but the string ended.",
                code=FaultCode.UNEXPECTED_END,
            )
        if not tokenizer.is_type(*types):
            following = tokenizer.peek()
            raise tokenizer.report_token(
                following,
                f"Expected {label} after {token.raw!r}, found {describe(following)}.",
                code=FaultCode.UNEXPECTED_TOKEN,
            )

    while not tokenizer.eof():
        token = tokenizer.consume_next_token()

        match token:
            case ShortFlag() | LongFlag():
                field, label = ("short", "short flag") if isinstance(token, ShortFlag) else ("long", "long flag")
                assert_unique(token, field, label)
                parsed[field] = token.name

                # "-q --quiet" is missing its comma.
                if not tokenizer.eof() and tokenizer.is_type(ShortFlag, LongFlag):
                    following = tokenizer.peek()
                    raise tokenizer.report_token(
                        following,
                        f"Expected a comma before {following.raw!r}.",
                        code=FaultCode.UNEXPECTED_TOKEN,
                    )
            case Punctuation(value=","):
                if not isinstance(previous, ShortFlag | LongFlag):
                    raise tokenizer.report_token(token, "Expected a flag before ','.", code=FaultCode.UNEXPECTED_TOKEN)
                expect_after(token, (ShortFlag, LongFlag), "a flag")
            case Punctuation(value="="):
                if not isinstance(previous, ShortFlag | LongFlag):
                    raise tokenizer.report_token(token, "Expected a flag before '='.", code=FaultCode.UNEXPECTED_TOKEN)
                expect_after(token, (ArgumentToken,), "an argument")
            case ArgumentToken():
                if token.variadic:
                    raise tokenizer.report_token(
                        token,
                        f"Options can't take variadic arguments ({token.raw} accepts many values).",
                        code=FaultCode.VARIADIC_OPTION,
                    )
                assert_unique(token, "argument", "argument")
                parsed["argument"] = UsageArgument(token.required, token.name)

        previous = token

    if parsed["short"] is None and parsed["long"] is None:
        raise SourceStream(usage).generate_error(
            "An option needs at least one flag (like '-q' or '--quiet').",
            loc=Loc(0, 0),
            length=len(usage),
            code=FaultCode.MISSING_FLAG,
        )

    return Usage(**parsed)


__all__ = (
    "Argument",
    "Usage",
    "UsageArgument",
    "parse_argument",
    "parse_command_usage",
    "parse_option_usage",
)
