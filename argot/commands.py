"""
Argot command layer: declare, validate and normalize a command tree.

What this module provides
- CommandTree: a read-only node of the normalized tree (name, description,
  implementation, positional arguments, options, subcommands, parent link).
- Option: a normalized option (declaration key, parsed usage, value parser,
  description).
- normalize_commands(config): turn a nested, partially specified mapping into
  a fully defaulted and validated CommandTree.

Declaring a tree
    tree = normalize_commands({
        "description": "Distributed version control system",
        "subcommands": {
            "commit": {
                "command": commit,
                "args": "[paths...]",
                "options": {
                    "message": "-m, --message <text>",
                    "amend": {"usage": "--amend", "description": "Rewrite the last commit"},
                },
            },
        },
    }, name="git")

Config keys (all optional, per node)
- description: str
- command: callable invoked as command(options, *args)
- args: positional usage string ("<src> [dest...]")
- options: mapping of option name → usage string, or mapping with
  "usage" (required), "parse_value" and "description"
- subcommands: mapping of name → nested config

Validation (fail fast, before any argv is seen)
- a node without a command can't declare args or options, and must have subcommands;
- usage strings must parse (see argot.usage);
- two options of one node can't claim the same short or long flag.
Every error names the dotted path to the offending field, e.g.
"config.cli.subcommands.remote.subcommands.add.options".
"""
import collections
from collections.abc import Mapping

from .faults import ConfigurationError, FaultCode, UsageSyntaxError
from .usage import parse_command_usage, parse_option_usage
from .utils import view
from .values import ValueParser

Option = collections.namedtuple("Option", ("name", "usage", "parse_value", "description"))

_FIELDS = frozenset({"description", "command", "args", "options", "subcommands"})
_OPTION_FIELDS = frozenset({"usage", "parse_value", "description"})


def _describe_path(path):
    """
    Return a string like 'config.cli.subcommands.init.subcommands.cli'.
    """
    return "config.cli" + "".join(".subcommands." + name for name in path)


def _field_trace(path, field=None):
    return f"\n  At: {_describe_path(path)}" + (f".{field}" if field else "")


class CommandTree:
    """
    One node of a normalized command tree.

    The tree is owned top-down: each node owns its `subcommands`. `parent` is
    a back-reference used to rebuild paths and routes, nothing else.

    Every public attribute is a read-only view; once normalize_commands()
    returns, nothing mutates the tree, so one tree can serve any number of
    invocations.
    """

    name = view("name")
    description = view("description")
    parent = view("parent")
    command = view("command")
    args = view("args")
    options = view("options")
    subcommands = view("subcommands")

    def __init__(self, name, /, parent=None, *, description=None, command=None, args=()):
        self._name = name
        self._parent = parent
        self._description = description
        self._command = command
        self._args = tuple(args)
        self._options = {}
        self._subcommands = {}

    @property
    def root(self):
        """
        Return the topmost node of the tree this node belongs to.
        """
        child, parent = self, self.parent
        while parent:
            child, parent = parent, parent.parent
        return child

    @property
    def path(self):
        """
        Return the ancestry from root to this node as a tuple.
        """
        path = [node := self]
        while node.parent:
            path.append(node := node.parent)
        return tuple(reversed(path))

    @property
    def route(self):
        """
        The command line that reaches this node, e.g. 'git remote add'.
        """
        return " ".join(node.name for node in self.path)

    def __repr__(self):
        return f"command-tree(name={self.name!r}, route={self.route!r})"

    def __rich_repr__(self):
        yield "name", self.name
        yield "description", self.description
        yield "command", self.command
        yield "args", self.args
        yield "options", dict(self.options)
        yield "subcommands", list(self.subcommands)


def _relocate(error, trace):
    """
    Append a config path trace to a grammar error raised by a usage parser.
    """
    return type(error)(error.message + trace.lstrip("\n") + "\n", **error.options)


def _normalize_option(name, declaration, path):
    if isinstance(declaration, str):
        declaration = {"usage": declaration}
    elif not isinstance(declaration, Mapping):
        raise ConfigurationError(
            "An option must be declared as a usage string or a mapping." + _field_trace(path, f"options.{name}"),
            code=FaultCode.MALFORMED_CONFIG,
            title="malformed option",
            field=_describe_path(path) + f".options.{name}",
        )

    if unknown := sorted(set(declaration) - _OPTION_FIELDS):
        raise ConfigurationError(
            f"Unknown option field(s): {', '.join(map(repr, unknown))}." + _field_trace(path, f"options.{name}"),
            code=FaultCode.MALFORMED_CONFIG,
            title="malformed option",
            hint="options accept 'usage', 'parse_value' and 'description'",
            field=_describe_path(path) + f".options.{name}",
        )

    if not isinstance(usage := declaration.get("usage"), str) or not usage:
        raise ConfigurationError(
            "An option is missing the required 'usage' field." + _field_trace(path, f"options.{name}"),
            code=FaultCode.MISSING_USAGE,
            title="missing usage",
            hint="add a usage string like '-q, --quiet' or '--port <number>'",
            field=_describe_path(path) + f".options.{name}",
        )

    try:
        parse_value = ValueParser.of(declaration.get("parse_value"))
    except TypeError:
        raise ConfigurationError(
            "An option's 'parse_value' must be callable." + _field_trace(path, f"options.{name}.parse_value"),
            code=FaultCode.MALFORMED_CONFIG,
            title="malformed option",
            field=_describe_path(path) + f".options.{name}.parse_value",
        ) from None

    try:
        usage = parse_option_usage(usage)
    except UsageSyntaxError as error:
        raise _relocate(error, _field_trace(path, f"options.{name}.usage")) from None

    return Option(name, usage, parse_value, declaration.get("description"))


def _enforce_option_uniqueness(options, path):
    flags = {}

    for name, option in options.items():
        for prefix, flag in (("-", option.usage.short), ("--", option.usage.long)):
            if flag is None:
                continue
            if (other := flags.setdefault(prefix + flag, name)) != name:
                raise ConfigurationError(
                    f"The {prefix + flag!r} flag is redefined by multiple options "
                    f"({other!r} and {name!r})." + _field_trace(path, "options"),
                    code=FaultCode.REDEFINED_FLAG,
                    title="redefined flag",
                    hint="give each option its own short and long flags",
                    flag=prefix + flag,
                    options=(other, name),
                    field=_describe_path(path) + ".options",
                )


def normalize_commands(config, /, *, name="cli", parent=None, path=()):
    """
    Recursively parse, validate, and provide defaults for all commands.

    parameters
    - config: Mapping
      the declaration of this node (see module docstring for the keys).
    - name: str
      the node name (the program name for the root).
    - parent: CommandTree | None
      the node this one hangs from; None for the root.
    - path: tuple[str, ...]
      subcommand names leading here, used in error traces.

    returns
    - CommandTree: the normalized node with its whole subtree.

    raises
    - ConfigurationError: structurally invalid declarations.
    - UsageSyntaxError: malformed args/option usage strings.
    """
    if not isinstance(config, Mapping):
        raise ConfigurationError(
            "A command must be declared as a mapping." + _field_trace(path),
            code=FaultCode.MALFORMED_CONFIG,
            title="malformed command",
            field=_describe_path(path),
        )

    if unknown := sorted(set(config) - _FIELDS):
        raise ConfigurationError(
            f"Unknown command field(s): {', '.join(map(repr, unknown))}." + _field_trace(path),
            code=FaultCode.MALFORMED_CONFIG,
            title="malformed command",
            hint="commands accept 'description', 'command', 'args', 'options' and 'subcommands'",
            field=_describe_path(path),
        )

    command = config.get("command")
    args = config.get("args") or ""
    options = config.get("options") or {}
    subcommands = config.get("subcommands") or {}

    if command is not None and not callable(command):
        raise ConfigurationError(
            "A command implementation must be callable." + _field_trace(path, "command"),
            code=FaultCode.MALFORMED_CONFIG,
            title="malformed command",
            field=_describe_path(path) + ".command",
        )

    if command is None:
        if args:
            raise ConfigurationError(
                "Arguments were defined for a command that doesn't exist." + _field_trace(path, "args"),
                code=FaultCode.ORPHANED_DECLARATION,
                title="orphaned arguments",
                hint="add a 'command' function or move the arguments to a subcommand",
                field=_describe_path(path) + ".args",
            )
        if options:
            raise ConfigurationError(
                "Options were defined for a command that doesn't exist." + _field_trace(path, "options"),
                code=FaultCode.ORPHANED_DECLARATION,
                title="orphaned options",
                hint="add a 'command' function or move the options to a subcommand",
                field=_describe_path(path) + ".options",
            )
        if not subcommands:
            raise ConfigurationError(
                "CLI needs an implementation.\n"
                "Add a 'command' function or 'subcommands'." + _field_trace(path),
                code=FaultCode.MISSING_IMPLEMENTATION,
                title="missing implementation",
                field=_describe_path(path),
            )

    for field, value in (("options", options), ("subcommands", subcommands)):
        if not isinstance(value, Mapping):
            raise ConfigurationError(
                f"'{field}' must be a mapping." + _field_trace(path, field),
                code=FaultCode.MALFORMED_CONFIG,
                title="malformed command",
                field=_describe_path(path) + f".{field}",
            )

    if not isinstance(args, str):
        raise ConfigurationError(
            "'args' must be a usage string like '<src> [dest...]'." + _field_trace(path, "args"),
            code=FaultCode.MALFORMED_CONFIG,
            title="malformed command",
            field=_describe_path(path) + ".args",
        )

    try:
        arguments = parse_command_usage(args)
    except UsageSyntaxError as error:
        raise _relocate(error, _field_trace(path, "args")) from None

    node = CommandTree(
        name,
        parent,
        description=config.get("description"),
        command=command,
        args=arguments,
    )

    for subcommand, declaration in subcommands.items():
        node._subcommands[subcommand] = normalize_commands(
            declaration,
            name=subcommand,
            parent=node,
            path=(*path, subcommand),
        )

    for option, declaration in options.items():
        node._options[option] = _normalize_option(option, declaration, path)

    _enforce_option_uniqueness(node._options, path)

    return node


__all__ = (
    "Option",
    "CommandTree",
    "normalize_commands",
)
