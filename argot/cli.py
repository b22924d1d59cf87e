"""
CLI bootstrap: tie a command tree to a program name, a version and a runtime.

    cli = create_cli("git", cli={...}, version="2.43.0")

    cli.execute()                       # resolve sys.argv[1:] and run
    invoke(cli, "commit -m 'initial'")  # shell-like string
    invoke(cli, ["commit", "--amend"])  # pre-tokenized

Runtime
- shell=True: faults are rendered with rich on stderr (help and version on
  stdout) and the process exits with the fault's exit code.
- shell=False: faults are raised to the caller; warnings go through the
  warnings module.
- fancy/colorful: presentation switches for the rich renderers.

Global options
- --help prints the help page of the resolved command and exits with 0.
- --version prints the version and exits with 0 (only when a version is set).
Both skip positional argument validation.
"""
import collections
import shlex
import sys
from collections.abc import Iterable

from .api import create_api
from .argv import resolve_argv
from .commands import Option, normalize_commands
from .faults import (
    CommandException,
    CommandExit,
    ConfigurationError,
    ExitRequest,
    FaultCode,
    NotACommandError,
    trigger,
)
from .help import generate_help_page
from .usage import parse_option_usage
from .utils import Unset, coalesce, rename, view
from .values import as_boolean

Execution = collections.namedtuple("Execution", ("invocation", "output"))


@rename("undefined")
def _undefined(options, *args):
    raise ConfigurationError(
        "Define the 'cli' config to start building your CLI.",
        code=FaultCode.MISSING_IMPLEMENTATION,
        title="missing implementation",
        hint="pass cli={'command': ...} to create_cli()",
    )


def _global_options(version):
    options = {
        "help": Option("help", parse_option_usage("--help"), as_boolean, "Show this help page"),
    }
    if version is not None:
        options["version"] = Option("version", parse_option_usage("--version"), as_boolean, "Show the version")
    return options


class Cli:
    """
    A normalized command tree bound to its runtime flags.

    The tree is normalized once, when the Cli is created; every execution
    afterwards only resolves argv against it.
    """

    name = view("name")
    tree = view("tree")
    version = view("version")
    shell = view("shell")
    fancy = view("fancy")
    colorful = view("colorful")
    global_options = view("global_options")

    def __init__(self, tree, /, *, version=None, shell=True, fancy=False, colorful=True):
        self._tree = tree
        self._name = tree.name
        self._version = version
        self._shell = shell
        self._fancy = fancy
        self._colorful = colorful
        self._global_options = _global_options(version)

    def __repr__(self):
        return f"cli(name={self._name!r}, version={self._version!r})"

    def _runtime(self):
        return {"prog": self._name, "shell": self._shell, "fancy": self._fancy, "colorful": self._colorful}

    def resolve(self, argv, /, **options):
        """
        Resolve argv against the tree (see argot.argv.resolve_argv).

        Warnings found on the way are surfaced with this CLI's runtime flags;
        keyword options override them.
        """
        return resolve_argv(self._tree, list(argv), self._global_options, **{**self._runtime(), **options})

    def _execute(self, argv, **options):
        invocation = self.resolve(argv, **options)
        command = invocation.command

        # Print the version number and exit successfully.
        if invocation.global_options.get("version"):
            raise ExitRequest(self._version, code=FaultCode.EXIT_REQUEST, title="version")

        if invocation.global_options.get("help"):
            raise ExitRequest(generate_help_page(command), code=FaultCode.EXIT_REQUEST, title="help")

        if command.command is None:
            raise NotACommandError(
                f"\"$ {command.route}\" isn't a command.\n{generate_help_page(command)}",
                code=FaultCode.NOT_A_COMMAND,
                title="not a command",
                hint=f"pick one of: {', '.join(sorted(command.subcommands))}",
                command=command.route,
            )

        # Awaitables are handed back untouched; the caller owns the event loop.
        output = command.command(invocation.options, *invocation.args)
        return Execution(invocation, output)

    def execute(self, argv=Unset, /):
        """
        Run the CLI against argv (sys.argv[1:] when omitted).

        returns
        - Execution(invocation, output) when the command ran.

        In shell mode faults never come back: they are printed and the process
        exits. Otherwise they are raised.
        """
        try:
            return self._execute(list(coalesce(argv, sys.argv[1:])))
        except (CommandException, CommandExit) as fault:
            self.trigger(fault)

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this CLI's runtime flags merged in.
        """
        trigger(fault, **{**self._runtime(), **options})

    def create_api(self):
        return create_api(self._tree)

    def create_test_interface(self):
        """
        Return a function running argv and returning the command's output.

        Faults are raised, never printed, whatever the shell flag says.
        """
        def interface(*argv):
            return self._execute(list(argv), shell=False).output

        return interface

    def __invoke__(self, prompt=Unset):
        """
        Execute with a token stream.

        - Unset: read tokens from sys.argv[1:].
        - str: shell-like string, split with shlex.split.
        - Iterable[str]: pre-tokenized sequence, used as-is.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        return self.execute(tokens)


def create_cli(name, /, cli=Unset, version=Unset, *, shell=True, fancy=False, colorful=True):
    """
    Normalize a command tree and bind it to a program name.

    parameters
    - name: str
      program name, the root of every route ("git").
    - cli: Mapping
      the root command declaration (see argot.commands). When omitted, the CLI
      still builds but any execution reports the missing declaration.
    - version: str | None
      enables --version.
    - shell, fancy, colorful: bool
      runtime flags (see module docstring).

    raises
    - TypeError: name is not a non-empty string.
    - ConfigurationError / UsageSyntaxError: the declaration is invalid.
    """
    if not isinstance(name, str) or not name:
        raise TypeError("create_cli() first argument must be a non-empty string")

    tree = normalize_commands(coalesce(cli, {"command": _undefined}), name=name)
    version = None if version is Unset or version is None else str(version)
    return Cli(tree, version=version, shell=shell, fancy=fancy, colorful=colorful)


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for anything providing __invoke__(prompt).

    returns
    - whatever __invoke__ returns (an Execution for a Cli).
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method")


__all__ = (
    "Execution",
    "Cli",
    "create_cli",
    "invoke",
)
