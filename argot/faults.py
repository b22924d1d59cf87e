"""
Argot faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain so the numeric range alone tells what went wrong.
- FaultKind: the closed set of fault families (grammar, configuration, flag,
  argument, routing, exit, warning, unknown). Callers switch on the kind.
- CommandException / CommandWarning: base types that carry message + options and
  know how to render themselves with rich.
- CommandExit: an exception group bundling several faults of one invocation.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).

Timing
- Grammar and configuration faults are raised while a command tree is built.
  They point at developer mistakes and are never recovered.
- Flag, argument and routing faults are raised while argv is resolved.
- Exit requests (help, version) travel through the same channel with exit code 0.

Integration
- The core only raises. The CLI bootstrap calls trigger(fault, shell=True, ...)
  to print a fault through rich and exit with its code.
"""
import copy
import inspect
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import Enum, IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultKind(Enum):
    """
    closed set of fault families.

    the kind of a fault is derived from its code; anything that is not an argot
    fault (or carries no code) is UNKNOWN, i.e. a bug rather than a usage problem.
    """
    GRAMMAR = "grammar"
    CONFIGURATION = "configuration"
    FLAG = "flag"
    ARGUMENT = "argument"
    ROUTING = "routing"
    EXIT = "exit"
    WARNING = "warning"
    UNKNOWN = "unknown"


class FaultCode(IntEnum):
    """
    canonical fault codes used across argot (stable identifiers).

    grouping (the hundreds encode the kind)
    - usage grammar (111xx)
      • UNEXPECTED_CHARACTER, UNEXPECTED_END, MALFORMED_FLAG, CLUSTERED_SHORT_FLAG,
        MALFORMED_ARGUMENT, UNEXPECTED_TOKEN, DUPLICATED_USAGE, VARIADIC_OPTION,
        ARGUMENT_ORDER, MISSING_FLAG
    - command configuration (112xx)
      • MALFORMED_CONFIG, MISSING_IMPLEMENTATION, ORPHANED_DECLARATION,
        MISSING_USAGE, REDEFINED_FLAG
    - flags at invocation (113xx)
      • UNKNOWN_OPTION, MISSING_OPTION_VALUE, INVALID_OPTION_VALUE
    - positional arguments at invocation (114xx)
      • UNEXPECTED_ARGUMENTS, TOO_MANY_ARGUMENTS, MISSING_ARGUMENT
    - routing (115xx)
      • NOT_A_COMMAND
    - exit requests (120xx)
      • EXIT_REQUEST
    - warnings (131xx)
      • EMPTY_OPTION_VALUE
    """
    # --- usage grammar (111xx) ---
    UNEXPECTED_CHARACTER        = 11101
    UNEXPECTED_END              = 11102
    MALFORMED_FLAG              = 11103
    CLUSTERED_SHORT_FLAG        = 11104
    MALFORMED_ARGUMENT          = 11105
    UNEXPECTED_TOKEN            = 11106
    DUPLICATED_USAGE            = 11107
    VARIADIC_OPTION             = 11108
    ARGUMENT_ORDER              = 11109
    MISSING_FLAG                = 11110

    # --- command configuration (112xx) ---
    MALFORMED_CONFIG            = 11201
    MISSING_IMPLEMENTATION      = 11202
    ORPHANED_DECLARATION        = 11203
    MISSING_USAGE               = 11204
    REDEFINED_FLAG              = 11205

    # --- flags (113xx) ---
    UNKNOWN_OPTION              = 11301
    MISSING_OPTION_VALUE        = 11302
    INVALID_OPTION_VALUE        = 11303

    # --- positional arguments (114xx) ---
    UNEXPECTED_ARGUMENTS        = 11401
    TOO_MANY_ARGUMENTS          = 11402
    MISSING_ARGUMENT            = 11403

    # --- routing (115xx) ---
    NOT_A_COMMAND               = 11501

    # --- exit requests (120xx) ---
    EXIT_REQUEST                = 12001

    # --- warnings (131xx) ---
    EMPTY_OPTION_VALUE          = 13101

    @property
    def kind(self):
        """
        the fault family encoded in the hundreds of this code.
        """
        return {
            111: FaultKind.GRAMMAR,
            112: FaultKind.CONFIGURATION,
            113: FaultKind.FLAG,
            114: FaultKind.ARGUMENT,
            115: FaultKind.ROUTING,
            120: FaultKind.EXIT,
            131: FaultKind.WARNING,
        }.get(self.value // 100, FaultKind.UNKNOWN)

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _styled(options, defaults):
    """
    build the (styler, text) pair shared by every renderer.

    styles come from the renderer defaults, overridden by __styles__ in __main__.
    """
    styles = defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))
    colorful = options.get("colorful", True)

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    return styler, text


def _prog(options):
    return getattr(__import__("__main__"), "__prog__", options.get("prog", "cli"))


class CommandException(Exception):
    """
    base of every argot error.

    the message is positional; everything else (code, title, hint and any context
    such as the flag, the argument or the config path) travels in `options`, a
    read-only mapping. runtime rendering options (shell, fancy, colorful, prog,
    console) are merged in later through copy.replace().
    """
    exitcode = 1

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    @property
    def kind(self):
        return self.code.kind if isinstance(self.code, FaultCode) else FaultKind.UNKNOWN

    def __rich__(self):
        styler, text = _styled(self.options, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

        header = Text.assemble(
            "[ ",
            text(_prog(self.options), styler("prog-name")),
            " — ",
            text(self.code.normalize() if self.code else "", styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)
        sys.exit(self.exitcode)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UsageSyntaxError(CommandException, SyntaxError):
    """
    a malformed usage string; also a SyntaxError, with `msg` set to the message.
    """

    def __init__(self, message=Unset, /, **options):
        super().__init__(message, **options)
        SyntaxError.__init__(self, message)


class ConfigurationError(CommandException): ...
class UnknownOptionError(CommandException): ...
class MissingOptionValueError(CommandException): ...
class InvalidOptionValueError(CommandException): ...
class UnexpectedArgumentsError(CommandException): ...
class TooManyArgumentsError(CommandException): ...
class MissingArgumentError(CommandException): ...
class NotACommandError(CommandException): ...


class ExitRequest(CommandException):
    """
    a successful early exit carrying text for the user (help page, version).

    it is rendered as-is on stdout and exits with `exitcode` (0 unless overridden).
    """

    @property
    def exitcode(self):
        return self.options.get("exitcode", 0)

    def __rich__(self):
        return Text(str(self.message))

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("stdout", Console()).print(self)
        sys.exit(self.exitcode)


class CommandWarning(ABC, Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def kind(self):
        return FaultKind.WARNING

    def __rich__(self):
        styler, text = _styled(self.options, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings
            "warning-message": "#D6D6DE",  # slightly lighter gray body
        })

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            text(_prog(self.options), styler("prog-name")),
            " — ",
            text(code.normalize() if code else "", styler("code")),
            " | ",
            text(self.options.get("title", "warning").title(), styler("warning-title")),
            " ]"
        )
        return Group(header, text(self.message, styler("warning-message")))

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=self.options.get("stacklevel", len(inspect.stack())))
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class EmptyOptionValueWarning(CommandWarning): ...


class CommandExit(ExceptionGroup[CommandException]):
    """
    several faults found in one invocation, reported together.
    """
    exitcode = 1

    def __new__(cls, exceptions, **options):
        return super().__new__(cls, "bad exit", exceptions)

    def __init__(self, exceptions, **options):
        super().__init__("bad exit", tuple(exceptions))
        self.options = MappingProxyType(options)

    @property
    def kind(self):
        """
        the shared kind of the grouped faults, UNKNOWN when they disagree.
        """
        kinds = {exception.kind for exception in self.exceptions}
        return kinds.pop() if len(kinds) == 1 else FaultKind.UNKNOWN

    def __rich__(self):
        styler, text = _styled(self.options, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "title": "bold #FF4DA6",  # friendly pinky group title (Bad Exit)
        })

        header = Text.assemble("[ ", text(_prog(self.options), styler("prog-name")), " — ", text(self.message.title(), styler("title")), " ]")

        renders = [copy.replace(exception, **self.options) for exception in self.exceptions]

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)
        sys.exit(self.exitcode)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def kindof(fault, /):
    """
    return the FaultKind of any exception or warning (UNKNOWN for foreign ones).
    """
    if isinstance(fault, CommandException | CommandExit | CommandWarning):
        return fault.kind
    return FaultKind.UNKNOWN


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are
      raised and warnings are emitted through the warnings module.

    typical options
    - shell, fancy, colorful, prog, console, stdout.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultKind",
    "FaultCode",
    "CommandException",
    "UsageSyntaxError",
    "ConfigurationError",
    "UnknownOptionError",
    "MissingOptionValueError",
    "InvalidOptionValueError",
    "UnexpectedArgumentsError",
    "TooManyArgumentsError",
    "MissingArgumentError",
    "NotACommandError",
    "ExitRequest",
    "CommandWarning",
    "EmptyOptionValueWarning",
    "CommandExit",
    "kindof",
    "trigger",
)
