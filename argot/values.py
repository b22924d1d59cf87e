"""
Option value coercion.

Every normalized option stores exactly one ValueParser. The set of parsers is
closed and small:

- BooleanParser  --color, --color=yes, --color=off
- StringParser   --org, --org=acme      ("" becomes None)
- NumberParser   --count=10, --mask=0xff ("" becomes None)
- FunctionParser any user callable taking the raw string (int, pathlib.Path, ...)

Built-in parsers receive an OptionArgument (input, flag, create_parse_error)
and raise flag-scoped errors through create_parse_error. FunctionParser hands
the callable only the input string and turns its ValueError/TypeError into
the same flag-scoped error.
"""
import collections
import math
from abc import ABC, abstractmethod

from .faults import CommandException

OptionArgument = collections.namedtuple("OptionArgument", ("input", "flag", "create_parse_error"))

TRUTHY_VALUES = frozenset({"true", "yes", "on"})
FALSEY_VALUES = frozenset({"false", "no", "off"})


class ValueParser(ABC):
    @abstractmethod
    def __call__(self, argument, /):
        """
        Turn argument.input into the option value, or raise argument.create_parse_error(...).
        """

    def __repr__(self):
        return f"{type(self).__name__}()"

    @classmethod
    def of(cls, object, /):
        """
        Select the parser for a declared `parse_value`.

        None → as_string, a ValueParser → itself, any other callable → FunctionParser.
        """
        if object is None:
            return as_string
        if isinstance(object, ValueParser):
            return object
        if callable(object):
            return FunctionParser(object)
        raise TypeError("parse_value must be callable")


class BooleanParser(ValueParser):
    def __call__(self, argument, /):
        if not argument.input:
            return True
        if (value := argument.input.lower()) in TRUTHY_VALUES:
            return True
        if value in FALSEY_VALUES:
            return False

        raise argument.create_parse_error(
            f"The {argument.flag} option got a surprising value {argument.input!r}.\n"
            f"It expects a boolean value, like \"true\", \"false\", \"on\", or \"off\"."
        )


class StringParser(ValueParser):
    def __call__(self, argument, /):
        return argument.input or None


class NumberParser(ValueParser):
    def __call__(self, argument, /):
        if not argument.input:
            return None

        try:
            return int(argument.input, 0)
        except ValueError:
            pass

        try:
            number = float(argument.input)
        except ValueError:
            raise argument.create_parse_error(f"Couldn't parse {argument.input!r} into a number.") from None

        if not math.isfinite(number):
            raise argument.create_parse_error(f"Couldn't parse {argument.input!r} into a number (got {number}).")
        return number


class FunctionParser(ValueParser):
    """
    Adapter for user callables: callback(input) -> value.
    """

    def __init__(self, callback, /):
        if not callable(callback):
            raise TypeError("FunctionParser() argument must be callable")
        self._callback = callback

    @property
    def callback(self):
        return self._callback

    def __repr__(self):
        return f"{type(self).__name__}({getattr(self._callback, '__qualname__', self._callback)!s})"

    def __call__(self, argument, /):
        try:
            return self._callback(argument.input)
        except CommandException:
            raise
        except (ValueError, TypeError) as error:
            raise argument.create_parse_error(str(error) or f"Couldn't parse {argument.input!r}.") from error


as_boolean = BooleanParser()
as_string = StringParser()
as_number = NumberParser()


__all__ = (
    "OptionArgument",
    "ValueParser",
    "BooleanParser",
    "StringParser",
    "NumberParser",
    "FunctionParser",
    "as_boolean",
    "as_string",
    "as_number",
)
