"""
Usage lexer: turns a usage string into flag, punctuation and argument tokens.

Token kinds (a closed union, discriminated by class)
- ShortFlag:    -q, -1337
- LongFlag:     --quiet, --dry-run
- Punctuation:  "," and "="; what they mean is up to the parser
- ArgumentToken: <name>, [name], <name...>, [name...]

Every token keeps its exact source slice (`raw`) and start location (`loc`) so
that parsers can report errors against the original usage string.

The tokenizer holds at most one token of lookahead in an explicit slot:
- peek() reads a token into the slot if it is empty and returns it.
- consume_next_token() empties the slot, or reads a fresh token.
"""
import collections
import re

from .faults import FaultCode

ShortFlag = collections.namedtuple("ShortFlag", ("name", "raw", "loc"))
LongFlag = collections.namedtuple("LongFlag", ("name", "raw", "loc"))
Punctuation = collections.namedtuple("Punctuation", ("value", "raw", "loc"))
ArgumentToken = collections.namedtuple("ArgumentToken", ("name", "required", "variadic", "raw", "loc"))

_WHITESPACE = re.compile(r"\s")
_WORD = re.compile(r"\w")
_NAME = re.compile(r"[\w-]")

# Human names used in messages ("expected a flag, found argument ...").
_LABELS = {
    ShortFlag: "short flag",
    LongFlag: "long flag",
    Punctuation: "punctuation",
    ArgumentToken: "argument",
}


def describe(token, /):
    """
    Return a short human label for a token ("short flag '-q'").
    """
    return f"{_LABELS[type(token)]} {token.raw!r}"


class Tokenizer:
    def __init__(self, stream, /):
        self._stream = stream
        self._peeked = None

    def _read_while(self, pattern):
        characters = []
        while not self._stream.eof() and pattern.fullmatch(self._stream.peek()):
            characters.append(self._stream.consume_next_char())
        return "".join(characters)

    def _discard_whitespace(self):
        self._read_while(_WHITESPACE)

    def _is_char(self, char):
        if self._stream.eof():
            raise self._stream.generate_error(
                f"Usage string ended unexpectedly (looking for {char!r}).",
                loc=self._stream.get_loc(),
                code=FaultCode.UNEXPECTED_END,
            )
        return self._stream.peek() == char

    # --color, --dry-run
    def _read_long_flag(self, loc):
        self._stream.consume_next_char()
        name = self._read_while(_NAME)
        if not name:
            raise self._stream.generate_error(
                "Expected a flag name after '--'.",
                loc=loc,
                length=2,
                code=FaultCode.MALFORMED_FLAG,
            )
        return LongFlag(name, "--" + name, loc)

    # -q, -1337
    def _read_short_flag(self, loc):
        name = self._read_while(_WORD)
        if not name:
            raise self._stream.generate_error(
                "Expected a flag name after '-'.",
                loc=loc,
                code=FaultCode.MALFORMED_FLAG,
            )

        # Something like "-name" or "-port".
        if len(name) > 1 and not name.isdigit():
            raise self._stream.generate_error(
                "Only one short flag is allowed per usage definition.",
                loc=loc,
                length=len(name) + 1,
                code=FaultCode.CLUSTERED_SHORT_FLAG,
            )
        return ShortFlag(name, "-" + name, loc)

    def _read_flag(self):
        loc = self._stream.get_loc()
        self._stream.consume_next_char()

        # Two hyphens back to back can only mean one thing.
        if not self._stream.eof() and self._stream.peek() == "-":
            return self._read_long_flag(loc)
        return self._read_short_flag(loc)

    def _read_punctuation(self):
        loc = self._stream.get_loc()
        value = self._stream.consume_next_char()
        return Punctuation(value, value, loc)

    def _expect_closing(self, expected, loc, raw):
        """
        Consume the expected delimiter, reporting failures at the argument start.
        """
        if self._stream.eof():
            raise self._stream.generate_error(
                f"Argument {raw!r} is never closed (expected {expected!r}).",
                loc=loc,
                length=len(raw),
                code=FaultCode.MALFORMED_ARGUMENT,
            )

        actual = self._stream.consume_next_char()
        if actual != expected:
            raise self._stream.generate_error(
                f"Argument {raw + actual!r} should be closed with {expected!r}, got {actual!r}.",
                loc=loc,
                length=len(raw) + 1,
                code=FaultCode.MALFORMED_ARGUMENT,
            )
        return actual

    # <required>, [optional], <variadic...>, [values...]
    def _read_argument(self):
        loc = self._stream.get_loc()
        opening = self._stream.consume_next_char()
        required = opening == "<"
        closing = ">" if required else "]"

        raw = opening + (name := self._read_while(_NAME))

        variadic = not self._stream.eof() and self._stream.peek() == "."
        if variadic:
            for _ in range(3):
                raw += self._expect_closing(".", loc, raw)

        raw += self._expect_closing(closing, loc, raw)
        return ArgumentToken(name, required, variadic, raw, loc)

    def _read_token(self):
        if self._stream.eof():
            raise IndexError("end of input reached")

        if self._is_char(",") or self._is_char("="):
            return self._read_punctuation()
        if self._is_char("-"):
            return self._read_flag()
        if self._is_char("<") or self._is_char("["):
            return self._read_argument()

        raise self._stream.generate_error(
            f"Unexpected character {self._stream.peek()!r}.",
            loc=self._stream.get_loc(),
            code=FaultCode.UNEXPECTED_CHARACTER,
        )

    def eof(self):
        if self._peeked is not None:
            return False
        self._discard_whitespace()
        return self._stream.eof()

    def peek(self):
        """
        Return the next token without consuming it (cached until consumed).
        """
        if self._peeked is None:
            self._peeked = self.consume_next_token()
        return self._peeked

    def consume_next_token(self):
        if self._peeked is not None:
            token, self._peeked = self._peeked, None
            return token

        self._discard_whitespace()
        return self._read_token()

    def is_type(self, *types):
        return isinstance(self.peek(), types)

    def report_token(self, token, message, /, **options):
        """
        Build (not raise) a syntax error underlining the whole token.
        """
        return self._stream.generate_error(message, loc=token.loc, length=len(token.raw), **options)


__all__ = (
    "ShortFlag",
    "LongFlag",
    "Punctuation",
    "ArgumentToken",
    "Tokenizer",
    "describe",
)
