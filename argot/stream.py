"""
Character cursor over a usage string.

SourceStream is the lowest layer of the usage grammar: the tokenizer pulls
characters from it one at a time and asks it for located syntax errors. The
cursor tracks zero-based line/column pairs so that every grammar error can
point at the exact slice of the usage string that caused it:

    Each option is only allowed one short flag.

      -q, -s
          ^^
"""
import collections

from .faults import FaultCode, UsageSyntaxError

Loc = collections.namedtuple("Loc", ("line", "column"))


def create_error_frame(source, /, *, loc, length=1):
    """
    Render the source line at `loc` with a caret underline of `length` characters.
    """
    lines = source.split("\n")
    text = lines[loc.line] if 0 <= loc.line < len(lines) else ""
    return text + "\n" + " " * loc.column + "^" * max(length, 1)


class SourceStream:
    """
    Character-addressable cursor over a usage string.

    peek() never advances; consume_next_char() always does. Both raise
    IndexError at the end of the input, so callers check eof() first.
    """

    def __init__(self, source, /):
        if not isinstance(source, str):
            raise TypeError("SourceStream() argument must be a string")
        self._source = source
        self._cursor = 0
        self._line = 0
        self._column = 0

    @property
    def source(self):
        return self._source

    def eof(self):
        return self._cursor >= len(self._source)

    def get_loc(self):
        return Loc(self._line, self._column)

    def peek(self):
        if self.eof():
            raise IndexError("attempted to read past the end of the source text")
        return self._source[self._cursor]

    def consume_next_char(self):
        character = self.peek()
        self._cursor += 1

        if character == "\n":
            self._line += 1
            self._column = 0
        else:
            self._column += 1

        return character

    def generate_error(self, message, /, *, loc, length=1, **options):
        """
        Build (not raise) a UsageSyntaxError framing `length` characters at `loc`.

        The bare message is kept under options["reason"] so callers can re-locate
        the error against a larger source without nesting frames.
        """
        frame = create_error_frame(self._source, loc=loc, length=length)
        indented = "\n".join("  " + line for line in frame.split("\n"))
        options.setdefault("code", FaultCode.UNEXPECTED_TOKEN)
        options.setdefault("title", "malformed usage")
        return UsageSyntaxError(
            f"{message}\n\n{indented}\n",
            reason=message,
            source=self._source,
            loc=loc,
            length=length,
            **options
        )


__all__ = (
    "Loc",
    "SourceStream",
    "create_error_frame",
)
