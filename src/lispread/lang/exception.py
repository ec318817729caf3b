import functools
import os
import sys
import traceback
from types import TracebackType
from typing import Optional, Union

import attr


# pylint:disable=redefined-builtin
@attr.define(repr=False, str=False)
class SyntaxError(Exception):
    message: str
    line: Optional[int] = None
    col: Optional[int] = None
    filename: Optional[str] = None

    def __repr__(self):
        return (
            f"{type(self).__module__}.{type(self).__name__}({self.message}, "
            f"{self.line}, {self.col}, filename={self.filename})"
        )

    def __str__(self):
        keys: dict[str, Union[str, int]] = {}
        if self.filename is not None:
            keys["file"] = self.filename
        if self.line is not None and self.col is not None:
            keys["line"] = self.line
            keys["col"] = self.col
        if not keys:
            return self.message
        else:
            details = ", ".join(f"{key}: {val}" for key, val in keys.items())
            return f"{self.message} ({details})"


class UnexpectedEOFError(SyntaxError):
    """Syntax Error type raised when the reader encounters the end of input while
    a form (list, string, block comment, etc.) is still open.

    Useful for interactive callers, where unexpected EOF errors likely indicate
    the user is still typing a multiline form."""


class UnexpectedCharacterError(SyntaxError):
    """Raised when a form begins with a character no production accepts."""


class MalformedDottedListError(SyntaxError):
    """Raised for a `.` with no preceding element, or when anything other than
    the list terminator follows a dotted tail."""


class InvalidNumberLiteralError(SyntaxError):
    """Raised when a token forced numeric by a `#b`, `#o`, `#d` or `#x` prefix
    does not parse in that radix."""


class UnknownCharacterNameError(SyntaxError):
    pass


class UnsupportedHashSequenceError(SyntaxError):
    pass


@functools.singledispatch
def format_exception(
    e: Optional[BaseException],
    tp: Optional[type[BaseException]] = None,
    tb: Optional[TracebackType] = None,
) -> list[str]:
    """Format an exception into something readable, returning a list of newline
    terminated strings.

    For most Python exceptions, this will just be the result from calling
    `traceback.format_exception`. Reader syntax errors get a custom rendering
    which leads with the message and source location."""
    if isinstance(e, BaseException):
        if tp is None:
            tp = type(e)
        if tb is None:
            tb = e.__traceback__
    return traceback.format_exception(tp, e, tb)


@format_exception.register(SyntaxError)
def format_syntax_error(  # pylint: disable=unused-argument
    e: SyntaxError,
    tp: Optional[type[Exception]] = None,
    tb: Optional[TracebackType] = None,
) -> list[str]:
    context_exc: Optional[BaseException] = e.__cause__

    lines = [os.linesep]
    if context_exc is not None:
        lines.append(f"  exception: {type(context_exc)} from {type(e)}{os.linesep}")
    else:
        lines.append(f"  exception: {type(e)}{os.linesep}")
    if context_exc is None:
        lines.append(f"    message: {e.message}{os.linesep}")
    else:
        lines.append(f"    message: {e.message}: {context_exc}{os.linesep}")

    if e.line is not None and e.col is not None:
        line_num = f"{e.line}:{e.col}"
    elif e.line is not None:
        line_num = str(e.line)
    else:
        line_num = ""

    if e.filename is not None:
        lines.append(
            f"   location: {e.filename}:{line_num or 'NO_SOURCE_LINE'}{os.linesep}"
        )
    elif line_num:
        lines.append(f"       line: {line_num}{os.linesep}")

    return lines


def print_exception(
    e: Optional[BaseException],
    tp: Optional[type[BaseException]] = None,
    tb: Optional[TracebackType] = None,
) -> None:
    """Print the given exception `e` to stderr using `format_exception`."""
    print("".join(format_exception(e, tp, tb)), file=sys.stderr)
