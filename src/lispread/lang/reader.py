# pylint: disable=too-many-branches,too-many-return-statements

import io
import logging
import re
from collections.abc import Iterable
from typing import Any, Callable, NoReturn, Optional, Union

import attr
from typing_extensions import TypedDict, Unpack

from lispread.lang.exception import (
    InvalidNumberLiteralError,
    MalformedDottedListError,
    SyntaxError,
    UnexpectedCharacterError,
    UnexpectedEOFError,
    UnknownCharacterNameError,
    UnsupportedHashSequenceError,
)
from lispread.lang.interfaces import CharacterSource, DispatchResult, ValueModel
from lispread.lang.model import DefaultValueModel
from lispread.logconfig import TRACE

logger = logging.getLogger(__name__)

whitespace_chars = re.compile(r"[ \t\n\v\f\r]")
alpha_chars = re.compile(r"[A-Za-z]")
symbol_chars = re.compile(r"[0-9A-Za-z~!@$%&*_+\-=:<>^.?/|]")

DispatchFn = Callable[["ReaderContext", str], Optional[DispatchResult]]

DOT = "."
QUOTE = "quote"
QUASIQUOTE = "quasiquote"
UNQUOTE = "unquote"
UNQUOTE_SPLICING = "unquote-splicing"

_CHAR_NAMES = {"space": " ", "newline": "\n"}
_RADIXES = {"b": 2, "o": 8, "d": 10, "x": 16}
_EXACTNESS_CHARS = frozenset("eEiI")


class ReaderOptions(TypedDict, total=False):
    bracket_lists: bool
    dispatch: Optional[DispatchFn]
    init_line: Optional[int]
    init_column: Optional[int]


class StreamReader(CharacterSource):
    """A character source over a text stream with one character of lookahead.

    The location properties describe the most recently consumed character. Lines
    are counted from `init_line` (default 1) and columns from one past
    `init_column` (default 0)."""

    __slots__ = ("_stream", "_pending", "_prev", "_line", "_col")

    def __init__(
        self,
        stream: io.TextIOBase,
        init_line: Optional[int] = None,
        init_column: Optional[int] = None,
    ) -> None:
        self._stream = stream
        self._pending: Optional[str] = None
        self._prev = ""
        self._line = init_line if init_line is not None else 1
        self._col = init_column if init_column is not None else 0

    @property
    def name(self) -> Optional[str]:
        return getattr(self._stream, "name", None)

    @property
    def line(self) -> int:
        return self._line

    @property
    def col(self) -> int:
        return self._col

    @property
    def loc(self) -> tuple[int, int]:
        return self._line, self._col

    def _update_loc(self, c: str) -> None:
        if self._prev == "\n" or (self._prev == "\r" and c != "\n"):
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        self._prev = c

    def peek_char(self) -> str:
        if self._pending is None:
            self._pending = self._stream.read(1)
        return self._pending

    def read_char(self) -> str:
        c = self.peek_char()
        if c == "":
            return c
        self._pending = None
        self._update_loc(c)
        return c


class ReaderContext:
    __slots__ = (
        "_reader",
        "_model",
        "_bracket_lists",
        "_dispatch",
        "_dot",
        "_prefixes",
    )

    def __init__(
        self,
        reader: CharacterSource,
        model: Optional[ValueModel] = None,
        bracket_lists: bool = True,
        dispatch: Optional[DispatchFn] = None,
    ) -> None:
        self._reader = reader
        self._model = model if model is not None else DefaultValueModel()
        self._bracket_lists = bracket_lists
        self._dispatch = dispatch
        self._dot = self._model.intern_symbol(DOT)
        self._prefixes = {
            "'": self._model.intern_symbol(QUOTE),
            "`": self._model.intern_symbol(QUASIQUOTE),
            ",": self._model.intern_symbol(UNQUOTE),
            ",@": self._model.intern_symbol(UNQUOTE_SPLICING),
        }

    @property
    def reader(self) -> CharacterSource:
        return self._reader

    @property
    def model(self) -> ValueModel:
        return self._model

    @property
    def bracket_lists(self) -> bool:
        return self._bracket_lists

    @property
    def dispatch(self) -> Optional[DispatchFn]:
        return self._dispatch

    @property
    def dot(self) -> Any:
        return self._dot

    def prefix_symbol(self, prefix: str) -> Any:
        """Return the symbol a quote-family prefix (`'`, `` ` ``, `,` or `,@`)
        wraps its form with."""
        return self._prefixes[prefix]

    def is_terminator(self, c: str) -> bool:
        """Return True if `c` ends a token."""
        return (
            c == ""
            or c in ";()#"
            or whitespace_chars.match(c) is not None
            or (self._bracket_lists and c in "[]")
        )

    def error(self, tp: type[SyntaxError], msg: str) -> NoReturn:
        """Signal a syntax error of type `tp` through the value model, hydrated with
        filename, line, and column metadata from the reader if it exists."""
        e = tp(
            msg, line=self._reader.line, col=self._reader.col, filename=self._reader.name
        )
        logger.debug("Reader error: %s", e)
        self._model.signal_error(e)
        # signal_error must not return
        raise e


# Returned by productions which consumed input without completing a datum.
_CONTINUE = object()
_EOF = object()

_ELEMENTS, _DOTTED_CDR, _CLOSE = range(3)


@attr.define
class _ListFrame:
    terminator: str
    head: Any
    is_vector: bool = False
    tail: Any = None
    state: int = _ELEMENTS

    @property
    def coll_name(self) -> str:
        return "vector" if self.is_vector else "list"

    def add(self, ctx: ReaderContext, v: Any) -> None:
        model = ctx.model
        if self.state == _DOTTED_CDR:
            model.set_rest(self.tail, v)
            self.state = _CLOSE
        elif model.eq(v, ctx.dot):
            if self.tail is None:
                ctx.error(MalformedDottedListError, "Expected an element before '.'")
            if self.is_vector:
                ctx.error(MalformedDottedListError, "Unexpected '.' in vector")
            self.state = _DOTTED_CDR
        else:
            p = model.make_pair(v, model.nil)
            if self.tail is None:
                self.head = p
            else:
                model.set_rest(self.tail, p)
            self.tail = p

    def finish(self, ctx: ReaderContext) -> Any:
        if self.is_vector:
            return ctx.model.list_to_vector(self.head)
        return self.head

    def eof(self, ctx: ReaderContext) -> NoReturn:
        ctx.error(UnexpectedEOFError, f"Unexpected EOF in {self.coll_name}")


@attr.define
class _PrefixFrame:
    prefix: str
    symbol: Any

    def eof(self, ctx: ReaderContext) -> NoReturn:
        ctx.error(UnexpectedEOFError, f"Unexpected EOF after '{self.prefix}'")


@attr.define
class _DatumCommentFrame:
    pass


_Frame = Union[_ListFrame, _PrefixFrame, _DatumCommentFrame]


def _skip_whitespace(ctx: ReaderContext) -> str:
    """Consume whitespace and line comments, returning (but not consuming) the
    next character."""
    reader = ctx.reader
    while True:
        char = reader.peek_char()
        while char != "" and whitespace_chars.match(char):
            reader.read_char()
            char = reader.peek_char()
        if char != ";":
            return char
        logger.log(TRACE, "Line comment at %s:%s", reader.line, reader.col)
        _skip_line(ctx)


def _skip_line(ctx: ReaderContext) -> None:
    """Consume characters up to, but not including, the next newline."""
    reader = ctx.reader
    while True:
        char = reader.peek_char()
        if char == "" or char == "\n":
            return
        reader.read_char()


def _skip_block_comment(ctx: ReaderContext) -> None:
    """Consume a (possibly nested) block comment whose opening `#|` has been
    read."""
    reader = ctx.reader
    level = 1
    while level > 0:
        char = reader.read_char()
        if char == "":
            ctx.error(UnexpectedEOFError, "Unterminated block comment")
        if char == "|" and reader.peek_char() == "#":
            reader.read_char()
            level -= 1
        elif char == "#" and reader.peek_char() == "|":
            reader.read_char()
            level += 1


def _read_token(
    ctx: ReaderContext, lead: str, radix: int = 10, skip_radix_char: bool = False
) -> Any:
    """Return a number or symbol from the input stream, beginning with the already
    consumed character `lead`.

    If `skip_radix_char` is True, `lead` is the radix indicator of a `#x` style
    prefix and the token must be a number."""
    reader = ctx.reader
    model = ctx.model
    chars = [lead]
    while not ctx.is_terminator(reader.peek_char()):
        chars.append(reader.read_char())

    token = "".join(chars)
    num_str = token[1:] if skip_radix_char else token
    n = model.parse_number(num_str, radix)
    if not model.eq(n, model.false):
        return n
    if skip_radix_char:
        ctx.error(
            InvalidNumberLiteralError,
            f"Invalid number literal '{num_str}' for radix {radix}",
        )

    sym = model.intern_symbol(token)
    nil_sym = model.nil_symbol
    if nil_sym is not None and model.eq(sym, nil_sym):
        return model.nil
    return sym


def _read_str(ctx: ReaderContext) -> Any:
    """Return a string from the input stream.

    Escaped characters are kept along with their backslash; interpreting them is
    left to the value model."""
    reader = ctx.reader
    chars: list[str] = []
    while True:
        char = reader.read_char()
        if char == "":
            ctx.error(UnexpectedEOFError, "Unexpected EOF in string")
        if char == '"':
            break
        chars.append(char)
        if char == "\\":
            char = reader.read_char()
            if char == "":
                ctx.error(UnexpectedEOFError, "Unexpected EOF in string")
            chars.append(char)

    model = ctx.model
    return model.post_process_string(model.make_string("".join(chars)))


def _read_character(ctx: ReaderContext) -> Any:
    """Return a character from the input stream, after `#\\` has been read.

    `#\\space` and `#\\newline` (in any case) name their characters; any other
    single character stands for itself."""
    reader = ctx.reader
    first = reader.read_char()
    if first == "":
        ctx.error(UnexpectedEOFError, "Unexpected EOF after '#\\'")

    chars = [first]
    if alpha_chars.match(first):
        while True:
            char = reader.peek_char()
            if not alpha_chars.match(char) or ctx.is_terminator(char):
                break
            chars.append(reader.read_char())

    name = "".join(chars)
    named = _CHAR_NAMES.get(name.lower())
    if named is not None:
        return ctx.model.make_character(ord(named))
    if len(chars) > 1:
        ctx.error(UnknownCharacterNameError, f"Unknown character name '#\\{name}'")
    return ctx.model.make_character(ord(first))


def _read_hash(ctx: ReaderContext, stack: list[_Frame]) -> Any:
    """Return a value from a `#` dispatch sequence, or `_CONTINUE` if the sequence
    was a comment or opened a vector."""
    reader = ctx.reader
    model = ctx.model
    while True:
        char = reader.peek_char()
        if char == "":
            ctx.error(UnexpectedEOFError, "Unexpected EOF after '#'")
        elif char == "!":
            logger.log(TRACE, "Shebang comment at %s:%s", reader.line, reader.col)
            _skip_line(ctx)
            return _CONTINUE
        elif char == "|":
            reader.read_char()
            _skip_block_comment(ctx)
            return _CONTINUE
        elif char == ";":
            reader.read_char()
            stack.append(_DatumCommentFrame())
            return _CONTINUE
        elif char == "(":
            reader.read_char()
            stack.append(_ListFrame(")", model.nil, is_vector=True))
            return _CONTINUE
        elif char == "\\":
            reader.read_char()
            return _read_character(ctx)
        elif char in {"f", "F"}:
            reader.read_char()
            return model.false
        elif char in {"t", "T"} and model.true is not None:
            reader.read_char()
            return model.true
        elif char in {"u", "U"} and model.unspecified is not None:
            reader.read_char()
            return model.unspecified
        elif char == "#" and model.logical_eof is not None:
            reader.read_char()
            return model.logical_eof
        elif char in _EXACTNESS_CHARS:
            reader.read_char()
            continue
        elif (radix := _RADIXES.get(char.lower())) is not None:
            reader.read_char()
            return _read_token(ctx, char, radix=radix, skip_radix_char=True)
        break

    reader.read_char()
    if ctx.dispatch is None:
        ctx.error(UnsupportedHashSequenceError, f"Unsupported sequence '#{char}'")
    result = ctx.dispatch(ctx, char)
    if result is None:
        return _CONTINUE
    return result.value


def _read_datum(ctx: ReaderContext, stack: list[_Frame]) -> Any:
    """Read the start of the next form from the input stream.

    Scalars are returned directly. Compound forms push a frame onto `stack` and
    return `_CONTINUE`, as do comments. Returns `_EOF` at the end of input."""
    reader = ctx.reader
    char = _skip_whitespace(ctx)
    if char == "":
        return _EOF
    reader.read_char()
    logger.log(TRACE, "Dispatching on '%s' at %s:%s", char, reader.line, reader.col)

    if char in {"'", "`", ","}:
        prefix = char
        if char == "," and reader.peek_char() == "@":
            reader.read_char()
            prefix = ",@"
        stack.append(_PrefixFrame(prefix, ctx.prefix_symbol(prefix)))
    elif char == "(":
        stack.append(_ListFrame(")", ctx.model.nil))
    elif char == "[" and ctx.bracket_lists:
        stack.append(_ListFrame("]", ctx.model.nil))
    elif char == "#":
        return _read_hash(ctx, stack)
    elif char == '"':
        return _read_str(ctx)
    elif symbol_chars.match(char) or ord(char) >= 128:
        return _read_token(ctx, char)
    else:
        ctx.error(UnexpectedCharacterError, f"Unexpected character '{char}'")
    return _CONTINUE


def _complete(ctx: ReaderContext, stack: list[_Frame], v: Any) -> Any:
    """Hand the completed form `v` to the innermost open frame, closing prefix
    frames as they are satisfied.

    Returns the finished top level form, or `_CONTINUE` if frames remain open."""
    model = ctx.model
    while stack:
        frame = stack[-1]
        if isinstance(frame, _DatumCommentFrame):
            stack.pop()
            if v is _EOF:
                continue
            logger.log(TRACE, "Discarded datum comment")
            return _CONTINUE
        if v is _EOF:
            frame.eof(ctx)
        if isinstance(frame, _PrefixFrame):
            stack.pop()
            v = model.make_pair(frame.symbol, model.make_pair(v, model.nil))
            continue
        frame.add(ctx, v)
        return _CONTINUE
    return v


def read_form(ctx: ReaderContext) -> Any:
    """Read exactly one form from the reader in `ctx`, returning the value model's
    `end_of_stream` sentinel at the end of input.

    Nested lists, vectors, quoted forms and datum comments are tracked on an
    explicit stack rather than by recursion, so the depth of input nesting is not
    limited by the Python recursion limit."""
    reader = ctx.reader
    stack: list[_Frame] = []
    while True:
        top = stack[-1] if stack else None
        if isinstance(top, _ListFrame) and top.state != _DOTTED_CDR:
            char = _skip_whitespace(ctx)
            if char == "":
                top.eof(ctx)
            if top.state == _CLOSE:
                reader.read_char()
                if char != top.terminator:
                    ctx.error(
                        MalformedDottedListError,
                        f"Expected '{top.terminator}' after dotted tail; "
                        f"found '{char}'",
                    )
                stack.pop()
                v = top.finish(ctx)
            elif char == top.terminator:
                reader.read_char()
                stack.pop()
                v = top.finish(ctx)
            else:
                v = _read_datum(ctx, stack)
        else:
            v = _read_datum(ctx, stack)

        if v is _CONTINUE:
            continue
        v = _complete(ctx, stack, v)
        if v is _CONTINUE:
            continue
        if v is _EOF:
            return ctx.model.end_of_stream
        return v


def _context(
    reader: CharacterSource,
    model: Optional[ValueModel],
    opts: ReaderOptions,
) -> ReaderContext:
    return ReaderContext(
        reader,
        model=model,
        bracket_lists=opts.get("bracket_lists", True),
        dispatch=opts.get("dispatch"),
    )


def read_one(
    source: CharacterSource,
    model: Optional[ValueModel] = None,
    **kwargs: Unpack[ReaderOptions],
) -> Any:
    """Read a single form from a `CharacterSource`, returning the value model's
    `end_of_stream` sentinel if the input is exhausted.

    Sources hold lookahead between calls, so successive forms are read by
    passing the same source again. Raw text streams are rejected; wrap them
    once in a `StreamReader`."""
    if not isinstance(source, CharacterSource):
        raise TypeError(
            f"read_one requires a CharacterSource, not {type(source).__name__}; "
            "wrap text streams in a StreamReader"
        )
    return read_form(_context(source, model, kwargs))


def read(
    stream: io.TextIOBase,
    model: Optional[ValueModel] = None,
    **kwargs: Unpack[ReaderOptions],
) -> Iterable[Any]:
    """Read the contents of a stream as a sequence of Lisp forms.

    Callers may supply a value model to build the forms with; by default forms
    are built from the types in `lispread.lang`. Callers may disable `[...]`
    bracketed lists and may supply a `dispatch` function which is called with the
    reader context and the character following `#` when no builtin `#` sequence
    matches it.

    The optional `init_line` and `init_column` specify where the `stream`
    location starts in the broader context, if not from the start.

    The caller is responsible for closing the input stream."""
    reader = StreamReader(
        stream, init_line=kwargs.get("init_line"), init_column=kwargs.get("init_column")
    )
    ctx = _context(reader, model, kwargs)
    eos = ctx.model.end_of_stream
    while True:
        form = read_form(ctx)
        if ctx.model.eq(form, eos):
            return
        yield form


def read_str(
    s: str,
    model: Optional[ValueModel] = None,
    **kwargs: Unpack[ReaderOptions],
) -> Iterable[Any]:
    """Read the contents of a string as a sequence of Lisp forms.

    Keyword arguments to this function have the same meanings as those of
    lispread.lang.reader.read."""
    with io.StringIO(s) as buf:
        yield from read(buf, model=model, **kwargs)


def read_file(
    filename: str,
    model: Optional[ValueModel] = None,
    **kwargs: Unpack[ReaderOptions],
) -> Iterable[Any]:
    """Read the contents of a file as a sequence of Lisp forms.

    Keyword arguments to this function have the same meanings as those of
    lispread.lang.reader.read."""
    with open(filename, encoding="utf-8") as f:
        yield from read(f, model=model, **kwargs)
