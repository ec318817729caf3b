import re
from typing import Any, Optional

from lispread.lang import pair as lpair
from lispread.lang import sentinel
from lispread.lang import vector as vec
from lispread.lang.character import Character
from lispread.lang.interfaces import ValueModel
from lispread.lang.symbol import DEFAULT_TABLE, Symbol, SymbolTable

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
integer_literal = re.compile(r"([+-]?)([0-9A-Za-z]+)")

_STR_ESCAPE_CHARS = {
    '"': '"',
    "\\": "\\",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


def interpret_escapes(s: str) -> str:
    """Replace backslash escape sequences in `s` with the characters they name.

    Escapes without a name in the table above stand for the escaped character
    itself."""
    chars: list[str] = []
    it = iter(s)
    for char in it:
        if char == "\\":
            char = next(it, "\\")
            chars.append(_STR_ESCAPE_CHARS.get(char, char))
        else:
            chars.append(char)
    return "".join(chars)


def parse_integer(s: str, radix: int) -> Optional[int]:
    """Return the integer denoted by `s` in `radix`, or None.

    Only an optional sign followed by digits of the radix are accepted; Python
    literal affordances such as underscores and `0x` prefixes are not."""
    match = integer_literal.fullmatch(s)
    if match is None:
        return None
    sign, digits = match.groups()
    valid = _DIGITS[:radix]
    if not all(c in valid for c in digits.lower()):
        return None
    v = int(digits, base=radix)
    return -v if sign == "-" else v


class DefaultValueModel(ValueModel):
    """Value model built from the data types in `lispread.lang`.

    Lists are chains of `Pair` ending in `NIL`, strings are Python `str`, numbers
    are Python `int`, and symbols are interned in a `SymbolTable` (by default the
    process-wide table, so symbols read by different readers are identical).

    If `interpret_escapes` is True, backslash escapes in string literals are
    interpreted. If `nil_alias` is given, the symbol with that name reads as the
    empty list."""

    __slots__ = ("_symbols", "_interpret_escapes", "_nil_symbol")

    def __init__(
        self,
        symbols: Optional[SymbolTable] = None,
        interpret_escapes: bool = False,
        nil_alias: Optional[str] = None,
    ) -> None:
        self._symbols = symbols if symbols is not None else DEFAULT_TABLE
        self._interpret_escapes = interpret_escapes
        self._nil_symbol = (
            self._symbols.intern(nil_alias) if nil_alias is not None else None
        )

    @property
    def symbols(self) -> SymbolTable:
        return self._symbols

    def make_pair(self, first: Any, rest: Any) -> lpair.Pair:
        return lpair.cons(first, rest)

    def set_rest(self, pair: lpair.Pair, rest: Any) -> None:
        pair.rest = rest

    def make_string(self, s: str) -> str:
        return s

    def post_process_string(self, v: str) -> str:
        if self._interpret_escapes:
            return interpret_escapes(v)
        return v

    def intern_symbol(self, name: str) -> Symbol:
        return self._symbols.intern(name)

    def parse_number(self, s: str, radix: int) -> Any:
        n = parse_integer(s, radix)
        return sentinel.FALSE if n is None else n

    def list_to_vector(self, lst: Any) -> vec.Vector:
        if lst is sentinel.NIL:
            return vec.v()
        return vec.vector(lst)

    def make_character(self, codepoint: int) -> Character:
        return Character(codepoint)

    @property
    def nil(self) -> Any:
        return sentinel.NIL

    @property
    def false(self) -> Any:
        return sentinel.FALSE

    @property
    def true(self) -> Any:
        return sentinel.TRUE

    @property
    def unspecified(self) -> Any:
        return sentinel.UNSPECIFIED

    @property
    def end_of_stream(self) -> Any:
        return sentinel.EOS

    @property
    def logical_eof(self) -> Any:
        return sentinel.LOGICAL_EOF

    @property
    def nil_symbol(self) -> Optional[Symbol]:
        return self._nil_symbol
