from collections.abc import Iterable, Iterator
from typing import Any

from lispread.lang.sentinel import NIL


class Pair:
    """Mutable two field cell. Lists are chains of pairs ending in `NIL`.

    Do not instantiate directly. Instead use the cons() and plist() factory
    functions below."""

    __slots__ = ("first", "rest")

    def __init__(self, first: Any, rest: Any = NIL) -> None:
        self.first = first
        self.rest = rest

    def __iter__(self) -> Iterator[Any]:
        node: Any = self
        while isinstance(node, Pair):
            yield node.first
            node = node.rest
        if node is not NIL:
            raise TypeError("Cannot iterate over an improper list")

    def __eq__(self, other):
        if not isinstance(other, Pair):
            return NotImplemented
        pending: list[tuple[Any, Any]] = [(self, other)]
        while pending:
            a, b = pending.pop()
            if a is b:
                continue
            if isinstance(a, Pair) and isinstance(b, Pair):
                pending.append((a.rest, b.rest))
                pending.append((a.first, b.first))
            elif isinstance(a, Pair) or isinstance(b, Pair) or a != b:
                return False
        return True

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self):
        # Work items are (is_text, item); nested pairs expand onto the stack
        # so arbitrarily deep lists print without recursion.
        out: list[str] = []
        work: list[tuple[bool, Any]] = [(False, self)]
        while work:
            is_text, item = work.pop()
            if is_text:
                out.append(item)
            elif isinstance(item, Pair):
                members = []
                node: Any = item
                while isinstance(node, Pair):
                    members.append(node.first)
                    node = node.rest
                work.append((True, ")"))
                if node is not NIL:
                    work.append((False, node))
                    work.append((True, " . "))
                for i, member in enumerate(reversed(members)):
                    if i > 0:
                        work.append((True, " "))
                    work.append((False, member))
                work.append((True, "("))
            else:
                out.append(repr(item))
        return "".join(out)

    @property
    def is_proper(self) -> bool:
        node: Any = self
        while isinstance(node, Pair):
            node = node.rest
        return node is NIL

    def to_list(self) -> list:
        return list(self)


def cons(first: Any, rest: Any = NIL) -> Pair:
    """Create a new pair."""
    return Pair(first, rest)


def plist(*members: Any, tail: Any = NIL) -> Any:
    """Create a list of pairs from members, ending in `tail`.

    Returns `NIL` if there are no members and no tail is given."""
    return from_iterable(members, tail=tail)


def from_iterable(members: Iterable[Any], tail: Any = NIL) -> Any:
    result = tail
    for member in reversed(list(members)):
        result = Pair(member, result)
    return result
