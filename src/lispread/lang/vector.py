from collections.abc import Iterable
from typing import Any

from pyrsistent import PVector, pvector


class Vector:
    """Immutable vector value. Delegates internally to a pyrsistent.PVector.

    Do not instantiate directly. Instead use the vector() and v() factory
    functions below."""

    __slots__ = ("_inner",)

    def __init__(self, wrapped: PVector) -> None:
        self._inner = wrapped

    def __repr__(self):
        return "#({vec})".format(vec=" ".join(map(repr, self._inner)))

    def __eq__(self, other):
        if self is other:
            return True
        if isinstance(other, Vector):
            return self._inner == other._inner
        return NotImplemented

    def __getitem__(self, item):
        return self._inner[item]

    # Elements may be mutable pairs.
    __hash__ = None  # type: ignore[assignment]

    def __iter__(self):
        yield from self._inner

    def __len__(self):
        return len(self._inner)


def vector(members: Iterable[Any]) -> Vector:
    """Creates a new vector."""
    return Vector(pvector(members))


def v(*members: Any) -> Vector:
    """Creates a new vector from members."""
    return Vector(pvector(members))
