import threading
from typing import Optional

from pyrsistent import PMap, pmap


class Symbol:
    """Interned symbol. Symbols are compared by identity, so they must only be
    created through a `SymbolTable`."""

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self):
        return self._name

    def __reduce__(self):
        """Unpickle by interning the name in `DEFAULT_TABLE`.

        The table a symbol came from is not recorded, so a symbol from a private
        `SymbolTable` unpickles as the default table's symbol of that name, not
        as the original object."""
        return symbol, (self._name,)


class SymbolTable:
    """Thread-safe table mapping names to their canonical `Symbol`.

    Lookups read a persistent snapshot of the table, so only interning a new
    name takes the lock."""

    __slots__ = ("_lock", "_intern")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._intern: PMap = pmap()

    def __contains__(self, name: str) -> bool:
        return name in self._intern

    def __len__(self) -> int:
        return len(self._intern)

    def find(self, name: str) -> Optional[Symbol]:
        """Return the already-interned symbol named by `name`, if one exists."""
        return self._intern.get(name)

    def intern(self, name: str) -> Symbol:
        """Return the symbol named `name`, creating and interning it if this table
        has not seen the name before."""
        found = self._intern.get(name)
        if found is not None:
            return found
        with self._lock:
            found = self._intern.get(name)
            if found is not None:
                return found
            sym = Symbol(name)
            self._intern = self._intern.set(name, sym)
            return sym


DEFAULT_TABLE = SymbolTable()


def symbol(name: str, table: Optional[SymbolTable] = None) -> Symbol:
    """Return the symbol named `name` from `table` (the default table if none is
    given)."""
    return (table if table is not None else DEFAULT_TABLE).intern(name)
