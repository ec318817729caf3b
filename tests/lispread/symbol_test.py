import pickle
import secrets
import threading

import pytest

from lispread.lang.symbol import DEFAULT_TABLE, Symbol, SymbolTable, symbol


def test_symbol_identity_equals():
    assert symbol("sym") is symbol("sym")
    assert symbol("sym") == symbol("sym")
    assert symbol("sym") is not symbol("Sym")
    assert symbol("sym") != symbol("other-sym")


def test_symbol_name_and_repr():
    sym = symbol("some-sym")
    assert "some-sym" == sym.name
    assert "some-sym" == repr(sym)


def test_find_symbol():
    table = SymbolTable()
    existing = table.intern("existing")

    assert existing is table.find("existing")
    assert None is table.find(f"s{secrets.token_hex(4)}")


def test_symbol_table_contains_and_len():
    table = SymbolTable()
    assert 0 == len(table)
    assert "a" not in table

    table.intern("a")
    table.intern("b")
    table.intern("a")

    assert 2 == len(table)
    assert "a" in table
    assert "b" in table


def test_separate_tables():
    table = SymbolTable()
    assert table.intern("sym") is not DEFAULT_TABLE.intern("sym")
    assert table.intern("sym") is symbol("sym", table=table)
    assert DEFAULT_TABLE.intern("sym") is symbol("sym")


def test_concurrent_interning():
    table = SymbolTable()
    results: list[Symbol] = []
    lock = threading.Lock()

    def intern_all():
        interned = [table.intern(f"sym-{i}") for i in range(100)]
        with lock:
            results.extend(interned)

    threads = [threading.Thread(target=intern_all) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert 100 == len(table)
    for sym in results:
        assert sym is table.find(sym.name)


@pytest.mark.parametrize(
    "o", [symbol("sym1"), symbol("very-long-name"), symbol("+"), symbol("λ")]
)
def test_symbol_pickleability(pickle_protocol: int, o: Symbol):
    assert o is pickle.loads(pickle.dumps(o, protocol=pickle_protocol))


def test_private_symbol_unpickles_into_default_table(pickle_protocol: int):
    table = SymbolTable()
    private = table.intern("private-sym")
    restored = pickle.loads(pickle.dumps(private, protocol=pickle_protocol))
    assert restored is not private
    assert restored is DEFAULT_TABLE.find("private-sym")
