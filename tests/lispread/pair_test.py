import pytest

from lispread.lang import pair as lpair
from lispread.lang.sentinel import NIL
from lispread.lang.symbol import symbol


def test_cons():
    p = lpair.cons(1, 2)
    assert 1 == p.first
    assert 2 == p.rest

    p = lpair.cons(1)
    assert NIL is p.rest


def test_pair_is_mutable():
    p = lpair.cons(1)
    p.rest = lpair.cons(2)
    assert lpair.plist(1, 2) == p


def test_plist():
    assert NIL is lpair.plist()
    assert symbol("a") is lpair.plist(tail=symbol("a"))

    l = lpair.plist(1, 2, 3)
    assert 1 == l.first
    assert 2 == l.rest.first
    assert 3 == l.rest.rest.first
    assert NIL is l.rest.rest.rest

    l = lpair.plist(1, 2, tail=3)
    assert 2 == l.rest.first
    assert 3 == l.rest.rest


def test_from_iterable():
    assert lpair.plist(1, 2, 3) == lpair.from_iterable(range(1, 4))
    assert lpair.plist(1, tail=2) == lpair.from_iterable([1], tail=2)


def test_pair_equals():
    assert lpair.plist(1, 2) == lpair.plist(1, 2)
    assert lpair.plist(1, tail=2) == lpair.cons(1, 2)
    assert lpair.plist(1, lpair.plist(2)) == lpair.plist(1, lpair.plist(2))

    assert lpair.plist(1, 2) != lpair.plist(1, 2, 3)
    assert lpair.plist(1, 2, 3) != lpair.plist(1, 2)
    assert lpair.plist(1, 2) != lpair.plist(1, tail=2)
    assert lpair.plist(1, 2) != [1, 2]


def test_pair_is_unhashable():
    with pytest.raises(TypeError):
        hash(lpair.cons(1, 2))


def test_pair_iter():
    assert [1, 2, 3] == list(lpair.plist(1, 2, 3))
    assert [1, 2, 3] == lpair.plist(1, 2, 3).to_list()

    with pytest.raises(TypeError):
        list(lpair.plist(1, 2, tail=3))


def test_pair_is_proper():
    assert lpair.plist(1, 2).is_proper
    assert not lpair.cons(1, 2).is_proper


@pytest.mark.parametrize(
    "o,r",
    [
        (lpair.plist(1), "(1)"),
        (lpair.plist(1, 2, 3), "(1 2 3)"),
        (lpair.cons(1, 2), "(1 . 2)"),
        (lpair.plist(symbol("a"), symbol("b"), tail=symbol("c")), "(a b . c)"),
        (lpair.plist(lpair.plist(1), "s"), "((1) 's')"),
        (lpair.plist(NIL), "(())"),
    ],
)
def test_pair_repr(o, r: str):
    assert r == repr(o)


def test_deeply_nested_pairs():
    def nested(depth: int, leaf):
        l = leaf
        for _ in range(depth):
            l = lpair.cons(l, lpair.plist(depth))
        return l

    depth = 20_000
    assert nested(depth, 1) == nested(depth, 1)
    assert nested(depth, 1) != nested(depth, 2)
    assert nested(depth, 1) != nested(depth - 1, 1)
    assert repr(nested(2, 1)) == "((1 2) 2)"
    assert repr(nested(depth, 1)).startswith("(" * depth + "1 ")
