from abc import ABC, abstractmethod
from typing import Any, NoReturn, Optional

import attr

from lispread.lang.exception import SyntaxError  # pylint: disable=redefined-builtin


class CharacterSource(ABC):
    """``CharacterSource`` types supply the reader with characters one at a time.

    End of input is signalled by the empty string ``""``, which must be returned
    by every subsequent call once input is exhausted."""

    __slots__ = ()

    @abstractmethod
    def read_char(self) -> str:
        """Consume and return the next character."""
        raise NotImplementedError()

    @abstractmethod
    def peek_char(self) -> str:
        """Return the next character without consuming it."""
        raise NotImplementedError()

    @property
    def name(self) -> Optional[str]:
        return None

    @property
    def line(self) -> Optional[int]:
        return None

    @property
    def col(self) -> Optional[int]:
        return None


class ValueModel(ABC):
    """``ValueModel`` types are the host data model the reader builds values with.

    The reader never inspects a value it receives from a ``ValueModel`` except by
    comparing it with :py:meth:`eq` against sentinels it obtained from the same
    model (``nil``, ``false`` and the ``.`` symbol).

    Optional capabilities are expressed by properties returning ``None``: a model
    whose ``true`` is ``None`` does not support ``#t``, and likewise for
    ``unspecified`` (``#u``), ``logical_eof`` (``##``) and ``nil_symbol`` (a symbol
    which reads as the empty list)."""

    __slots__ = ()

    @abstractmethod
    def make_pair(self, first: Any, rest: Any) -> Any:
        raise NotImplementedError()

    @abstractmethod
    def set_rest(self, pair: Any, rest: Any) -> None:
        raise NotImplementedError()

    @abstractmethod
    def make_string(self, s: str) -> Any:
        raise NotImplementedError()

    def post_process_string(self, v: Any) -> Any:
        """Interpret escape sequences in a string value built by
        :py:meth:`make_string`. The reader passes string bodies through with their
        backslashes intact; by default they are left that way."""
        return v

    @abstractmethod
    def intern_symbol(self, name: str) -> Any:
        """Return the canonical symbol for ``name``. Repeated calls with the same
        name must return identical values."""
        raise NotImplementedError()

    @abstractmethod
    def parse_number(self, s: str, radix: int) -> Any:
        """Return the number ``s`` denotes in ``radix``, or :py:attr:`false` if it
        does not denote one. This method must not raise for malformed input."""
        raise NotImplementedError()

    @abstractmethod
    def list_to_vector(self, lst: Any) -> Any:
        raise NotImplementedError()

    @abstractmethod
    def make_character(self, codepoint: int) -> Any:
        raise NotImplementedError()

    def eq(self, a: Any, b: Any) -> bool:
        return a is b

    def signal_error(self, e: SyntaxError) -> NoReturn:
        """Abort the current read with the error ``e``.

        Implementations may translate the error into their own exception type but
        must never return."""
        raise e

    @property
    @abstractmethod
    def nil(self) -> Any:
        raise NotImplementedError()

    @property
    @abstractmethod
    def false(self) -> Any:
        raise NotImplementedError()

    @property
    @abstractmethod
    def end_of_stream(self) -> Any:
        raise NotImplementedError()

    @property
    def true(self) -> Optional[Any]:
        return None

    @property
    def unspecified(self) -> Optional[Any]:
        return None

    @property
    def logical_eof(self) -> Optional[Any]:
        return None

    @property
    def nil_symbol(self) -> Optional[Any]:
        return None


@attr.frozen
class DispatchResult:
    """Value returned by a ``#`` dispatch hook which matched its character.

    Hooks return ``None`` instead when the input they consumed should be skipped
    like a comment."""

    value: Any
