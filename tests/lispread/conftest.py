import io

import pytest

from lispread.lang import reader as reader
from lispread.lang.model import DefaultValueModel


@pytest.fixture(params=[3, 4, 5])
def pickle_protocol(request) -> int:
    return request.param


@pytest.fixture
def model() -> DefaultValueModel:
    return DefaultValueModel()


@pytest.fixture
def make_context(model: DefaultValueModel):
    def _make_context(s: str, **kwargs) -> reader.ReaderContext:
        return reader.ReaderContext(
            reader.StreamReader(io.StringIO(s)), model=model, **kwargs
        )

    return _make_context
