from __future__ import annotations

from typing import Iterator

import pytest

from stream_engine.runtime import settings


@pytest.fixture(autouse=True)
def fresh_settings() -> Iterator[None]:
    settings.reset()
    yield
    settings.reset()
