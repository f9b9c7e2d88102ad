from __future__ import annotations

import pytest

from core.mirror import runtime
from core.settings import get_settings
from tests.utils_events import DictSource, RecordingStore


@pytest.fixture()
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture()
def source() -> DictSource:
    return DictSource()


@pytest.fixture(autouse=True)
def _clear_process_caches():
    get_settings.cache_clear()
    runtime.get_dispatcher.cache_clear()
    runtime.get_source.cache_clear()
    yield
    get_settings.cache_clear()
    runtime.get_dispatcher.cache_clear()
    runtime.get_source.cache_clear()
