"""Process-wide mirror wiring shared by the webhook and the worker."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from core.events.models import EventKind
from core.events.normalizer import parse_created
from core.exceptions import MalformedPayloadError, StorageError
from core.mirror.dispatcher import MirrorDispatcher, MirrorOutcome, OutcomeStatus
from core.settings import get_settings
from core.storage import SourceReader
from core.storage.factory import create_source, create_store


@lru_cache(maxsize=1)
def get_dispatcher() -> MirrorDispatcher:
    """Dispatcher bound to the configured backup store, built once per process."""
    return MirrorDispatcher(create_store(get_settings().storage))


@lru_cache(maxsize=1)
def get_source() -> SourceReader:
    return create_source(get_settings().source)


def run_event(
    kind: EventKind,
    data: dict[str, Any],
    dispatcher: MirrorDispatcher,
    source: SourceReader,
) -> MirrorOutcome:
    """Dispatch one event, reading FileCreated content from the source first."""
    content: bytes | None = None
    if kind is EventKind.FILE_CREATED:
        try:
            event = parse_created(data)
        except MalformedPayloadError:
            # the dispatcher reports the same error as a failed outcome
            event = None
        if event is not None:
            try:
                content = source.read(event.url)
            except StorageError as exc:
                return MirrorOutcome(kind=kind, status=OutcomeStatus.FAILED, path=event.path, error=exc)
    return dispatcher.dispatch(kind, data, content)


__all__ = ["get_dispatcher", "get_source", "run_event"]
