"""Turn loosely-typed notification payloads into typed events."""

from __future__ import annotations

from collections.abc import Mapping
from posixpath import normpath
from typing import Any, TypeVar
from urllib.parse import unquote, urlsplit

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.events.models import (
    BlobCreatedData,
    BlobDeletedData,
    BlobRenamedData,
    CreatedEvent,
    DeletedEvent,
    EventGridEvent,
    EventKind,
    RenamedEvent,
)
from core.exceptions import MalformedPayloadError

SUBSCRIPTION_VALIDATION_EVENT = "Microsoft.EventGrid.SubscriptionValidationEvent"

EVENT_TYPES: dict[str, EventKind] = {
    "Microsoft.Storage.BlobCreated": EventKind.FILE_CREATED,
    "Microsoft.Storage.BlobRenamed": EventKind.FILE_RENAMED,
    "Microsoft.Storage.BlobDeleted": EventKind.FILE_DELETED,
    "Microsoft.Storage.DirectoryCreated": EventKind.DIRECTORY_CREATED,
    "Microsoft.Storage.DirectoryRenamed": EventKind.DIRECTORY_RENAMED,
    "Microsoft.Storage.DirectoryDeleted": EventKind.DIRECTORY_DELETED,
}

_M = TypeVar("_M", bound=BaseModel)


def path_from_url(url: str) -> str:
    """Return the path component of an absolute URL.

    Scheme, host, query string (SAS tokens included) and fragment are dropped:
    ``https://acct.dfs.core.windows.net/container/dir/file.txt?sv=...`` gives
    ``/container/dir/file.txt``.
    """
    if not isinstance(url, str) or not url.strip():
        raise MalformedPayloadError("URL must be a non-empty string", {"url": repr(url)})
    try:
        parts = urlsplit(url.strip())
    except ValueError as exc:
        raise MalformedPayloadError(f"Unparseable URL: {exc}", {"url": url}) from exc
    if not parts.scheme or not parts.netloc:
        raise MalformedPayloadError("URL must be absolute", {"url": url})
    return parts.path or "/"


def _coerce(payload: Any, model: type[_M]) -> _M:
    if isinstance(payload, model):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(by_alias=True)
    if not isinstance(payload, Mapping):
        raise MalformedPayloadError(
            f"Expected a mapping payload, got {type(payload).__name__}",
            {"model": model.__name__},
        )
    try:
        return model.model_validate(dict(payload))
    except PydanticValidationError as exc:
        raise MalformedPayloadError(f"Invalid {model.__name__} payload: {exc}", {"model": model.__name__}) from exc


def _required_url(value: Any, field: str) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MalformedPayloadError(f"Payload is missing '{field}'", {"field": field})
    if not isinstance(value, str):
        raise MalformedPayloadError(f"'{field}' must be a string", {"field": field})
    return value.strip()


def _target_path(url: str, field: str) -> str:
    path = path_from_url(url)
    if normpath("/" + unquote(path).lstrip("/")) == "/":
        raise MalformedPayloadError(f"'{field}' does not name a file or directory", {"field": field, "url": url})
    return path


def parse_created(payload: Any) -> CreatedEvent:
    data = _coerce(payload, BlobCreatedData)
    url = _required_url(data.url, "url")
    return CreatedEvent(url=url, path=_target_path(url, "url"))


def parse_renamed(payload: Any) -> RenamedEvent:
    """Parse a rename payload.

    The ``*BlobUrl`` fields are preferred; the DFS-endpoint ``sourceUrl`` and
    ``destinationUrl`` are used when they are absent.
    """
    data = _coerce(payload, BlobRenamedData)
    source = _required_url(data.source_blob_url or data.source_url, "sourceBlobUrl")
    destination = _required_url(data.destination_blob_url or data.destination_url, "destinationBlobUrl")
    return RenamedEvent(
        source_url=source,
        destination_url=destination,
        source_path=_target_path(source, "sourceBlobUrl"),
        destination_path=_target_path(destination, "destinationBlobUrl"),
    )


def parse_deleted(payload: Any) -> DeletedEvent:
    data = _coerce(payload, BlobDeletedData)
    url = _required_url(data.url, "url")
    return DeletedEvent(url=url, path=_target_path(url, "url"))


def parse_envelope(raw: Any) -> EventGridEvent:
    return _coerce(raw, EventGridEvent)


def is_subscription_validation(event: EventGridEvent) -> bool:
    return event.event_type == SUBSCRIPTION_VALIDATION_EVENT


def classify(event_type: str) -> EventKind | None:
    """Map an Event Grid event type onto the kind that mirrors it, if any."""
    return EVENT_TYPES.get(event_type)


__all__ = [
    "EVENT_TYPES",
    "SUBSCRIPTION_VALIDATION_EVENT",
    "classify",
    "is_subscription_validation",
    "parse_created",
    "parse_deleted",
    "parse_envelope",
    "parse_renamed",
    "path_from_url",
]
