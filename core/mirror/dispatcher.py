"""Map normalized storage events onto a single backup-store call."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from loguru import logger

from core.events.models import EventKind, ObjectKind
from core.events.normalizer import parse_created, parse_deleted, parse_renamed
from core.exceptions import MalformedPayloadError, MirrorError, StorageError
from core.mirror.operations import CreateDirectory, Delete, MirrorOperation, Rename, Upload
from core.storage import Content, MirrorStore


class OutcomeStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class MirrorOutcome:
    """Result of one dispatch; failures are carried here instead of raised."""

    kind: EventKind
    status: OutcomeStatus
    operation: MirrorOperation | None = None
    path: str | None = None
    error: MirrorError | None = None

    @property
    def ok(self) -> bool:
        return self.status is not OutcomeStatus.FAILED

    def raise_for_status(self) -> None:
        if self.error is not None:
            raise self.error

    def log_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {"event_kind": self.kind.value, "status": self.status.value}
        if self.path is not None:
            fields["path"] = self.path
        if self.error is not None:
            fields["error_kind"] = type(self.error).__name__
        return fields


@dataclass(frozen=True)
class _Plan:
    path: str
    operation: MirrorOperation | None


def _plan_created(kind: EventKind, payload: Any, content: Content | None) -> _Plan:
    event = parse_created(payload)
    if kind.object_kind is ObjectKind.DIRECTORY:
        return _Plan(event.path, CreateDirectory(path=event.path))
    if content is None:
        return _Plan(event.path, None)
    return _Plan(event.path, Upload(path=event.path, data=content, overwrite=True))


def _plan_renamed(kind: EventKind, payload: Any, content: Content | None) -> _Plan:
    event = parse_renamed(payload)
    return _Plan(
        event.source_path,
        Rename(source_path=event.source_path, destination_path=event.destination_path, kind=kind.object_kind),
    )


def _plan_deleted(kind: EventKind, payload: Any, content: Content | None) -> _Plan:
    event = parse_deleted(payload)
    return _Plan(event.path, Delete(path=event.path, kind=kind.object_kind))


_PLANNERS: dict[EventKind, Callable[[EventKind, Any, Content | None], _Plan]] = {
    EventKind.FILE_CREATED: _plan_created,
    EventKind.FILE_RENAMED: _plan_renamed,
    EventKind.FILE_DELETED: _plan_deleted,
    EventKind.DIRECTORY_CREATED: _plan_created,
    EventKind.DIRECTORY_RENAMED: _plan_renamed,
    EventKind.DIRECTORY_DELETED: _plan_deleted,
}


class MirrorDispatcher:
    """One entry point per notification kind, each issuing at most one store call.

    Nothing is retried, queued or ordered here; the hosting platform owns that.
    """

    def __init__(self, store: MirrorStore) -> None:
        self.store = store

    def plan(self, kind: EventKind, payload: Any, content: Content | None = None) -> MirrorOperation | None:
        """Derive the operation for an event without touching the store.

        Returns None for a FileCreated event without content.
        """
        return _PLANNERS[kind](kind, payload, content).operation

    def dispatch(self, kind: EventKind, payload: Any, content: Content | None = None) -> MirrorOutcome:
        try:
            plan = _PLANNERS[kind](kind, payload, content)
        except MalformedPayloadError as exc:
            return MirrorOutcome(kind=kind, status=OutcomeStatus.FAILED, error=exc)

        if plan.operation is None:
            logger.debug("No content for {path}, nothing to upload", path=plan.path)
            return MirrorOutcome(kind=kind, status=OutcomeStatus.SKIPPED, path=plan.path)

        try:
            plan.operation.apply(self.store)
        except StorageError as exc:
            return MirrorOutcome(
                kind=kind,
                status=OutcomeStatus.FAILED,
                operation=plan.operation,
                path=plan.path,
                error=exc,
            )
        return MirrorOutcome(kind=kind, status=OutcomeStatus.APPLIED, operation=plan.operation, path=plan.path)

    def file_created(self, payload: Any, content: Content | None) -> MirrorOutcome:
        return self.dispatch(EventKind.FILE_CREATED, payload, content)

    def file_renamed(self, payload: Any) -> MirrorOutcome:
        return self.dispatch(EventKind.FILE_RENAMED, payload)

    def file_deleted(self, payload: Any) -> MirrorOutcome:
        # Object-level delete; the backup file system itself is never removed.
        return self.dispatch(EventKind.FILE_DELETED, payload)

    def directory_created(self, payload: Any) -> MirrorOutcome:
        return self.dispatch(EventKind.DIRECTORY_CREATED, payload)

    def directory_renamed(self, payload: Any) -> MirrorOutcome:
        return self.dispatch(EventKind.DIRECTORY_RENAMED, payload)

    def directory_deleted(self, payload: Any) -> MirrorOutcome:
        return self.dispatch(EventKind.DIRECTORY_DELETED, payload)


def settle(outcome: MirrorOutcome) -> None:
    """Log an outcome with structured fields and re-raise its error, if any.

    Used by the hosting adapters so the platform sees the failure and applies
    its own retry and dead-letter policy.
    """
    fields = outcome.log_fields()
    if outcome.error is not None:
        # message only, the platform records the failure itself
        logger.info("Mirroring failed: {message}", message=outcome.error.message, **fields)
        outcome.raise_for_status()
    elif outcome.status is OutcomeStatus.SKIPPED:
        logger.info("Mirroring skipped", **fields)
    else:
        logger.info("Mirrored {event_kind}", **fields)


__all__ = ["MirrorDispatcher", "MirrorOutcome", "OutcomeStatus", "settle"]
