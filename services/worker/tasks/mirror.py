"""One Celery task per storage event kind.

Each task receives the Event Grid ``data`` object, runs the dispatcher and
re-raises failures so Celery's own retry and dead-letter policy applies.
"""

from __future__ import annotations

from typing import Any

from celery import shared_task
from loguru import logger

from core.events.models import EventKind
from core.mirror.dispatcher import settle
from core.mirror.runtime import get_dispatcher, get_source, run_event


def _mirror(kind: EventKind, data: dict[str, Any]) -> str:
    with logger.contextualize(event_kind=kind.value):
        outcome = run_event(kind, data, get_dispatcher(), get_source())
        settle(outcome)
    return outcome.status.value


@shared_task(name=EventKind.FILE_CREATED.task_name)
def file_created(data: dict[str, Any]) -> str:
    return _mirror(EventKind.FILE_CREATED, data)


@shared_task(name=EventKind.FILE_RENAMED.task_name)
def file_renamed(data: dict[str, Any]) -> str:
    return _mirror(EventKind.FILE_RENAMED, data)


@shared_task(name=EventKind.FILE_DELETED.task_name)
def file_deleted(data: dict[str, Any]) -> str:
    return _mirror(EventKind.FILE_DELETED, data)


@shared_task(name=EventKind.DIRECTORY_CREATED.task_name)
def directory_created(data: dict[str, Any]) -> str:
    return _mirror(EventKind.DIRECTORY_CREATED, data)


@shared_task(name=EventKind.DIRECTORY_RENAMED.task_name)
def directory_renamed(data: dict[str, Any]) -> str:
    return _mirror(EventKind.DIRECTORY_RENAMED, data)


@shared_task(name=EventKind.DIRECTORY_DELETED.task_name)
def directory_deleted(data: dict[str, Any]) -> str:
    return _mirror(EventKind.DIRECTORY_DELETED, data)


TASKS = {
    EventKind.FILE_CREATED: file_created,
    EventKind.FILE_RENAMED: file_renamed,
    EventKind.FILE_DELETED: file_deleted,
    EventKind.DIRECTORY_CREATED: directory_created,
    EventKind.DIRECTORY_RENAMED: directory_renamed,
    EventKind.DIRECTORY_DELETED: directory_deleted,
}


__all__ = [
    "TASKS",
    "directory_created",
    "directory_deleted",
    "directory_renamed",
    "file_created",
    "file_deleted",
    "file_renamed",
]
