"""Typed views over storage notification payloads."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ObjectKind(str, Enum):
    FILE = "file"
    DIRECTORY = "directory"


class EventKind(str, Enum):
    FILE_CREATED = "FileCreated"
    FILE_RENAMED = "FileRenamed"
    FILE_DELETED = "FileDeleted"
    DIRECTORY_CREATED = "DirectoryCreated"
    DIRECTORY_RENAMED = "DirectoryRenamed"
    DIRECTORY_DELETED = "DirectoryDeleted"

    @property
    def object_kind(self) -> ObjectKind:
        if self.value.startswith("Directory"):
            return ObjectKind.DIRECTORY
        return ObjectKind.FILE

    @property
    def task_name(self) -> str:
        """Celery task name serving this kind."""
        snake = "".join(f"_{c.lower()}" if c.isupper() else c for c in self.value).lstrip("_")
        return f"services.worker.tasks.mirror.{snake}"


class _StorageEventData(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    api: str | None = None
    request_id: str | None = Field(default=None, alias="requestId")
    sequencer: str | None = None
    storage_diagnostics: Any = Field(default=None, alias="storageDiagnostics")


class BlobCreatedData(_StorageEventData):
    url: Any = None
    content_type: str | None = Field(default=None, alias="contentType")
    content_length: int | None = Field(default=None, alias="contentLength")
    blob_type: str | None = Field(default=None, alias="blobType")


class BlobRenamedData(_StorageEventData):
    source_url: Any = Field(default=None, alias="sourceUrl")
    source_blob_url: Any = Field(default=None, alias="sourceBlobUrl")
    destination_url: Any = Field(default=None, alias="destinationUrl")
    destination_blob_url: Any = Field(default=None, alias="destinationBlobUrl")


class BlobDeletedData(_StorageEventData):
    url: Any = None
    recursive: str | None = None


class EventGridEvent(BaseModel):
    """Event Grid schema envelope."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    event_type: str = Field(alias="eventType")
    subject: str = ""
    event_time: str | None = Field(default=None, alias="eventTime")
    data: dict[str, Any] = Field(default_factory=dict)
    data_version: str | None = Field(default=None, alias="dataVersion")
    metadata_version: str | None = Field(default=None, alias="metadataVersion")
    topic: str | None = None


@dataclass(frozen=True)
class CreatedEvent:
    url: str
    path: str


@dataclass(frozen=True)
class RenamedEvent:
    source_url: str
    destination_url: str
    source_path: str
    destination_path: str


@dataclass(frozen=True)
class DeletedEvent:
    url: str
    path: str


__all__ = [
    "ObjectKind",
    "EventKind",
    "BlobCreatedData",
    "BlobRenamedData",
    "BlobDeletedData",
    "EventGridEvent",
    "CreatedEvent",
    "RenamedEvent",
    "DeletedEvent",
]
