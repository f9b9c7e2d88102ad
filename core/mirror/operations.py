"""Actions replayed against the backup store, one store call each."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from core.events.models import ObjectKind
from core.storage import Content, MirrorStore


@dataclass(frozen=True)
class Upload:
    path: str
    data: Content = field(repr=False, compare=False)
    overwrite: bool = True

    def apply(self, store: MirrorStore) -> None:
        store.upload(self.path, self.data, overwrite=self.overwrite)


@dataclass(frozen=True)
class CreateDirectory:
    path: str

    def apply(self, store: MirrorStore) -> None:
        store.create_directory(self.path)


@dataclass(frozen=True)
class Rename:
    source_path: str
    destination_path: str
    kind: ObjectKind

    @property
    def path(self) -> str:
        return self.source_path

    def apply(self, store: MirrorStore) -> None:
        if self.kind is ObjectKind.DIRECTORY:
            store.rename_directory(self.source_path, self.destination_path)
        else:
            store.rename_file(self.source_path, self.destination_path)


@dataclass(frozen=True)
class Delete:
    path: str
    kind: ObjectKind

    def apply(self, store: MirrorStore) -> None:
        if self.kind is ObjectKind.DIRECTORY:
            store.delete_directory(self.path)
        else:
            store.delete_file(self.path)


MirrorOperation = Union[Upload, CreateDirectory, Rename, Delete]


__all__ = ["CreateDirectory", "Delete", "MirrorOperation", "Rename", "Upload"]
