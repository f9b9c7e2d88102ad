"""Backup store abstraction (Azure Data Lake, S3/MinIO or local filesystem fallback)."""

from __future__ import annotations

from typing import BinaryIO, Protocol, Union

Content = Union[bytes, BinaryIO]


class MirrorStore(Protocol):
    """Hierarchical store the mirror replays mutations against.

    Paths are URL paths as produced by ``core.events.path_from_url``.
    """

    def upload(self, path: str, data: Content, overwrite: bool = True) -> str:  # returns uri
        ...

    def rename_file(self, current_path: str, new_path: str) -> None:
        ...

    def rename_directory(self, current_path: str, new_path: str) -> None:
        ...

    def create_directory(self, path: str) -> None:
        ...

    def delete_file(self, path: str) -> None:  # no-op when missing
        ...

    def delete_directory(self, path: str) -> None:  # no-op when missing
        ...


class SourceReader(Protocol):
    def read(self, url: str) -> bytes | None:  # None when the object is gone
        ...


__all__ = ["Content", "MirrorStore", "SourceReader"]
