from __future__ import annotations

import os
import shutil
from pathlib import Path

from core.events.normalizer import path_from_url
from core.exceptions import TransferFailedError
from core.storage import Content
from core.storage.paths import object_key, read_content, split_container


class LocalStore:
    def __init__(self, root: Path) -> None:
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def _path(self, path: str) -> Path:
        return self.root / object_key(path)

    def upload(self, path: str, data: Content, overwrite: bool = True) -> str:
        target = self._path(path)
        if target.exists() and not overwrite:
            raise TransferFailedError("Destination file already exists", {"path": path})
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(read_content(data))
        except OSError as exc:
            raise TransferFailedError(f"Upload failed: {exc}", {"path": path}) from exc
        return str(target)

    def _rename(self, current_path: str, new_path: str) -> None:
        source = self._path(current_path)
        target = self._path(new_path)
        if not source.exists():
            raise TransferFailedError("Rename source does not exist", {"path": current_path})
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            os.replace(source, target)
        except OSError as exc:
            raise TransferFailedError(
                f"Rename failed: {exc}",
                {"path": current_path, "destination": new_path},
            ) from exc

    def rename_file(self, current_path: str, new_path: str) -> None:
        self._rename(current_path, new_path)

    def rename_directory(self, current_path: str, new_path: str) -> None:
        self._rename(current_path, new_path)

    def create_directory(self, path: str) -> None:
        try:
            self._path(path).mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise TransferFailedError(f"Create directory failed: {exc}", {"path": path}) from exc

    def delete_file(self, path: str) -> None:
        try:
            self._path(path).unlink(missing_ok=True)
        except OSError as exc:
            raise TransferFailedError(f"Delete failed: {exc}", {"path": path}) from exc

    def delete_directory(self, path: str) -> None:
        target = self._path(path)
        if not target.exists():
            return
        try:
            shutil.rmtree(target)
        except OSError as exc:
            raise TransferFailedError(f"Delete directory failed: {exc}", {"path": path}) from exc


class LocalSource:
    """Reads created files from a directory laid out as ``<root>/<container>/<path>``."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def read(self, url: str) -> bytes | None:
        container, key = split_container(path_from_url(url))
        path = self.root / container / key
        if not path.is_file():
            return None
        return path.read_bytes()


__all__ = ["LocalStore", "LocalSource"]
