from __future__ import annotations

from posixpath import normpath
from urllib.parse import unquote

from core.exceptions import TransferFailedError


def object_key(path: str) -> str:
    """Decode a URL path into a store-relative key without leading slash."""
    decoded = unquote(path or "")
    key = normpath("/" + decoded.lstrip("/")).lstrip("/")
    if not key or key == ".":
        raise TransferFailedError("Refusing to operate on the store root", {"path": path})
    return key


def split_container(path: str) -> tuple[str, str]:
    """Split ``/container/dir/file`` into ``("container", "dir/file")``."""
    key = object_key(path)
    container, _, rest = key.partition("/")
    if not rest:
        raise TransferFailedError("URL path does not name an object inside a container", {"path": path})
    return container, rest


def read_content(data: object) -> bytes:
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    read = getattr(data, "read", None)
    if read is None:
        raise TypeError(f"Unsupported content type: {type(data).__name__}")
    return read()


__all__ = ["object_key", "read_content", "split_container"]
