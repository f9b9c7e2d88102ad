"""Build the backup store and source reader named by configuration."""

from __future__ import annotations

import os

from loguru import logger

from core.exceptions import ConfigurationError
from core.settings import SourceSettings, StorageSettings
from core.storage import MirrorStore, SourceReader


def create_store(settings: StorageSettings) -> MirrorStore:
    """Create the backup store for ``settings.backend``.

    Backend-specific imports are deferred so a deployment only needs the SDK
    of the backend it uses.
    """
    backend = settings.backend
    logger.info("Using {backend} backup store", backend=backend)

    if backend == "datalake":
        from core.storage.datalake import DataLakeStore

        return DataLakeStore(settings.connection_string, file_system=settings.file_system)
    if backend == "s3":
        from core.storage.s3 import S3Store

        if not settings.bucket:
            raise ConfigurationError("storage.bucket is required for the s3 backend")
        return S3Store(
            bucket=settings.bucket,
            prefix=settings.prefix,
            region=settings.region,
            endpoint_url=os.getenv("S3_ENDPOINT_URL"),
        )
    if backend == "local":
        from core.storage.local import LocalStore

        return LocalStore(settings.root)

    raise ConfigurationError(f"Unsupported storage backend: {backend!r}. Supported: datalake, s3, local")


def create_source(settings: SourceSettings) -> SourceReader:
    if settings.backend == "datalake":
        from core.storage.datalake import DataLakeSource

        return DataLakeSource(settings.connection_string)
    if settings.backend == "local":
        from core.storage.local import LocalSource

        return LocalSource(settings.root)

    raise ConfigurationError(f"Unsupported source backend: {settings.backend!r}. Supported: datalake, local")


__all__ = ["create_source", "create_store"]
