"""Azure Data Lake Storage Gen2 backup store and source reader."""

from __future__ import annotations

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.filedatalake import DataLakeServiceClient
from loguru import logger

from core.events.normalizer import path_from_url
from core.exceptions import SourceReadError, TransferFailedError
from core.storage import Content
from core.storage.paths import object_key, split_container


class DataLakeStore:
    """Mirrors into one file system (``backup`` by default) of the backup account."""

    def __init__(
        self,
        connection_string: str | None = None,
        file_system: str = "backup",
        service_client: DataLakeServiceClient | None = None,
    ) -> None:
        if service_client is None:
            if not connection_string:
                raise ValueError("DataLakeStore requires a connection string or a service client")
            service_client = DataLakeServiceClient.from_connection_string(connection_string)
        self.file_system = file_system
        self._service_client = service_client
        self._file_system_client = service_client.get_file_system_client(file_system)

    def _new_name(self, path: str) -> str:
        return f"{self.file_system}/{object_key(path)}"

    def upload(self, path: str, data: Content, overwrite: bool = True) -> str:
        key = object_key(path)
        try:
            file_client = self._file_system_client.get_file_client(key)
            file_client.upload_data(data, overwrite=overwrite)
        except AzureError as exc:
            raise TransferFailedError(f"Upload failed: {exc}", {"path": path}) from exc
        return f"{self._file_system_client.url}/{key}"

    def rename_file(self, current_path: str, new_path: str) -> None:
        try:
            file_client = self._file_system_client.get_file_client(object_key(current_path))
            file_client.rename_file(self._new_name(new_path))
        except AzureError as exc:
            raise TransferFailedError(
                f"Rename failed: {exc}",
                {"path": current_path, "destination": new_path},
            ) from exc

    def rename_directory(self, current_path: str, new_path: str) -> None:
        try:
            directory_client = self._file_system_client.get_directory_client(object_key(current_path))
            directory_client.rename_directory(self._new_name(new_path))
        except AzureError as exc:
            raise TransferFailedError(
                f"Rename directory failed: {exc}",
                {"path": current_path, "destination": new_path},
            ) from exc

    def create_directory(self, path: str) -> None:
        try:
            self._file_system_client.create_directory(object_key(path))
        except ResourceExistsError:
            logger.debug("Directory {path} already exists", path=path)
        except AzureError as exc:
            raise TransferFailedError(f"Create directory failed: {exc}", {"path": path}) from exc

    def delete_file(self, path: str) -> None:
        try:
            self._file_system_client.delete_file(object_key(path))
        except ResourceNotFoundError:
            logger.debug("File {path} already absent", path=path)
        except AzureError as exc:
            raise TransferFailedError(f"Delete failed: {exc}", {"path": path}) from exc

    def delete_directory(self, path: str) -> None:
        try:
            self._file_system_client.delete_directory(object_key(path))
        except ResourceNotFoundError:
            logger.debug("Directory {path} already absent", path=path)
        except AzureError as exc:
            raise TransferFailedError(f"Delete directory failed: {exc}", {"path": path}) from exc


class DataLakeSource:
    """Reads created files from the source account; the first URL segment is the file system."""

    def __init__(
        self,
        connection_string: str | None = None,
        service_client: DataLakeServiceClient | None = None,
    ) -> None:
        if service_client is None:
            if not connection_string:
                raise ValueError("DataLakeSource requires a connection string or a service client")
            service_client = DataLakeServiceClient.from_connection_string(connection_string)
        self._service_client = service_client

    def read(self, url: str) -> bytes | None:
        file_system, key = split_container(path_from_url(url))
        try:
            downloader = self._service_client.get_file_client(file_system, key).download_file()
            return downloader.readall()
        except ResourceNotFoundError:
            return None
        except AzureError as exc:
            raise SourceReadError(f"Reading source file failed: {exc}", {"url": url}) from exc


__all__ = ["DataLakeStore", "DataLakeSource"]
