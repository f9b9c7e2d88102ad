from __future__ import annotations

from unittest.mock import MagicMock

import pytest

pytest.importorskip("azure.storage.filedatalake")

from azure.core.exceptions import HttpResponseError, ResourceExistsError, ResourceNotFoundError

from core.exceptions import SourceReadError, TransferFailedError
from core.storage.datalake import DataLakeSource, DataLakeStore
from tests.utils_events import ACCOUNT


@pytest.fixture()
def service() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def fs(service: MagicMock) -> MagicMock:
    return service.get_file_system_client.return_value


def test_targets_the_backup_file_system(service):
    DataLakeStore(service_client=service)
    service.get_file_system_client.assert_called_once_with("backup")


def test_requires_connection_string_or_client():
    with pytest.raises(ValueError):
        DataLakeStore()


def test_upload_overwrites(service, fs):
    DataLakeStore(service_client=service).upload("/data/a/b.txt", b"hi")

    fs.get_file_client.assert_called_once_with("data/a/b.txt")
    fs.get_file_client.return_value.upload_data.assert_called_once_with(b"hi", overwrite=True)


def test_upload_error_is_transfer_failed(service, fs):
    fs.get_file_client.return_value.upload_data.side_effect = HttpResponseError(message="throttled")

    with pytest.raises(TransferFailedError) as excinfo:
        DataLakeStore(service_client=service).upload("/data/a", b"x")
    assert excinfo.value.details == {"path": "/data/a"}


def test_rename_file_uses_file_system_qualified_name(service, fs):
    DataLakeStore(service_client=service).rename_file("/data/old.txt", "/data/new.txt")

    fs.get_file_client.assert_called_once_with("data/old.txt")
    fs.get_file_client.return_value.rename_file.assert_called_once_with("backup/data/new.txt")


def test_rename_directory(service, fs):
    DataLakeStore(service_client=service, file_system="mirror").rename_directory("/data/a", "/data/b")

    fs.get_directory_client.assert_called_once_with("data/a")
    fs.get_directory_client.return_value.rename_directory.assert_called_once_with("mirror/data/b")


def test_rename_missing_source_fails(service, fs):
    fs.get_file_client.return_value.rename_file.side_effect = ResourceNotFoundError("gone")

    with pytest.raises(TransferFailedError):
        DataLakeStore(service_client=service).rename_file("/data/a", "/data/b")


def test_create_directory_tolerates_existing(service, fs):
    fs.create_directory.side_effect = ResourceExistsError("exists")

    DataLakeStore(service_client=service).create_directory("/data/dir")

    fs.create_directory.assert_called_once_with("data/dir")


def test_delete_file_is_object_level(service, fs):
    DataLakeStore(service_client=service).delete_file("/data/a.txt")

    fs.delete_file.assert_called_once_with("data/a.txt")
    fs.delete_file_system.assert_not_called()


def test_deletes_tolerate_missing_objects(service, fs):
    fs.delete_file.side_effect = ResourceNotFoundError("gone")
    fs.delete_directory.side_effect = ResourceNotFoundError("gone")
    store = DataLakeStore(service_client=service)

    store.delete_file("/data/a.txt")
    store.delete_directory("/data/dir")


def test_delete_directory_other_errors_fail(service, fs):
    fs.delete_directory.side_effect = HttpResponseError(message="forbidden")

    with pytest.raises(TransferFailedError):
        DataLakeStore(service_client=service).delete_directory("/data/dir")


def test_source_reads_from_the_url_file_system(service):
    client = service.get_file_client.return_value
    client.download_file.return_value.readall.return_value = b"payload"

    data = DataLakeSource(service_client=service).read(f"{ACCOUNT}/data/a/b.txt?sv=1")

    service.get_file_client.assert_called_once_with("data", "a/b.txt")
    assert data == b"payload"


def test_source_returns_none_for_missing_file(service):
    service.get_file_client.return_value.download_file.side_effect = ResourceNotFoundError("gone")
    assert DataLakeSource(service_client=service).read(f"{ACCOUNT}/data/a") is None


def test_source_errors_are_wrapped(service):
    service.get_file_client.return_value.download_file.side_effect = HttpResponseError(message="boom")
    with pytest.raises(SourceReadError):
        DataLakeSource(service_client=service).read(f"{ACCOUNT}/data/a")
