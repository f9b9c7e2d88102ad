from __future__ import annotations

from typing import Iterator, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from core.exceptions import TransferFailedError
from core.storage import Content
from core.storage.paths import object_key, read_content

# DeleteObjects accepts at most 1000 keys per request
_DELETE_BATCH = 1000


class S3Store:
    """Backup store on S3/MinIO.

    S3 has no directories, so they are emulated: a directory is a zero-byte
    ``<key>/`` marker plus everything under that prefix, and renames are
    copy-then-delete.
    """

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
    ) -> None:
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        session = boto3.session.Session(region_name=region) if region else boto3.session.Session()
        self.client = session.client("s3", endpoint_url=endpoint_url)

    def _key(self, path: str) -> str:
        key = object_key(path)
        return f"{self.prefix}/{key}" if self.prefix else key

    def _dir_prefix(self, path: str) -> str:
        return self._key(path).rstrip("/") + "/"

    def _iter_keys(self, prefix: str) -> Iterator[str]:
        paginator = self.client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
            for item in page.get("Contents", []):
                yield item["Key"]

    def _exists(self, key: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            if exc.response.get("Error", {}).get("Code") in {"404", "NoSuchKey", "NotFound"}:
                return False
            raise
        return True

    def _move(self, source_key: str, target_key: str) -> None:
        self.client.copy_object(
            Bucket=self.bucket,
            Key=target_key,
            CopySource={"Bucket": self.bucket, "Key": source_key},
        )
        self.client.delete_object(Bucket=self.bucket, Key=source_key)

    def _delete_keys(self, keys: list[str]) -> None:
        for start in range(0, len(keys), _DELETE_BATCH):
            batch = keys[start:start + _DELETE_BATCH]
            self.client.delete_objects(
                Bucket=self.bucket,
                Delete={"Objects": [{"Key": key} for key in batch], "Quiet": True},
            )

    def upload(self, path: str, data: Content, overwrite: bool = True) -> str:
        s3_key = self._key(path)
        try:
            if not overwrite and self._exists(s3_key):
                raise TransferFailedError("Destination object already exists", {"path": path})
            self.client.put_object(Bucket=self.bucket, Key=s3_key, Body=read_content(data))
        except (BotoCoreError, ClientError) as exc:
            raise TransferFailedError(f"Upload failed: {exc}", {"path": path}) from exc
        return f"s3://{self.bucket}/{s3_key}"

    def rename_file(self, current_path: str, new_path: str) -> None:
        try:
            self._move(self._key(current_path), self._key(new_path))
        except (BotoCoreError, ClientError) as exc:
            raise TransferFailedError(
                f"Rename failed: {exc}",
                {"path": current_path, "destination": new_path},
            ) from exc

    def rename_directory(self, current_path: str, new_path: str) -> None:
        source_prefix = self._dir_prefix(current_path)
        target_prefix = self._dir_prefix(new_path)
        try:
            keys = list(self._iter_keys(source_prefix))
            if not keys:
                raise TransferFailedError("Rename source directory does not exist", {"path": current_path})
            for key in keys:
                self._move(key, target_prefix + key[len(source_prefix):])
        except (BotoCoreError, ClientError) as exc:
            raise TransferFailedError(
                f"Rename directory failed: {exc}",
                {"path": current_path, "destination": new_path},
            ) from exc
        logger.debug("Moved {count} objects under {prefix}", count=len(keys), prefix=source_prefix)

    def create_directory(self, path: str) -> None:
        try:
            self.client.put_object(Bucket=self.bucket, Key=self._dir_prefix(path), Body=b"")
        except (BotoCoreError, ClientError) as exc:
            raise TransferFailedError(f"Create directory failed: {exc}", {"path": path}) from exc

    def delete_file(self, path: str) -> None:
        # DeleteObject succeeds on missing keys
        try:
            self.client.delete_object(Bucket=self.bucket, Key=self._key(path))
        except (BotoCoreError, ClientError) as exc:
            raise TransferFailedError(f"Delete failed: {exc}", {"path": path}) from exc

    def delete_directory(self, path: str) -> None:
        try:
            self._delete_keys(list(self._iter_keys(self._dir_prefix(path))))
        except (BotoCoreError, ClientError) as exc:
            raise TransferFailedError(f"Delete directory failed: {exc}", {"path": path}) from exc


__all__ = ["S3Store"]
