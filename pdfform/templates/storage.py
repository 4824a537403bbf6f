# pdfform/templates/storage.py

"""
Template store backends.

Templates are addressed by file name only. There is no index or sidecar: the
listing of the backing directory, dict or bucket prefix is the catalog.
"""

from pathlib import Path
from typing import Dict, List, Optional

import boto3
from botocore.exceptions import ClientError

from pdfform.core.config import settings
from pdfform.templates.exceptions import (
    DirectoryReadError, DirectoryWriteError, TemplateNotFoundError
)
from pdfform.utils.logger import get_logger

logger = get_logger(__name__)


def is_safe_name(file_name: str) -> bool:
    """A template name must be a single path component."""
    return bool(file_name) and file_name not in (".", "..") and "/" not in file_name and "\\" not in file_name


class TemplateStore:
    """Capability set every backend provides: put, get, exists, list, delete."""

    def put(self, file_name: str, data: bytes, original_name: Optional[str] = None) -> None:
        raise NotImplementedError

    def get(self, file_name: str) -> bytes:
        raise NotImplementedError

    def exists(self, file_name: str) -> bool:
        raise NotImplementedError

    def list(self) -> List[str]:
        raise NotImplementedError

    def delete(self, file_name: str) -> None:
        raise NotImplementedError


class LocalTemplateStore(TemplateStore):
    """Templates as individual files in one flat directory."""

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def _path(self, file_name: str) -> Path:
        if not is_safe_name(file_name):
            raise TemplateNotFoundError(file_name)
        return self.directory / file_name

    def put(self, file_name: str, data: bytes, original_name: Optional[str] = None) -> None:
        path = self._path(file_name)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            logger.error("Error writing template", file_name=file_name, error=str(e))
            raise DirectoryWriteError(str(e), file_name) from e

    def get(self, file_name: str) -> bytes:
        path = self._path(file_name)
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError) as e:
            raise TemplateNotFoundError(file_name) from e
        except OSError as e:
            logger.error("Error reading template", file_name=file_name, error=str(e))
            raise DirectoryReadError(str(e)) from e

    def exists(self, file_name: str) -> bool:
        return is_safe_name(file_name) and (self.directory / file_name).is_file()

    def list(self) -> List[str]:
        try:
            return sorted(entry.name for entry in self.directory.iterdir() if entry.is_file())
        except OSError as e:
            logger.error("Error listing templates", directory=str(self.directory), error=str(e))
            raise DirectoryReadError(str(e)) from e

    def delete(self, file_name: str) -> None:
        path = self._path(file_name)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise TemplateNotFoundError(file_name) from e
        except OSError as e:
            logger.error("Error deleting template", file_name=file_name, error=str(e))
            raise DirectoryWriteError(str(e), file_name) from e


class InMemoryTemplateStore(TemplateStore):
    """Dict-backed store, used by tests and local experiments."""

    def __init__(self, templates: Optional[Dict[str, bytes]] = None):
        self.templates: Dict[str, bytes] = dict(templates or {})
        self.original_names: Dict[str, str] = {}

    def put(self, file_name: str, data: bytes, original_name: Optional[str] = None) -> None:
        if not is_safe_name(file_name):
            raise DirectoryWriteError("invalid file name", file_name)
        self.templates[file_name] = bytes(data)
        if original_name:
            self.original_names[file_name] = original_name

    def get(self, file_name: str) -> bytes:
        try:
            return self.templates[file_name]
        except KeyError as e:
            raise TemplateNotFoundError(file_name) from e

    def exists(self, file_name: str) -> bool:
        return file_name in self.templates

    def list(self) -> List[str]:
        return sorted(self.templates)

    def delete(self, file_name: str) -> None:
        if file_name not in self.templates:
            raise TemplateNotFoundError(file_name)
        del self.templates[file_name]
        self.original_names.pop(file_name, None)


class S3TemplateStore(TemplateStore):
    """Templates as objects under one bucket prefix."""

    def __init__(self, bucket_name: str, prefix: str = "templates/", s3_client=None):
        self.bucket_name = bucket_name
        self.prefix = prefix if not prefix or prefix.endswith("/") else f"{prefix}/"
        self.s3_client = s3_client or boto3.client(
            "s3",
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region
        )

    def _key(self, file_name: str) -> str:
        if not is_safe_name(file_name):
            raise TemplateNotFoundError(file_name)
        return f"{self.prefix}{file_name}"

    @staticmethod
    def _is_missing(error: ClientError) -> bool:
        return error.response.get("Error", {}).get("Code") in ("404", "NoSuchKey", "NotFound")

    def put(self, file_name: str, data: bytes, original_name: Optional[str] = None) -> None:
        key = self._key(file_name)
        extra = {"Metadata": {"original-name": original_name}} if original_name else {}
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=data,
                ContentType="application/pdf",
                **extra
            )
        except ClientError as e:
            logger.error("Error uploading template to S3", key=key, error=str(e))
            raise DirectoryWriteError(str(e), file_name) from e

    def get(self, file_name: str) -> bytes:
        key = self._key(file_name)
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=key)
            return response["Body"].read()
        except ClientError as e:
            if self._is_missing(e):
                raise TemplateNotFoundError(file_name) from e
            logger.error("Error downloading template from S3", key=key, error=str(e))
            raise DirectoryReadError(str(e)) from e

    def exists(self, file_name: str) -> bool:
        if not is_safe_name(file_name):
            return False
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=self._key(file_name))
            return True
        except ClientError as e:
            if self._is_missing(e):
                return False
            raise DirectoryReadError(str(e)) from e

    def list(self) -> List[str]:
        names: List[str] = []
        kwargs = {"Bucket": self.bucket_name, "Prefix": self.prefix}
        try:
            while True:
                response = self.s3_client.list_objects_v2(**kwargs)
                for obj in response.get("Contents", []):
                    name = obj["Key"][len(self.prefix):]
                    if is_safe_name(name):
                        names.append(name)
                if not response.get("IsTruncated"):
                    break
                kwargs["ContinuationToken"] = response["NextContinuationToken"]
        except ClientError as e:
            logger.error("Error listing templates in S3", prefix=self.prefix, error=str(e))
            raise DirectoryReadError(str(e)) from e
        return sorted(names)

    def delete(self, file_name: str) -> None:
        # delete_object succeeds for absent keys, so existence is checked first
        if not self.exists(file_name):
            raise TemplateNotFoundError(file_name)
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=self._key(file_name))
        except ClientError as e:
            logger.error("Error deleting template from S3", file_name=file_name, error=str(e))
            raise DirectoryWriteError(str(e), file_name) from e


def get_template_store() -> TemplateStore:
    """
    Dependency returning the configured template store backend
    """
    backend = settings.template_storage_backend.lower()
    if backend == "local":
        return LocalTemplateStore(settings.template_dir)
    if backend == "s3":
        if not settings.s3_bucket_name:
            raise DirectoryReadError("s3_bucket_name is not configured")
        return S3TemplateStore(settings.s3_bucket_name, settings.s3_template_prefix)
    raise DirectoryReadError(f"Unknown template storage backend '{settings.template_storage_backend}'")
