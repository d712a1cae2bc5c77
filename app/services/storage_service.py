# app/services/storage_service.py
"""
오브젝트 스토리지 (blob 저장소)

메타데이터 테이블과는 독립적으로 실패할 수 있는 별도 저장소.
- LocalObjectStore: 로컬 디렉토리 (개발/테스트용)
- S3ObjectStore: S3 호환 스토리지 (R2, Supabase Storage S3 등)
"""
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional
from urllib.parse import quote

import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from app.config import Settings
from app.core.logger import logger


class StorageError(Exception):
    """스토리지 호출 실패"""


@dataclass
class StorageEntry:
    """스토리지 목록 항목"""
    name: str
    size: int
    updated_at: Optional[datetime] = None


class ObjectStore(ABC):
    """오브젝트 스토리지 인터페이스"""

    @abstractmethod
    def upload(self, key: str, data: bytes, content_type: str) -> str:
        """blob 저장 후 저장된 경로 반환 (덮어쓰기 불가)"""
        ...

    @abstractmethod
    def get_public_url(self, path: str) -> str:
        ...

    @abstractmethod
    def list(self, prefix: str = "") -> list[StorageEntry]:
        ...

    @abstractmethod
    def remove(self, paths: Iterable[str]) -> None:
        """여러 blob 삭제 (없는 경로는 무시)"""
        ...


def _check_key(key: str) -> str:
    key = (key or "").strip()
    if not key or key.startswith("/") or ".." in key.split("/"):
        raise StorageError(f"Invalid storage key: {key!r}")
    return key


class LocalObjectStore(ObjectStore):
    """로컬 디렉토리 스토리지"""

    def __init__(self, root: str, public_base_url: str = "/media"):
        self.root = os.path.abspath(root)
        self.public_base_url = public_base_url.rstrip("/")
        os.makedirs(self.root, exist_ok=True)

    def _path(self, key: str) -> str:
        return os.path.join(self.root, _check_key(key))

    def upload(self, key: str, data: bytes, content_type: str) -> str:
        path = self._path(key)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        try:
            # "x" 모드 - 같은 키가 있으면 실패
            with open(path, "xb") as f:
                f.write(data)
        except FileExistsError:
            raise StorageError("The resource already exists")
        except OSError as e:
            raise StorageError(str(e)) from e
        logger.debug(f"Saved locally: {path} ({content_type}, {len(data)} bytes)")
        return key

    def get_public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{quote(path)}"

    def list(self, prefix: str = "") -> list[StorageEntry]:
        entries = []
        try:
            for dirpath, _, filenames in os.walk(self.root):
                for filename in filenames:
                    full = os.path.join(dirpath, filename)
                    key = os.path.relpath(full, self.root).replace(os.sep, "/")
                    if not key.startswith(prefix):
                        continue
                    stat = os.stat(full)
                    entries.append(StorageEntry(
                        name=key,
                        size=stat.st_size,
                        updated_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc)
                    ))
        except OSError as e:
            raise StorageError(str(e)) from e
        return sorted(entries, key=lambda e: e.name)

    def remove(self, paths: Iterable[str]) -> None:
        for key in paths:
            path = self._path(key)
            try:
                os.remove(path)
            except FileNotFoundError:
                continue
            except OSError as e:
                raise StorageError(str(e)) from e


class S3ObjectStore(ObjectStore):
    """S3 호환 스토리지 (boto3)"""

    # delete_objects 1회 최대 개수
    DELETE_BATCH = 1000

    def __init__(self, bucket: str, public_base_url: str, client=None):
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/")
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ObjectStore":
        client = boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint_url or None,
            aws_access_key_id=settings.s3_access_key_id or None,
            aws_secret_access_key=settings.s3_secret_access_key or None,
            region_name=settings.s3_region,
            config=BotoConfig(signature_version="s3v4", s3={"addressing_style": "path"}),
        )
        return cls(settings.storage_bucket, settings.public_base_url, client)

    def upload(self, key: str, data: bytes, content_type: str) -> str:
        key = _check_key(key)
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                CacheControl="public, max-age=604800",
                IfNoneMatch="*",
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in ("PreconditionFailed", "412"):
                raise StorageError("The resource already exists") from e
            raise StorageError(str(e)) from e
        except BotoCoreError as e:
            raise StorageError(str(e)) from e
        return key

    def get_public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{quote(path)}"

    def list(self, prefix: str = "") -> list[StorageEntry]:
        entries = []
        try:
            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(Bucket=self.bucket, Prefix=prefix):
                for obj in page.get("Contents", []):
                    entries.append(StorageEntry(
                        name=obj["Key"],
                        size=int(obj.get("Size", 0)),
                        updated_at=obj.get("LastModified")
                    ))
        except (ClientError, BotoCoreError) as e:
            raise StorageError(str(e)) from e
        return entries

    def remove(self, paths: Iterable[str]) -> None:
        keys = [_check_key(p) for p in paths]
        for i in range(0, len(keys), self.DELETE_BATCH):
            batch = keys[i:i + self.DELETE_BATCH]
            try:
                result = self.client.delete_objects(
                    Bucket=self.bucket,
                    Delete={"Objects": [{"Key": k} for k in batch], "Quiet": True},
                )
            except (ClientError, BotoCoreError) as e:
                raise StorageError(str(e)) from e
            errors = result.get("Errors") or []
            if errors:
                first = errors[0]
                raise StorageError(f"{first.get('Key')}: {first.get('Message') or first.get('Code')}")


def build_object_store(settings: Settings) -> ObjectStore:
    """설정에 맞는 스토리지 생성"""
    if settings.storage_backend == "s3":
        logger.info(f"S3 스토리지 사용: bucket={settings.storage_bucket}")
        return S3ObjectStore.from_settings(settings)
    logger.info(f"로컬 스토리지 사용: {settings.storage_dir}")
    return LocalObjectStore(settings.storage_dir, settings.public_base_url)
