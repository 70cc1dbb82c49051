import json
from datetime import datetime, timezone
from pathlib import Path

from rag_ingestion.storage.base import BaseObjectStore
from rag_ingestion.storage.exceptions import (
    ObjectNotFoundError,
    StorageError,
    StorageUnavailableError,
)
from rag_ingestion.storage.models import StoredObject

_SIDECAR_DIR = ".meta"


class LocalObjectStore(BaseObjectStore):
    """Filesystem-backed object store: {root}/{bucket}/{key}.

    Content type, user metadata and tags live in a JSON sidecar under
    {root}/.meta/{bucket}/{key}.json.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    def get_object(self, bucket: str, key: str) -> StoredObject:
        path = self._object_path(bucket, key)
        if not path.is_file():
            raise ObjectNotFoundError(f"Object not found: {bucket}/{key}")
        try:
            body = path.read_bytes()
            stat = path.stat()
        except OSError as exc:
            raise StorageUnavailableError(
                f"Failed to read {bucket}/{key}: {exc}"
            ) from exc
        sidecar = self._read_sidecar(bucket, key)
        return StoredObject(
            bucket=bucket,
            key=key,
            size_bytes=len(body),
            content_type=sidecar.get("content_type"),
            body=body,
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            metadata=dict(sidecar.get("metadata", {})),
        )

    def put_object(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str | None = None,
        metadata: dict[str, str] | None = None,
    ) -> None:
        """Store an object. Used for seeding uploads in local runs."""
        path = self._object_path(bucket, key)
        self._write(path, body)
        self._write_sidecar(
            bucket,
            key,
            {"content_type": content_type, "metadata": metadata or {}, "tags": {}},
        )

    def put_tags(self, bucket: str, key: str, tags: dict[str, str]) -> None:
        if not self._object_path(bucket, key).is_file():
            raise ObjectNotFoundError(f"Object not found: {bucket}/{key}")
        sidecar = self._read_sidecar(bucket, key)
        sidecar["tags"] = dict(tags)
        self._write_sidecar(bucket, key, sidecar)

    def copy_object(
        self,
        *,
        source_bucket: str,
        source_key: str,
        dest_bucket: str,
        dest_key: str,
        metadata: dict[str, str],
    ) -> None:
        source = self.get_object(source_bucket, source_key)
        self._write(self._object_path(dest_bucket, dest_key), source.body or b"")
        self._write_sidecar(
            dest_bucket,
            dest_key,
            {"content_type": source.content_type, "metadata": dict(metadata), "tags": {}},
        )

    def delete_object(self, bucket: str, key: str) -> None:
        try:
            self._object_path(bucket, key).unlink(missing_ok=True)
            self._sidecar_path(bucket, key).unlink(missing_ok=True)
        except OSError as exc:
            raise StorageUnavailableError(
                f"Failed to delete {bucket}/{key}: {exc}"
            ) from exc

    def _object_path(self, bucket: str, key: str) -> Path:
        return self._contained(self._root / bucket / key)

    def _sidecar_path(self, bucket: str, key: str) -> Path:
        return self._contained(self._root / _SIDECAR_DIR / bucket / f"{key}.json")

    def _contained(self, path: Path) -> Path:
        resolved = path.resolve()
        if not resolved.is_relative_to(self._root.resolve()):
            raise StorageError(f"Key escapes store root: {path}")
        return resolved

    def _read_sidecar(self, bucket: str, key: str) -> dict:
        path = self._sidecar_path(bucket, key)
        if not path.is_file():
            return {}
        return json.loads(path.read_text(encoding="utf-8"))

    def _write_sidecar(self, bucket: str, key: str, payload: dict) -> None:
        self._write(
            self._sidecar_path(bucket, key),
            json.dumps(payload, sort_keys=True).encode("utf-8"),
        )

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise StorageUnavailableError(f"Failed to write {path}: {exc}") from exc
