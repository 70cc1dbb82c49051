import re
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from rag_ingestion.storage.base import BaseObjectStore
from rag_ingestion.storage.exceptions import ObjectNotFoundError, StorageUnavailableError
from rag_ingestion.storage.models import StoredObject

_NOT_FOUND_CODES = frozenset({"NoSuchKey", "NotFound", "404"})
_TAG_VALUE_MAX = 256
# S3 tag values accept letters, digits, whitespace and + - = . _ : / @
_TAG_DISALLOWED = re.compile(r"[^\w\s+\-=.:/@]", re.ASCII)


def sanitize_tag_value(value: str) -> str:
    """Coerce a free-form string into something S3 accepts as a tag value."""
    return _TAG_DISALLOWED.sub(" ", value)[:_TAG_VALUE_MAX]


class S3ObjectStore(BaseObjectStore):
    """Object store adapter built on the boto3 S3 client."""

    def __init__(self, *, region: str, client: Any | None = None) -> None:
        self._client = client if client is not None else boto3.client("s3", region_name=region)

    def get_object(self, bucket: str, key: str) -> StoredObject:
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
            stream = response.get("Body")
            body = stream.read() if stream is not None else None
        except ClientError as exc:
            raise self._translate(exc, bucket, key) from exc
        except BotoCoreError as exc:
            raise StorageUnavailableError(
                f"S3 unavailable for {bucket}/{key}: {exc}"
            ) from exc

        return StoredObject(
            bucket=bucket,
            key=key,
            size_bytes=int(response.get("ContentLength", len(body or b""))),
            content_type=response.get("ContentType"),
            body=body,
            last_modified=response.get("LastModified"),
            metadata=dict(response.get("Metadata", {})),
        )

    def put_tags(self, bucket: str, key: str, tags: dict[str, str]) -> None:
        tag_set = [
            {"Key": name, "Value": sanitize_tag_value(value)}
            for name, value in tags.items()
        ]
        self._call(
            "put_object_tagging",
            bucket,
            key,
            Bucket=bucket,
            Key=key,
            Tagging={"TagSet": tag_set},
        )

    def copy_object(
        self,
        *,
        source_bucket: str,
        source_key: str,
        dest_bucket: str,
        dest_key: str,
        metadata: dict[str, str],
    ) -> None:
        self._call(
            "copy_object",
            source_bucket,
            source_key,
            Bucket=dest_bucket,
            Key=dest_key,
            CopySource={"Bucket": source_bucket, "Key": source_key},
            Metadata={name: sanitize_tag_value(value) for name, value in metadata.items()},
            MetadataDirective="REPLACE",
        )

    def delete_object(self, bucket: str, key: str) -> None:
        self._call("delete_object", bucket, key, Bucket=bucket, Key=key)

    def _call(self, operation: str, bucket: str, key: str, **params: Any) -> None:
        try:
            getattr(self._client, operation)(**params)
        except ClientError as exc:
            raise self._translate(exc, bucket, key) from exc
        except BotoCoreError as exc:
            raise StorageUnavailableError(
                f"S3 {operation} failed for {bucket}/{key}: {exc}"
            ) from exc

    @staticmethod
    def _translate(
        exc: ClientError, bucket: str, key: str
    ) -> ObjectNotFoundError | StorageUnavailableError:
        code = str(exc.response.get("Error", {}).get("Code", ""))
        if code in _NOT_FOUND_CODES:
            return ObjectNotFoundError(f"Object not found: {bucket}/{key}")
        return StorageUnavailableError(f"S3 error {code} for {bucket}/{key}: {exc}")
