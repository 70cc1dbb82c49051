from typing import Any
from urllib.parse import unquote_plus

from rag_ingestion.intake.exceptions import InvalidNotificationError
from rag_ingestion.intake.models import ObjectNotification


def parse_notifications(event: dict[str, Any]) -> list[ObjectNotification]:
    """Extract object-created records from an S3 notification event.

    Keys arrive URL-encoded with '+' standing for spaces.

    Raises:
        InvalidNotificationError: if a record lacks bucket, key or size.
    """
    notifications: list[ObjectNotification] = []
    for index, record in enumerate(event.get("Records", [])):
        try:
            s3 = record["s3"]
            bucket = s3["bucket"]["name"]
            key = unquote_plus(s3["object"]["key"])
            size = int(s3["object"].get("size", 0))
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidNotificationError(
                f"Record at index {index} is not a valid object notification: {exc}"
            ) from exc
        if size < 0:
            raise InvalidNotificationError(f"Record at index {index} has negative size")
        notifications.append(ObjectNotification(bucket=bucket, key=key, size_bytes=size))
    return notifications
