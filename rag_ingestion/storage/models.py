from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class StoredObject:
    """An object read back from the object store."""

    bucket: str
    key: str
    size_bytes: int
    content_type: str | None = None
    body: bytes | None = None
    last_modified: datetime | None = None
    metadata: dict[str, str] = field(default_factory=dict)
