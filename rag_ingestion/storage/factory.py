from pathlib import Path

from rag_ingestion.config.settings import Settings
from rag_ingestion.storage.base import BaseObjectStore
from rag_ingestion.storage.local_adapter import LocalObjectStore
from rag_ingestion.storage.s3_adapter import S3ObjectStore


class ObjectStoreFactory:
    """Creates the object store adapter selected in settings."""

    BACKENDS = ("s3", "local")

    @classmethod
    def create(cls, settings: Settings) -> BaseObjectStore:
        backend = settings.object_store_backend.lower()
        if backend == "s3":
            return S3ObjectStore(region=settings.aws_region)
        if backend == "local":
            return LocalObjectStore(Path(settings.local_store_root))
        raise ValueError(
            f"Unknown object store backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
        )
