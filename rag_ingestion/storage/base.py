from abc import ABC, abstractmethod

from rag_ingestion.storage.models import StoredObject


class BaseObjectStore(ABC):
    """Contract for all object store adapters."""

    @abstractmethod
    def get_object(self, bucket: str, key: str) -> StoredObject:
        """Fetch an object with its body, content type and metadata.

        Raises:
            ObjectNotFoundError: if the object does not exist.
            StorageUnavailableError: if the store cannot serve the request.
        """

    @abstractmethod
    def put_tags(self, bucket: str, key: str, tags: dict[str, str]) -> None:
        """Replace the tag set of an object."""

    @abstractmethod
    def copy_object(
        self,
        *,
        source_bucket: str,
        source_key: str,
        dest_bucket: str,
        dest_key: str,
        metadata: dict[str, str],
    ) -> None:
        """Copy an object, replacing its user metadata on the copy."""

    @abstractmethod
    def delete_object(self, bucket: str, key: str) -> None:
        """Delete an object. Deleting a missing object is not an error."""
