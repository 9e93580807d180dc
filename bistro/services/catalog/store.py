"""Document store interface."""
import secrets
import string
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from bistro.services.catalog.models import Document

_ID_ALPHABET = string.ascii_letters + string.digits
DOCUMENT_ID_LENGTH = 20


class DocumentStoreError(Exception):
    """Raised when a document store cannot complete an operation."""


def generate_document_id() -> str:
    """Generate a random document id."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(DOCUMENT_ID_LENGTH))


class DocumentStore(ABC):
    """Abstract base class for document stores."""

    @abstractmethod
    async def list_documents(self, collection: str) -> List[Document]:
        """Get every document in a collection, in fetch order."""
        pass

    @abstractmethod
    async def get_document(self, collection: str, doc_id: str) -> Optional[Document]:
        """Get a single document by id."""
        pass

    @abstractmethod
    async def set_document(
        self, collection: str, doc_id: str, data: Dict[str, Any]
    ) -> Document:
        """Create or replace a document."""
        pass

    @abstractmethod
    async def delete_document(self, collection: str, doc_id: str) -> bool:
        """Delete a document. Returns False if it did not exist."""
        pass

    async def add_document(self, collection: str, data: Dict[str, Any]) -> Document:
        """Create a document under a newly generated id."""
        return await self.set_document(collection, generate_document_id(), data)
