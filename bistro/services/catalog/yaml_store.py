"""YAML file document store."""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from bistro.services.catalog.models import Document
from bistro.services.catalog.store import DocumentStore, DocumentStoreError

logger = logging.getLogger(__name__)


class YamlDocumentStore(DocumentStore):
    """Document store backed by a YAML file.

    The file maps each collection name to a list of documents, every
    document carrying its own ``id`` key. Writes are saved back to the file.
    """

    def __init__(self, path: str):
        self.path = Path(path)
        self._collections: Optional[Dict[str, List[Dict[str, Any]]]] = None

    def _load(self) -> Dict[str, List[Dict[str, Any]]]:
        """Load collections from the YAML file."""
        if self._collections is None:
            if not self.path.exists():
                self._collections = {}
            else:
                try:
                    with open(self.path, "r") as f:
                        data = yaml.safe_load(f) or {}
                except (OSError, yaml.YAMLError) as e:
                    raise DocumentStoreError(f"Failed to read {self.path}: {e}") from e
                if not isinstance(data, dict):
                    raise DocumentStoreError(f"{self.path} must map collection names to documents")
                self._collections = {
                    str(name): self._check_collection(name, docs)
                    for name, docs in data.items()
                }
        return self._collections

    def _check_collection(self, name: Any, docs: Any) -> List[Dict[str, Any]]:
        """Each collection must be a list of document mappings."""
        docs = docs or []
        if not isinstance(docs, list) or not all(isinstance(doc, dict) for doc in docs):
            raise DocumentStoreError(
                f"{self.path}: collection '{name}' must be a list of documents"
            )
        return [dict(doc) for doc in docs]

    def _save(self) -> None:
        try:
            with open(self.path, "w") as f:
                yaml.safe_dump(self._collections, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise DocumentStoreError(f"Failed to write {self.path}: {e}") from e

    @staticmethod
    def _to_document(collection: str, index: int, raw: Dict[str, Any]) -> Document:
        data = dict(raw)
        doc_id = data.pop("id", None)
        if doc_id is None:
            doc_id = f"{collection}-{index}"
        return Document(id=str(doc_id), data=data)

    async def list_documents(self, collection: str) -> List[Document]:
        """Get every document in a collection, in file order."""
        docs = self._load().get(collection, [])
        return [self._to_document(collection, i, raw) for i, raw in enumerate(docs)]

    async def get_document(self, collection: str, doc_id: str) -> Optional[Document]:
        """Get a single document by id."""
        for document in await self.list_documents(collection):
            if document.id == doc_id:
                return document
        return None

    async def set_document(
        self, collection: str, doc_id: str, data: Dict[str, Any]
    ) -> Document:
        """Create or replace a document."""
        docs = self._load().setdefault(collection, [])
        raw = {"id": doc_id, **{k: v for k, v in data.items() if k != "id"}}
        for i, existing in enumerate(docs):
            if self._to_document(collection, i, existing).id == doc_id:
                docs[i] = raw
                break
        else:
            docs.append(raw)
        self._save()
        logger.debug(f"[DOCUMENTS] Saved {collection}/{doc_id} to {self.path}")
        return self._to_document(collection, 0, raw)

    async def delete_document(self, collection: str, doc_id: str) -> bool:
        """Delete a document. Returns False if it did not exist."""
        docs = self._load().get(collection, [])
        for i, existing in enumerate(docs):
            if self._to_document(collection, i, existing).id == doc_id:
                del docs[i]
                self._save()
                logger.debug(f"[DOCUMENTS] Deleted {collection}/{doc_id} from {self.path}")
                return True
        return False
