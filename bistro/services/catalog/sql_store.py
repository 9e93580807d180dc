"""SQL-backed document store."""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.db.models import DocumentRecord
from bistro.services.catalog.models import Document
from bistro.services.catalog.store import DocumentStore, DocumentStoreError

logger = logging.getLogger(__name__)


def _to_document(record: DocumentRecord) -> Document:
    return Document(id=record.doc_id, data=dict(record.data or {}))


class SqlDocumentStore(DocumentStore):
    """Document store keeping each document as a JSON row."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_record(self, collection: str, doc_id: str) -> Optional[DocumentRecord]:
        result = await self.db.execute(
            select(DocumentRecord).where(
                DocumentRecord.collection == collection,
                DocumentRecord.doc_id == doc_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_documents(self, collection: str) -> List[Document]:
        """Get every document in a collection, ordered by document id."""
        try:
            result = await self.db.execute(
                select(DocumentRecord)
                .where(DocumentRecord.collection == collection)
                .order_by(DocumentRecord.doc_id)
            )
        except SQLAlchemyError as e:
            raise DocumentStoreError(f"Failed to list '{collection}': {e}") from e
        return [_to_document(record) for record in result.scalars().all()]

    async def get_document(self, collection: str, doc_id: str) -> Optional[Document]:
        """Get a single document by id."""
        try:
            record = await self._get_record(collection, doc_id)
        except SQLAlchemyError as e:
            raise DocumentStoreError(f"Failed to read '{collection}/{doc_id}': {e}") from e
        return _to_document(record) if record else None

    async def set_document(
        self, collection: str, doc_id: str, data: Dict[str, Any]
    ) -> Document:
        """Create or replace a document."""
        try:
            record = await self._get_record(collection, doc_id)
            if record is None:
                record = DocumentRecord(collection=collection, doc_id=doc_id, data=dict(data))
                self.db.add(record)
            else:
                record.data = dict(data)
            await self.db.commit()
            await self.db.refresh(record)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DocumentStoreError(f"Failed to write '{collection}/{doc_id}': {e}") from e
        logger.debug(f"[DOCUMENTS] Saved {collection}/{doc_id}")
        return _to_document(record)

    async def delete_document(self, collection: str, doc_id: str) -> bool:
        """Delete a document. Returns False if it did not exist."""
        try:
            record = await self._get_record(collection, doc_id)
            if record is None:
                return False
            await self.db.delete(record)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise DocumentStoreError(f"Failed to delete '{collection}/{doc_id}': {e}") from e
        logger.debug(f"[DOCUMENTS] Deleted {collection}/{doc_id}")
        return True
