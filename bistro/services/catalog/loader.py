"""Catalog loading."""
import logging
from enum import Enum
from typing import List, Optional

from pydantic import ValidationError

from bistro.services.catalog.models import Document, MenuItem
from bistro.services.catalog.store import DocumentStore

logger = logging.getLogger(__name__)


class CatalogState(str, Enum):
    """Lifecycle of a catalog load."""

    INIT = "init"
    LOADING = "loading"
    LOADED = "loaded"
    LOAD_ERROR = "load_error"


def items_from_documents(documents: List[Document]) -> List[MenuItem]:
    """Map documents to menu items, skipping ones that cannot be read."""
    items = []
    for document in documents:
        try:
            items.append(MenuItem.from_document(document))
        except ValidationError as e:
            logger.warning(
                f"[CATALOG] Skipping unreadable document {document.id}: "
                f"{e.error_count()} error(s)"
            )
    return items


class CatalogLoader:
    """Fetches the menu catalog from a document collection.

    Each call to ``load_catalog`` takes a new request token and only the
    response for the latest token is applied, so overlapping loads cannot
    overwrite a newer catalog with an older one.
    """

    def __init__(self, store: DocumentStore, collection: str = "menu"):
        self.store = store
        self.collection = collection
        self.items: List[MenuItem] = []
        self.state = CatalogState.INIT
        self.error: Optional[str] = None
        self._latest_token = 0

    @property
    def is_loading(self) -> bool:
        return self.state in (CatalogState.INIT, CatalogState.LOADING)

    async def load_catalog(self) -> List[MenuItem]:
        """Read every document in the collection and replace the catalog."""
        self._latest_token += 1
        token = self._latest_token
        self.state = CatalogState.LOADING
        logger.debug(f"[CATALOG] Loading '{self.collection}' (request {token})")

        try:
            documents = await self.store.list_documents(self.collection)
        except Exception as e:
            if token != self._latest_token:
                logger.debug(f"[CATALOG] Discarding stale failure for request {token}")
                return self.items
            logger.error(
                f"[CATALOG] Error fetching menu items - Error: {type(e).__name__}: {str(e)}",
                exc_info=True,
            )
            self.error = str(e)
            self.state = CatalogState.LOAD_ERROR
            return self.items

        if token != self._latest_token:
            logger.debug(f"[CATALOG] Discarding stale response for request {token}")
            return self.items

        self.items = items_from_documents(documents)
        self.error = None
        self.state = CatalogState.LOADED
        logger.info(f"[CATALOG] Loaded {len(self.items)} items from '{self.collection}'")
        return self.items

    def get_item(self, item_id: str) -> Optional[MenuItem]:
        """Look up an item in the current catalog."""
        for item in self.items:
            if item.id == item_id:
                return item
        return None
