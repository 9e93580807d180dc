"""Seed a document collection from a YAML file."""
import logging

from bistro.services.catalog.store import DocumentStore
from bistro.services.catalog.yaml_store import YamlDocumentStore

logger = logging.getLogger(__name__)


async def seed_collection(store: DocumentStore, collection: str, seed_file: str) -> int:
    """Copy documents from a YAML file into an empty collection.

    Returns the number of documents written; a collection that already has
    documents is left untouched.
    """
    if await store.list_documents(collection):
        logger.info(f"[SEED] '{collection}' already has documents, skipping seed")
        return 0

    source = YamlDocumentStore(seed_file)
    documents = await source.list_documents(collection)
    for document in documents:
        await store.set_document(collection, document.id, document.data)
    logger.info(f"[SEED] Seeded {len(documents)} documents into '{collection}' from {seed_file}")
    return len(documents)
