"""Admin menu management endpoints."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.api.auth import require_auth
from bistro.api.orders import OrderResponse, to_order_response
from bistro.core.config import Settings
from bistro.core.dependencies import get_document_store, get_settings
from bistro.db.database import get_db
from bistro.services.catalog.models import Document, MenuItem
from bistro.services.catalog.store import DocumentStore, DocumentStoreError
from bistro.services.persistence.orders import OrderPersistenceService

router = APIRouter(dependencies=[Depends(require_auth)])
logger = logging.getLogger(__name__)


class MenuItemPayload(BaseModel):
    """Menu item fields accepted from the admin dashboard."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(min_length=1)
    price: Optional[float] = Field(default=None, ge=0)
    is_available: Optional[bool] = Field(default=None, alias="isAvailable")
    is_new: Optional[bool] = Field(default=None, alias="isNew")
    is_popular: Optional[bool] = Field(default=None, alias="isPopular")
    category: Optional[str] = None
    image: Optional[str] = None

    def to_document_data(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def to_item(document: Document) -> MenuItem:
    return MenuItem.from_document(document)


async def _name_taken(store: DocumentStore, collection: str, name: str, exclude_id: Optional[str] = None) -> bool:
    name_lower = name.lower().strip()
    for document in await store.list_documents(collection):
        if document.id == exclude_id:
            continue
        if str(document.data.get("name", "")).lower().strip() == name_lower:
            return True
    return False


@router.get("/api/admin/menu/items", response_model=List[Document])
async def list_items(
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
):
    """List raw menu documents."""
    try:
        return await store.list_documents(settings.menu_collection)
    except DocumentStoreError as e:
        logger.error(f"[ADMIN] Error listing menu documents - Error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error fetching menu: {str(e)}")


@router.post("/api/admin/menu/items", response_model=MenuItem)
async def create_item(
    payload: MenuItemPayload,
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
):
    """Create a menu item."""
    try:
        if await _name_taken(store, settings.menu_collection, payload.name):
            raise HTTPException(status_code=400, detail=f"Item '{payload.name}' already exists")
        document = await store.add_document(settings.menu_collection, payload.to_document_data())
    except DocumentStoreError as e:
        logger.error(f"[ADMIN] Error creating menu item - Error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error creating item: {str(e)}")

    logger.info(f"[ADMIN] Created menu item {document.id} ({payload.name})")
    return to_item(document)


@router.put("/api/admin/menu/items/{item_id}", response_model=MenuItem)
async def update_item(
    item_id: str,
    payload: MenuItemPayload,
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
):
    """Replace a menu item's fields."""
    try:
        if await store.get_document(settings.menu_collection, item_id) is None:
            raise HTTPException(status_code=404, detail=f"Item '{item_id}' not found")
        if await _name_taken(store, settings.menu_collection, payload.name, exclude_id=item_id):
            raise HTTPException(status_code=400, detail=f"Item '{payload.name}' already exists")
        document = await store.set_document(settings.menu_collection, item_id, payload.to_document_data())
    except DocumentStoreError as e:
        logger.error(f"[ADMIN] Error updating menu item {item_id} - Error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error updating item: {str(e)}")

    logger.info(f"[ADMIN] Updated menu item {item_id}")
    return to_item(document)


@router.delete("/api/admin/menu/items/{item_id}")
async def delete_item(
    item_id: str,
    store: DocumentStore = Depends(get_document_store),
    settings: Settings = Depends(get_settings),
):
    """Delete a menu item. Deleting a missing item is a no-op."""
    try:
        deleted = await store.delete_document(settings.menu_collection, item_id)
    except DocumentStoreError as e:
        logger.error(f"[ADMIN] Error deleting menu item {item_id} - Error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error deleting item: {str(e)}")

    if deleted:
        logger.info(f"[ADMIN] Deleted menu item {item_id}")
    return {"success": True, "message": f"Item '{item_id}' deleted"}


@router.post("/api/admin/orders/{order_id}/confirm", response_model=OrderResponse)
async def confirm_order(order_id: int, db: AsyncSession = Depends(get_db)):
    """Mark a pending order as confirmed by the kitchen."""
    order = await OrderPersistenceService(db).confirm_order(order_id)
    if order is None:
        raise HTTPException(status_code=404, detail=f"Order {order_id} not found")
    logger.info(f"[ADMIN] Confirmed order {order_id}")
    return to_order_response(order)
