"""FastAPI dependencies."""
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.core.config import Settings
from bistro.db.database import get_db
from bistro.services.cart.registry import CartRegistry
from bistro.services.cart.store import CartStore
from bistro.services.catalog.loader import CatalogLoader
from bistro.services.catalog.sql_store import SqlDocumentStore
from bistro.services.catalog.store import DocumentStore
from bistro.services.catalog.yaml_store import YamlDocumentStore
from bistro.services.checkout import CheckoutService


def get_settings(request: Request) -> Settings:
    """Get the settings the app was created with."""
    return request.app.state.settings


def get_cart_registry(request: Request) -> CartRegistry:
    """Get the app-wide cart registry."""
    return request.app.state.cart_registry


def get_cart(
    request: Request,
    registry: CartRegistry = Depends(get_cart_registry),
) -> CartStore:
    """Get the cart for the current session."""
    return registry.get_or_create(request.state.cart_session_id)


def get_document_store(
    settings: Settings = Depends(get_settings),
    db: AsyncSession = Depends(get_db),
) -> DocumentStore:
    """Get the configured menu document store."""
    if settings.menu_backend == "yaml":
        return YamlDocumentStore(settings.menu_seed_file)
    return SqlDocumentStore(db)


def get_catalog_loader(
    settings: Settings = Depends(get_settings),
    store: DocumentStore = Depends(get_document_store),
) -> CatalogLoader:
    """Get a fresh catalog loader for one view activation."""
    return CatalogLoader(store, collection=settings.menu_collection)


def get_checkout_service(db: AsyncSession = Depends(get_db)) -> CheckoutService:
    """Get checkout service instance."""
    return CheckoutService(db)
