"""Menu API endpoints."""
import logging

from fastapi import APIRouter, Depends, Request

from bistro.core.dependencies import get_cart, get_catalog_loader
from bistro.services.cart.store import CartStore
from bistro.services.catalog.loader import CatalogLoader
from bistro.services.menu.view import MenuView, MenuViewModel

router = APIRouter()
logger = logging.getLogger(__name__)


async def build_menu_view(loader: CatalogLoader, cart: CartStore, q: str = "") -> MenuView:
    """Activate a menu view for one request."""
    view = MenuView(loader, cart, search_term=q)
    await view.activate()
    return view


@router.get("/api/menu", response_model=MenuViewModel)
async def get_menu(
    request: Request,
    q: str = "",
    loader: CatalogLoader = Depends(get_catalog_loader),
    cart: CartStore = Depends(get_cart),
):
    """Get the menu view: filtered items annotated with cart quantities."""
    logger.info(
        f"[MENU] Request received - q: {q!r}, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )
    view = await build_menu_view(loader, cart, q)
    snapshot = view.snapshot()
    logger.info(
        f"[MENU] Menu view ready - state: {snapshot.state.value}, "
        f"{len(snapshot.items)} of {len(view.catalog)} items shown"
    )
    return snapshot
