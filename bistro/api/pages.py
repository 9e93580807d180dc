"""Server-rendered menu and cart pages."""
import logging
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from bistro.api.cart import to_cart_response
from bistro.api.menu import build_menu_view
from bistro.core.config import Settings
from bistro.core.dependencies import get_cart, get_catalog_loader, get_checkout_service, get_settings
from bistro.services.cart.store import CartStore
from bistro.services.catalog.loader import CatalogLoader
from bistro.services.checkout import CheckoutService, EmptyCartError
from bistro.services.menu.constants import CART_PATH

router = APIRouter()
logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent.parent / "templates"))


def menu_url(q: str = "") -> str:
    return f"/menu?{urlencode({'q': q})}" if q else "/menu"


@router.get("/menu", include_in_schema=False)
async def menu_page(
    request: Request,
    q: str = "",
    loader: CatalogLoader = Depends(get_catalog_loader),
    cart: CartStore = Depends(get_cart),
    settings: Settings = Depends(get_settings),
):
    """Render the menu page."""
    view = await build_menu_view(loader, cart, q)
    return templates.TemplateResponse(
        request,
        "menu.html",
        {
            "view": view.snapshot(),
            "restaurant_name": settings.restaurant_name,
            "clear_url": menu_url(),
        },
    )


@router.post("/menu/items/{item_id}/add", include_in_schema=False)
async def menu_add(
    item_id: str,
    q: str = "",
    loader: CatalogLoader = Depends(get_catalog_loader),
    cart: CartStore = Depends(get_cart),
):
    """Add one of an item from the menu page."""
    view = await build_menu_view(loader, cart, q)
    view.add_to_cart(item_id)
    return RedirectResponse(menu_url(q), status_code=303)


@router.post("/menu/items/{item_id}/decrease", include_in_schema=False)
async def menu_decrease(
    item_id: str,
    q: str = "",
    cart: CartStore = Depends(get_cart),
):
    """Remove one of an item from the menu page."""
    cart.decrease_quantity(item_id)
    return RedirectResponse(menu_url(q), status_code=303)


@router.get(CART_PATH, include_in_schema=False)
async def cart_page(
    request: Request,
    order: Optional[int] = None,
    cart: CartStore = Depends(get_cart),
    settings: Settings = Depends(get_settings),
):
    """Render the cart summary page."""
    return templates.TemplateResponse(
        request,
        "cart.html",
        {
            "cart": to_cart_response(cart),
            "placed_order_id": order,
            "restaurant_name": settings.restaurant_name,
        },
    )


@router.post(f"{CART_PATH}/checkout", include_in_schema=False)
async def cart_checkout(
    cart: CartStore = Depends(get_cart),
    checkout_service: CheckoutService = Depends(get_checkout_service),
):
    """Place the order from the cart page."""
    try:
        order = await checkout_service.checkout(cart)
    except EmptyCartError:
        return RedirectResponse(CART_PATH, status_code=303)
    except Exception as e:
        logger.error(
            f"[CART] Error during checkout - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Error placing order")
    return RedirectResponse(f"{CART_PATH}?order={order.id}", status_code=303)
