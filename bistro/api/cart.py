"""Cart API endpoints."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from bistro.api.orders import OrderResponse, to_order_response
from bistro.core.dependencies import get_cart, get_catalog_loader, get_checkout_service
from bistro.services.cart.store import CartStore
from bistro.services.catalog.loader import CatalogLoader, CatalogState
from bistro.services.checkout import CheckoutService, EmptyCartError
from bistro.services.menu.constants import display_price, format_price

router = APIRouter()
logger = logging.getLogger(__name__)


class AddToCartRequest(BaseModel):
    """Add to cart request model."""
    item_id: str


class CheckoutRequest(BaseModel):
    """Checkout request model."""
    note: Optional[str] = None


class CartLineResponse(BaseModel):
    """Cart line response model."""
    item_id: str
    name: str
    quantity: int
    unit_price: float
    price_label: str
    line_total: float


class CartResponse(BaseModel):
    """Cart response model."""
    lines: List[CartLineResponse] = []
    total_count: int = 0
    subtotal: float = 0.0


def to_cart_response(cart: CartStore) -> CartResponse:
    """Build the cart response for a cart."""
    lines = []
    for line in cart.lines():
        unit_price = display_price(line.item.price)
        lines.append(
            CartLineResponse(
                item_id=line.item.id,
                name=line.item.name,
                quantity=line.quantity,
                unit_price=unit_price,
                price_label=format_price(line.item.price),
                line_total=round(unit_price * line.quantity, 2),
            )
        )
    return CartResponse(lines=lines, total_count=cart.total_count(), subtotal=cart.subtotal())


@router.get("/api/cart", response_model=CartResponse)
async def get_cart_contents(cart: CartStore = Depends(get_cart)):
    """Get the current session's cart."""
    return to_cart_response(cart)


@router.post("/api/cart/items", response_model=CartResponse)
async def add_cart_item(
    add_req: AddToCartRequest,
    loader: CatalogLoader = Depends(get_catalog_loader),
    cart: CartStore = Depends(get_cart),
):
    """Add one of a menu item to the cart."""
    await loader.load_catalog()
    if loader.state == CatalogState.LOAD_ERROR:
        raise HTTPException(status_code=503, detail="Menu is unavailable right now")

    item = loader.get_item(add_req.item_id)
    if item is None:
        logger.info(f"[CART] Add rejected - unknown item {add_req.item_id}")
        raise HTTPException(status_code=404, detail=f"Menu item '{add_req.item_id}' not found")
    if item.is_unavailable:
        logger.info(f"[CART] Add rejected - item {add_req.item_id} is not available")
        raise HTTPException(status_code=409, detail=f"Menu item '{item.name}' is not available")

    cart.add_to_cart(item)
    logger.info(f"[CART] Added {item.id} - {cart.quantity_of(item.id)} in cart")
    return to_cart_response(cart)


@router.post("/api/cart/items/{item_id}/decrease", response_model=CartResponse)
async def decrease_cart_item(item_id: str, cart: CartStore = Depends(get_cart)):
    """Remove one of an item from the cart."""
    cart.decrease_quantity(item_id)
    return to_cart_response(cart)


@router.delete("/api/cart/items/{item_id}", response_model=CartResponse)
async def remove_cart_item(item_id: str, cart: CartStore = Depends(get_cart)):
    """Remove every entry of an item from the cart."""
    cart.remove_from_cart(item_id)
    return to_cart_response(cart)


@router.delete("/api/cart", response_model=CartResponse)
async def clear_cart(cart: CartStore = Depends(get_cart)):
    """Empty the cart."""
    cart.clear()
    return to_cart_response(cart)


@router.post("/api/cart/checkout", response_model=OrderResponse, status_code=201)
async def checkout(
    checkout_req: Optional[CheckoutRequest] = None,
    cart: CartStore = Depends(get_cart),
    checkout_service: CheckoutService = Depends(get_checkout_service),
):
    """Place an order for the cart contents."""
    note = checkout_req.note if checkout_req else None
    try:
        order = await checkout_service.checkout(cart, note=note)
    except EmptyCartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(
            f"[CART] Error during checkout - Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error placing order: {str(e)}")
    return to_order_response(order)
