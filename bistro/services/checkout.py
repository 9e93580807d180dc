"""Checkout service."""
import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from bistro.db.models import Order
from bistro.services.cart.store import CartStore
from bistro.services.menu.constants import display_price
from bistro.services.persistence.orders import OrderPersistenceService

logger = logging.getLogger(__name__)


class EmptyCartError(Exception):
    """Raised when checking out a cart with nothing in it."""


class CheckoutService:
    """Turns a cart into a persisted order."""

    def __init__(self, db: AsyncSession):
        self.order_persistence = OrderPersistenceService(db)

    async def checkout(self, cart: CartStore, note: Optional[str] = None) -> Order:
        """Place an order for everything in the cart, then empty it."""
        lines = cart.lines()
        if not lines:
            raise EmptyCartError("Cannot check out an empty cart")

        order = await self.order_persistence.create_order(
            items=[
                {
                    "item_id": line.item.id,
                    "item_name": line.item.name,
                    "unit_price": display_price(line.item.price),
                    "quantity": line.quantity,
                }
                for line in lines
            ],
            note=note,
        )
        cart.clear()
        logger.info(
            f"[CHECKOUT] Order {order.id} placed - {len(order.items)} lines, total {order.total:.2f}"
        )
        return order
