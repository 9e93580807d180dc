"""Order persistence service."""
from typing import List, Optional, Dict, Any

from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bistro.db.models import Order, OrderItem


class OrderPersistenceService:
    """Service for persisting order data."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_order(
        self,
        items: List[Dict[str, Any]],
        note: Optional[str] = None,
    ) -> Order:
        """Create a pending order with its items."""
        order = Order(status="pending", note=note)
        total = 0.0
        for item_data in items:
            quantity = item_data.get("quantity", 1)
            order.items.append(
                OrderItem(
                    item_id=item_data["item_id"],
                    item_name=item_data["item_name"],
                    unit_price=item_data["unit_price"],
                    quantity=quantity,
                )
            )
            total += item_data["unit_price"] * quantity
        order.total = round(total, 2)

        self.db.add(order)
        await self.db.commit()
        return await self.get_order_by_id(order.id)

    async def confirm_order(self, order_id: int) -> Optional[Order]:
        """Confirm an order."""
        order = await self.get_order_by_id(order_id)
        if order:
            order.status = "confirmed"
            await self.db.commit()
            order = await self.get_order_by_id(order_id)
        return order

    async def get_order_by_id(self, order_id: int) -> Optional[Order]:
        """Get order by ID with items."""
        result = await self.db.execute(
            select(Order)
            .where(Order.id == order_id)
            .options(selectinload(Order.items))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_orders(self, limit: int = 100) -> List[Order]:
        """Get the most recent orders with their items."""
        result = await self.db.execute(
            select(Order)
            .options(selectinload(Order.items))
            .order_by(desc(Order.created_at), desc(Order.id))
            .limit(limit)
        )
        return list(result.scalars().all())
