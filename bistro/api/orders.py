"""Order history API endpoints for the admin dashboard."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.api.auth import require_auth
from bistro.db.database import get_db
from bistro.db.models import Order
from bistro.services.persistence.orders import OrderPersistenceService

router = APIRouter()
logger = logging.getLogger(__name__)


class OrderItemResponse(BaseModel):
    """Order item response model."""
    id: int
    item_id: str
    item_name: str
    unit_price: float
    quantity: int


class OrderResponse(BaseModel):
    """Order response model."""
    id: int
    status: str
    total: float
    note: Optional[str] = None
    created_at: str
    items: List[OrderItemResponse] = []


def to_order_response(order: Order) -> OrderResponse:
    """Convert an order row to its response model."""
    return OrderResponse(
        id=order.id,
        status=order.status,
        total=order.total,
        note=order.note,
        created_at=order.created_at.isoformat() if order.created_at else "",
        items=[
            OrderItemResponse(
                id=item.id,
                item_id=item.item_id,
                item_name=item.item_name,
                unit_price=item.unit_price,
                quantity=item.quantity,
            )
            for item in order.items
        ],
    )


@router.get(
    "/api/orders",
    response_model=List[OrderResponse],
    dependencies=[Depends(require_auth)],
)
async def get_order_history(
    request: Request,
    limit: int = 100,
    db: AsyncSession = Depends(get_db),
):
    """Get recent orders with their items. Requires an admin session."""
    logger.info(
        f"[ORDERS HISTORY] Request received - limit: {limit}, "
        f"Client: {request.client.host if request.client else 'unknown'}"
    )

    try:
        orders = await OrderPersistenceService(db).list_orders(limit=limit)
        logger.info(f"[ORDERS HISTORY] Found {len(orders)} orders in database")
        return [to_order_response(order) for order in orders]

    except Exception as e:
        logger.error(
            f"[ORDERS HISTORY] Error fetching order history - "
            f"limit: {limit}, Error: {type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail=f"Error fetching order history: {str(e)}")
