"""Menu view composition."""
import logging
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from bistro.services.cart.store import CartStore
from bistro.services.catalog.loader import CatalogLoader, CatalogState
from bistro.services.catalog.models import MenuItem
from bistro.services.menu.constants import (
    CART_PATH,
    EMPTY_MESSAGE,
    LOAD_ERROR_MESSAGE,
    NEW_BADGE,
    PLACEHOLDER_IMAGE_URL,
    POPULAR_BADGE,
    format_price,
)

logger = logging.getLogger(__name__)


class RenderMode(str, Enum):
    """What the menu grid area shows."""

    SPINNER = "spinner"
    EMPTY = "empty"
    GRID = "grid"


class CardAction(str, Enum):
    """Controls a card can expose."""

    ADD = "add"
    DECREASE = "decrease"
    INCREASE = "increase"


class MenuCard(BaseModel):
    """A single rendered menu item."""

    id: str
    name: str
    price_label: str
    image_url: str
    category: Optional[str] = None
    badges: List[str] = []
    is_unavailable: bool = False
    quantity: int = 0
    quantity_label: Optional[str] = None
    actions: List[CardAction] = []


class MenuViewModel(BaseModel):
    """Everything needed to draw the menu page."""

    state: CatalogState
    render_mode: RenderMode
    search_term: str = ""
    items: List[MenuCard] = []
    empty_message: Optional[str] = None
    error_message: Optional[str] = None
    cart_count: int = 0
    has_items_in_cart: bool = False
    cart_button_label: Optional[str] = None
    cart_path: str = CART_PATH


def matches_search(item: MenuItem, search_term: str) -> bool:
    """Case-insensitive substring match on the item name."""
    return search_term.lower() in item.name.lower()


def actions_for(item: MenuItem, quantity: int) -> List[CardAction]:
    """Controls shown for an item given its quantity in the cart."""
    if item.is_unavailable:
        return []
    if quantity > 0:
        return [CardAction.DECREASE, CardAction.INCREASE]
    return [CardAction.ADD]


class MenuView:
    """Menu page state for one activation.

    The view owns its catalog loader for the activation and shares the
    session's cart. All derived state is recomputed from the catalog, the
    search term and the cart on every access.
    """

    def __init__(self, loader: CatalogLoader, cart: CartStore, search_term: str = ""):
        self.loader = loader
        self.cart = cart
        self.search_term = search_term

    async def activate(self) -> None:
        """Load the catalog for this activation."""
        await self.loader.load_catalog()

    @property
    def catalog(self) -> List[MenuItem]:
        return self.loader.items

    @property
    def filtered_items(self) -> List[MenuItem]:
        return [item for item in self.catalog if matches_search(item, self.search_term)]

    @property
    def has_items_in_cart(self) -> bool:
        return self.cart.total_count() > 0

    @property
    def cart_button_label(self) -> Optional[str]:
        if not self.has_items_in_cart:
            return None
        return f"Go to Cart ({self.cart.total_count()})"

    @property
    def render_mode(self) -> RenderMode:
        if self.loader.is_loading:
            return RenderMode.SPINNER
        if not self.filtered_items:
            return RenderMode.EMPTY
        return RenderMode.GRID

    def card_for(self, item: MenuItem) -> MenuCard:
        unavailable = item.is_unavailable
        quantity = self.cart.quantity_of(item.id)

        badges = []
        if not unavailable:
            if item.is_new:
                badges.append(NEW_BADGE)
            if item.is_popular:
                badges.append(POPULAR_BADGE)

        return MenuCard(
            id=item.id,
            name=item.name,
            price_label=format_price(item.price),
            image_url=str(item.image) if item.image else PLACEHOLDER_IMAGE_URL,
            category=str(item.category) if item.category and not unavailable else None,
            badges=badges,
            is_unavailable=unavailable,
            quantity=quantity,
            quantity_label=f"{quantity} in cart" if quantity > 0 and not unavailable else None,
            actions=actions_for(item, quantity),
        )

    # User actions

    def set_search_term(self, term: str) -> None:
        self.search_term = term or ""

    def clear_search(self) -> None:
        self.search_term = ""

    def add_to_cart(self, item_id: str) -> bool:
        """Add one of a catalog item. Returns False if it cannot be added."""
        item = self.loader.get_item(item_id)
        if item is None or item.is_unavailable:
            logger.info(f"[MENU] Ignoring add for unknown or unavailable item {item_id}")
            return False
        self.cart.add_to_cart(item)
        return True

    def decrease_quantity(self, item_id: str) -> None:
        self.cart.decrease_quantity(item_id)

    def go_to_cart(self) -> str:
        return CART_PATH

    def snapshot(self) -> MenuViewModel:
        """Build the view model for the current state."""
        mode = self.render_mode
        failed = self.loader.state == CatalogState.LOAD_ERROR
        return MenuViewModel(
            state=self.loader.state,
            render_mode=mode,
            search_term=self.search_term,
            items=[self.card_for(item) for item in self.filtered_items] if mode == RenderMode.GRID else [],
            empty_message=EMPTY_MESSAGE if mode == RenderMode.EMPTY else None,
            error_message=LOAD_ERROR_MESSAGE if failed else None,
            cart_count=self.cart.total_count(),
            has_items_in_cart=self.has_items_in_cart,
            cart_button_label=self.cart_button_label,
        )
