"""Cart store."""
import logging
from collections import Counter
from typing import List, NamedTuple

from bistro.services.catalog.models import MenuItem
from bistro.services.menu.constants import display_price

logger = logging.getLogger(__name__)


class CartLine(NamedTuple):
    """One product in the cart with its quantity."""

    item: MenuItem
    quantity: int


class CartStore:
    """Flat, ordered sequence of item copies for one customer session.

    Adding the same product twice yields two entries. Per-id counts are kept
    in a Counter alongside the sequence and always match it.
    """

    def __init__(self):
        self._entries: List[MenuItem] = []
        self._counts: Counter = Counter()

    @property
    def entries(self) -> List[MenuItem]:
        return list(self._entries)

    def add_to_cart(self, item: MenuItem) -> None:
        """Append a copy of the item."""
        self._entries.append(item.model_copy())
        self._counts[item.id] += 1
        logger.debug(f"[CART] Added {item.id} - now {self._counts[item.id]}")

    def decrease_quantity(self, item_id: str) -> None:
        """Remove one entry for the item, if there is one."""
        for i, entry in enumerate(self._entries):
            if entry.id == item_id:
                del self._entries[i]
                self._counts[item_id] -= 1
                if not self._counts[item_id]:
                    del self._counts[item_id]
                logger.debug(f"[CART] Decreased {item_id}")
                return

    def remove_from_cart(self, item_id: str) -> None:
        """Remove every entry for the item."""
        self._entries = [entry for entry in self._entries if entry.id != item_id]
        removed = self._counts.pop(item_id, 0)
        if removed:
            logger.debug(f"[CART] Removed {removed} x {item_id}")

    def clear(self) -> None:
        self._entries.clear()
        self._counts.clear()

    def quantity_of(self, item_id: str) -> int:
        return self._counts.get(item_id, 0)

    def total_count(self) -> int:
        return len(self._entries)

    def lines(self) -> List[CartLine]:
        """Group entries by item id, in the order each was first added."""
        first_seen = {}
        for entry in self._entries:
            first_seen.setdefault(entry.id, entry)
        return [CartLine(item, self._counts[item_id]) for item_id, item in first_seen.items()]

    def subtotal(self) -> float:
        """Sum of displayed prices over every entry."""
        return round(sum(display_price(entry.price) for entry in self._entries), 2)
