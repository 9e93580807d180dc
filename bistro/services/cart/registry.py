"""Cart sessions."""
import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Optional

from bistro.services.cart.store import CartStore

logger = logging.getLogger(__name__)

CART_COOKIE_NAME = "cart_session"


def create_cart_token() -> str:
    """Generate a secure cart session token."""
    return secrets.token_urlsafe(32)


@dataclass
class CartSession:
    """A cart and the last time its session was seen."""

    cart: CartStore = field(default_factory=CartStore)
    last_seen: datetime = field(default_factory=datetime.utcnow)


class CartRegistry:
    """Maps cart session tokens to carts for the lifetime of the app."""

    def __init__(self, ttl: timedelta = timedelta(hours=24)):
        self.ttl = ttl
        self._sessions: Dict[str, CartSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get_or_create(self, token: str, now: Optional[datetime] = None) -> CartStore:
        """Get the cart for a session, creating an empty one if needed."""
        now = now or datetime.utcnow()
        self.evict_expired(now)

        session = self._sessions.get(token)
        if session is None:
            session = CartSession(last_seen=now)
            self._sessions[token] = session
            logger.debug("[CART] New cart session")
        session.last_seen = now
        return session.cart

    def evict_expired(self, now: Optional[datetime] = None) -> int:
        """Drop sessions idle for longer than the TTL."""
        now = now or datetime.utcnow()
        expired = [
            token for token, session in self._sessions.items()
            if now - session.last_seen > self.ttl
        ]
        for token in expired:
            del self._sessions[token]
        if expired:
            logger.info(f"[CART] Evicted {len(expired)} expired cart sessions")
        return len(expired)
