"""HTTP middleware."""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from bistro.services.cart.registry import CART_COOKIE_NAME, create_cart_token


class CartSessionMiddleware(BaseHTTPMiddleware):
    """Ensures every request carries a cart session token.

    The token is exposed as ``request.state.cart_session_id`` and written
    back as an HTTP-only cookie on every response, so the cookie's max age
    slides with the cart's idle timeout.
    """

    def __init__(self, app, max_age: int = 86400):
        super().__init__(app)
        self.max_age = max_age

    async def dispatch(self, request: Request, call_next):
        token = request.cookies.get(CART_COOKIE_NAME) or create_cart_token()
        request.state.cart_session_id = token

        response: Response = await call_next(request)

        response.set_cookie(
            key=CART_COOKIE_NAME,
            value=token,
            httponly=True,
            max_age=self.max_age,
            samesite="lax",
        )
        return response
