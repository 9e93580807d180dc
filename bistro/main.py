"""Main FastAPI application."""
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Optional
import logging
import os

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from bistro.api import admin, auth, cart, health, menu, orders, pages
from bistro.core.config import Settings, settings as default_settings
from bistro.core.logging import setup_logging
from bistro.core.middleware import CartSessionMiddleware
from bistro.db.database import create_engine, create_session_factory, init_db
from bistro.services.cart.registry import CartRegistry
from bistro.services.catalog.seed import seed_collection
from bistro.services.catalog.sql_store import SqlDocumentStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    app_settings: Settings = app.state.settings
    await init_db(app.state.engine)
    if app_settings.menu_backend == "sql" and app_settings.menu_seed_file:
        async with app.state.session_factory() as session:
            await seed_collection(
                SqlDocumentStore(session),
                app_settings.menu_collection,
                app_settings.menu_seed_file,
            )
    logger.info(f"{app_settings.restaurant_name} ordering app started")
    yield
    # Shutdown
    await app.state.engine.dispose()


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Build the application and its session-wide state."""
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="Bistro Ordering",
        description="Restaurant menu, cart and checkout",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Database and cart registry live as long as the app; handlers reach them through dependencies
    app.state.settings = app_settings
    app.state.engine = create_engine(app_settings.database_url)
    app.state.session_factory = create_session_factory(app.state.engine)
    app.state.cart_registry = CartRegistry(
        ttl=timedelta(hours=app_settings.cart_session_ttl_hours)
    )

    app.add_middleware(
        CartSessionMiddleware,
        max_age=app_settings.cart_session_ttl_hours * 3600,
    )

    app.include_router(health.router, tags=["health"])
    app.include_router(auth.router, tags=["auth"])
    app.include_router(menu.router, tags=["menu"])
    app.include_router(cart.router, tags=["cart"])
    app.include_router(orders.router, tags=["orders"])
    app.include_router(admin.router, tags=["admin"])
    app.include_router(pages.router)

    static_dir = os.path.join(os.path.dirname(__file__), "static")
    if os.path.exists(static_dir):
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    @app.get("/", include_in_schema=False)
    async def root():
        """Send visitors to the menu."""
        return RedirectResponse("/menu")

    return app


app = create_app()
