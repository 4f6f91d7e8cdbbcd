"""Main FastAPI application."""
from fastapi import FastAPI
from contextlib import asynccontextmanager

from quickorder.core.config import settings
from quickorder.core.dependencies import get_services
from quickorder.core.logging import setup_logging
from quickorder.api import agents, auth, chat, health, menu, notifications, orders


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    if settings.order_backend == "sql":
        from quickorder.db.database import init_db

        await init_db()
    get_services()
    yield
    # Shutdown
    get_services().relay.detach()


app = FastAPI(
    title="Quick Order",
    description="Chat order intake and admin order management for a food delivery service",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, tags=["auth"])
app.include_router(chat.router, tags=["chat"])
app.include_router(orders.router, tags=["orders"])
app.include_router(agents.router, tags=["agents"])
app.include_router(notifications.router, tags=["notifications"])
app.include_router(menu.router, tags=["menu"])


@app.get("/")
async def root():
    """API information."""
    return {
        "message": "Quick Order API",
        "version": "0.1.0",
    }
