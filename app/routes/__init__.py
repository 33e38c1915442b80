"""
Routes package - exports all API routers
"""
from app.routes.contracts import router as contracts_router
from app.routes.memory import router as memory_router
from app.routes.webhooks import router as webhooks_router
from app.routes.admin import router as admin_router

__all__ = ["contracts_router", "memory_router", "webhooks_router", "admin_router"]
