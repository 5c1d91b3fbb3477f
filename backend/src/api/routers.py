from fastapi import APIRouter

from .endpoints import chat
from .endpoints import health
from .endpoints import models

api_router = APIRouter()

# Include endpoint routers
# Health (no prefix)
api_router.include_router(health.router, prefix="", tags=["health"])
# RPC procedures, named <namespace>.<procedure>
api_router.include_router(models.router, prefix="/trpc", tags=["models"])
api_router.include_router(chat.router, prefix="/trpc", tags=["chat"])
