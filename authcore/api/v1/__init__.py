"""
API Version 1 - Route definitions.
"""
from fastapi import APIRouter

from .auth import router as auth_router
from .principals import router as principals_router

# Create main v1 router
api_router = APIRouter(prefix="/v1")

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(principals_router)

__all__ = ['api_router']
