from fastapi import APIRouter
from .endpoints import podcasts, health

api_router = APIRouter()

api_router.include_router(podcasts.router, tags=["podcasts"])
api_router.include_router(health.router, tags=["health"])
