"""
API router aggregator.
Includes all route modules.
"""
from fastapi import APIRouter
from poi_gateway.api import health, uploads, sync

api_router = APIRouter()

# Routes live at the root: the browser client calls /initiate, /complete, ...
api_router.include_router(uploads.router, tags=["uploads"])
api_router.include_router(sync.router, tags=["sync"])
api_router.include_router(health.router, tags=["health"])
