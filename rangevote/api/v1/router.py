"""Main API router for v1."""
from fastapi import APIRouter

from rangevote.api.v1.endpoints import ballots, marketplace, organizations, share_links

api_router = APIRouter(prefix="/api/v1")

# Include all endpoint routers
api_router.include_router(ballots.router, prefix="/ballots", tags=["Ballots"])
api_router.include_router(share_links.router, tags=["Share Links"])
api_router.include_router(marketplace.router, prefix="/marketplace", tags=["Marketplace"])
api_router.include_router(organizations.router, prefix="/organizations", tags=["Organizations"])
