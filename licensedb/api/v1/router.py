from fastapi import APIRouter

from licensedb.api.v1.endpoints import obligations

# Create API router
api_router = APIRouter()

# Include routers
api_router.include_router(obligations.router, prefix="/obligations", tags=["Obligations"])

__all__ = ["api_router"]
