"""
API v1 main router.

Aggregates all API endpoint routers.
"""

from fastapi import APIRouter

from docpush.api.v1.endpoints import auth, documents, drafts, media

# Create main API router
api_router = APIRouter()

# Include endpoint routers
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"],
)

api_router.include_router(
    documents.router,
    prefix="/docs",
    tags=["Documents"],
)

api_router.include_router(
    drafts.router,
    prefix="/drafts",
    tags=["Drafts"],
)

api_router.include_router(
    media.router,
    prefix="/media",
    tags=["Media"],
)
