"""
Liveness endpoints, mounted outside the /api prefix.
"""
from fastapi import APIRouter, Request
from app.core.utils import format_response

router = APIRouter(tags=["health"])


@router.get("/")
def root(request: Request):
    """Health check endpoint."""
    return format_response(f"{request.app.state.settings.APP_NAME} API is running")


@router.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "healthy"}
