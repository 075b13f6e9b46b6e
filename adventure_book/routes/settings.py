"""Health check and settings endpoints."""

from fastapi import APIRouter, Request

from adventure_book.config import get_config, update_config

from .deps import get_storage
from .models import UpdateSettings

router = APIRouter()


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.get("/settings")
async def get_settings(request: Request):
    """Get authoring policies and display settings."""
    return get_config(get_storage(request))


@router.patch("/settings")
async def update_settings(request: Request, body: UpdateSettings):
    """Update settings (partial merge)."""
    return update_config(get_storage(request), body.model_dump(exclude_none=True))
