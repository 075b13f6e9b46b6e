"""FastAPI API endpoints under /api.

Endpoint groups: settings, stories (CRUD, introduction and passage editing)
and play (playtest navigation with a per-story inventory session).

Structural errors map to HTTP status by kind: a missing story or passage is
404, an unparseable passage id is 400 and a document that fails to load is
500.
"""

from fastapi import APIRouter

from .play import router as play_router
from .settings import router as settings_router
from .stories import router as stories_router

router = APIRouter()
router.include_router(settings_router)
router.include_router(stories_router)
router.include_router(play_router)
