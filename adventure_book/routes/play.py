"""Playtest endpoints.

One InventorySession per story lives on the app for as long as the server
runs. Visiting the introduction (or passage 0) empties it; visiting a passage
applies that passage's effects once.
"""

from fastapi import APIRouter, Request

from adventure_book.errors import AdventureBookError
from adventure_book.models import RESET_PASSAGE_ID, Adventure
from adventure_book.navigation import InventorySession
from adventure_book.routing import introduction_path, parse_passage_id, resolve_passage

from .deps import http_error, open_store

router = APIRouter()


def _session(request: Request, story_id: str, adventure: Adventure) -> InventorySession:
    sessions: dict[str, InventorySession] = request.app.state.play_sessions
    session = sessions.get(story_id)
    if session is None:
        session = sessions[story_id] = InventorySession(adventure)
    session.adventure = adventure
    return session


def _inventory(session: InventorySession) -> dict:
    return {
        "inventory": sorted(session.inventory),
        "items": [item.model_dump() for item in session.items()],
    }


def _introduction(story_id: str, adventure: Adventure, session: InventorySession) -> dict:
    session.enter_introduction()
    return {
        "route": introduction_path(story_id),
        "title": adventure.metadata.title,
        "paragraphs": adventure.intro.paragraphs,
        "action": adventure.intro.action,
        **_inventory(session),
    }


@router.get("/stories/{story_id}/play/introduction")
async def play_introduction(request: Request, story_id: str):
    """Show the introduction and start a fresh inventory."""
    adventure = open_store(request, story_id).adventure
    return _introduction(story_id, adventure, _session(request, story_id, adventure))


@router.get("/stories/{story_id}/play/passages/{passage_id}")
async def play_passage(request: Request, story_id: str, passage_id: str):
    """Arrive at a passage. Passage 0 goes back to the introduction."""
    adventure = open_store(request, story_id).adventure
    session = _session(request, story_id, adventure)
    try:
        pid = parse_passage_id(passage_id)
        if pid == RESET_PASSAGE_ID:
            return _introduction(story_id, adventure, session)
        passage = resolve_passage(adventure, pid)
    except AdventureBookError as e:
        raise http_error(e) from e

    session.enter_passage(pid)
    return {"id": pid, "passage": passage.to_document(), **_inventory(session)}


@router.post("/stories/{story_id}/play/inventory/{item_id}")
async def add_inventory_item(request: Request, story_id: str, item_id: str):
    """Debug override: put an item in the inventory."""
    adventure = open_store(request, story_id).adventure
    session = _session(request, story_id, adventure)
    session.add_item(item_id)
    return _inventory(session)


@router.delete("/stories/{story_id}/play/inventory/{item_id}")
async def remove_inventory_item(request: Request, story_id: str, item_id: str):
    """Debug override: take an item out of the inventory."""
    adventure = open_store(request, story_id).adventure
    session = _session(request, story_id, adventure)
    session.remove_item(item_id)
    return _inventory(session)
