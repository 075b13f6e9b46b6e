"""Story CRUD, introduction editing and passage editing endpoints."""

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse

from adventure_book import demo
from adventure_book.config import get_config
from adventure_book.editor import ChoiceDraft, EffectDraft, PassageEditor
from adventure_book.errors import AdventureBookError
from adventure_book.introduction import IntroductionEditor
from adventure_book.routing import parse_passage_id, resolve_passage
from adventure_book.saving import PassageSaveController, SaveStatus
from adventure_book.validation import (
    ending_type_rule,
    known_targets,
    validate_choice_target,
    validate_title,
)

from .deps import get_storage, http_error, open_store
from .models import CreateStory, IntroductionBody, PassageDraftBody, UpdateStory

router = APIRouter()


def _summary(story) -> dict:
    return story.model_dump(mode="json", exclude={"content"})


def _title_errors(title_error: str) -> JSONResponse:
    return JSONResponse(status_code=422, content={"errors": {"title_error": title_error}})


@router.get("/stories")
async def list_stories(request: Request):
    """List all stories, most recently edited first."""
    return [_summary(s) for s in get_storage(request).list_stories()]


@router.post("/stories", status_code=201)
async def create_story(request: Request, body: CreateStory):
    """Create a story from the starter adventure."""
    title = body.title.strip()
    title_error = validate_title(title)
    if title_error:
        return _title_errors(title_error)
    storage = get_storage(request)
    story_id = demo.create_story(storage, title)
    return _summary(storage.get_story(story_id))


@router.get("/stories/{story_id}")
async def get_story(request: Request, story_id: str):
    """Get a single story's bookkeeping fields."""
    story = get_storage(request).get_story(story_id)
    if not story:
        raise HTTPException(404, "Adventure not found.")
    return _summary(story)


@router.delete("/stories/{story_id}")
async def delete_story(request: Request, story_id: str):
    """Delete a story."""
    if not get_storage(request).delete_story(story_id):
        raise HTTPException(404, "Adventure not found.")
    request.app.state.play_sessions.pop(story_id, None)
    return {"ok": True}


@router.patch("/stories/{story_id}")
async def rename_story(request: Request, story_id: str, body: UpdateStory):
    """Rename a story. The adventure's metadata title follows."""
    store = open_store(request, story_id)
    title = body.title.strip()
    title_error = validate_title(title)
    if title_error:
        return _title_errors(title_error)
    await store.update_title(title)
    return _summary(get_storage(request).get_story(story_id))


@router.get("/stories/{story_id}/adventure")
async def get_adventure(request: Request, story_id: str):
    """Get the parsed adventure document."""
    return open_store(request, story_id).adventure.to_document()


@router.put("/stories/{story_id}/introduction")
async def save_introduction(request: Request, story_id: str, body: IntroductionBody):
    """Validate and save the adventure title and introduction text."""
    store = open_store(request, story_id)
    editor = IntroductionEditor(store.adventure, store.update_introduction)
    editor.set_title(body.title)
    editor.set_text(body.text)
    if not await editor.save():
        errors = {"title_error": editor.title_error, "text_error": editor.text_error}
        return JSONResponse(
            status_code=422,
            content={"errors": {k: v for k, v in errors.items() if v}},
        )
    return store.adventure.to_document()["intro"]


@router.put("/stories/{story_id}/passages/{passage_id}")
async def save_passage(request: Request, story_id: str, passage_id: str, body: PassageDraftBody):
    """Validate a passage draft and save it over the existing passage."""
    store = open_store(request, story_id)
    adventure = store.adventure
    try:
        pid = parse_passage_id(passage_id)
        passage = resolve_passage(adventure, pid)
    except AdventureBookError as e:
        raise http_error(e) from e

    editor = PassageEditor(passage)
    editor.set_is_ending(body.is_ending)
    editor.set_text(body.text)
    editor.set_notes(body.notes)
    if body.is_ending:
        editor.set_ending_type(body.ending_type)
    else:
        editor.choices = [ChoiceDraft(text=c.text, goto=c.goto) for c in body.choices]
        editor.effects = [EffectDraft(type=e.type, item=e.item) for e in body.effects]

    config = get_config(get_storage(request))
    target_rule = (
        known_targets(set(adventure.passages))
        if config["check_choice_targets"]
        else validate_choice_target
    )
    controller = PassageSaveController(
        pid,
        editor,
        store.update_passage,
        ending_type_rule=ending_type_rule(config["ending_type_required"]),
        choice_target_rule=target_rule,
    )

    status = await controller.save()
    if status is SaveStatus.INVALID:
        return JSONResponse(status_code=422, content={"errors": editor.errors()})
    if status is SaveStatus.FAILED:
        raise HTTPException(500, controller.save_error)
    editor.rebase(controller.last_saved)
    return controller.last_saved.to_document()
