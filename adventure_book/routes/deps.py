"""Shared request helpers: storage lookup and structural error mapping."""

from fastapi import HTTPException, Request

from adventure_book.adventures import AdventureStore, SavingState
from adventure_book.config import get_config
from adventure_book.errors import (
    AdventureBookError,
    AdventureLoadError,
    AdventureNotFoundError,
    InvalidPassageIdError,
    PassageNotFoundError,
)
from adventure_book.storage import Storage

_STATUS_BY_KIND = {
    AdventureNotFoundError: 404,
    PassageNotFoundError: 404,
    InvalidPassageIdError: 400,
    AdventureLoadError: 500,
}


def http_error(error: AdventureBookError) -> HTTPException:
    return HTTPException(_STATUS_BY_KIND.get(type(error), 500), str(error))


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def open_store(request: Request, story_id: str) -> AdventureStore:
    """Load a story's adventure, turning structural errors into HTTP errors."""
    storage = get_storage(request)
    delay = get_config(storage)["saving_indicator_delay_ms"] / 1000
    store = AdventureStore(storage, story_id, SavingState(delay))
    try:
        store.load()
    except AdventureBookError as e:
        raise http_error(e) from e
    return store
