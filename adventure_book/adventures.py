"""Adventure-level persistence on top of the story store.

`AdventureStore` owns the parsed adventure for one story id. Editors call
`update_passage()` / `update_introduction()`; both write the whole document
back through `Storage.update_story_content`, which bumps `last_edited`.

`SavingState` wraps those writes so a UI can show a "saving" indicator that
only appears when a write takes longer than a short delay.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pydantic import ValidationError

from adventure_book.editor import split_paragraphs
from adventure_book.errors import AdventureLoadError, AdventureNotFoundError
from adventure_book.models import Adventure, Passage
from adventure_book.storage import Storage

logger = logging.getLogger(__name__)

T = TypeVar("T")


def serialize_adventure(adventure: Adventure) -> str:
    return json.dumps(adventure.to_document(), indent=2)


def parse_adventure(content: str) -> Adventure:
    try:
        return Adventure.model_validate_json(content)
    except ValidationError as e:
        raise AdventureLoadError(
            f"The adventure document is invalid and cannot be loaded: {e.error_count()} error(s)"
        ) from e


class SavingState:
    """Reference-counted "saving" flag with a display delay.

    `is_saving` turns true only once some wrapped operation has been pending
    for `delay` seconds, and stays true until the last one finishes.
    """

    def __init__(self, delay: float = 0.5) -> None:
        self.delay = delay
        self.is_saving = False
        self._pending = 0
        self._timer: asyncio.TimerHandle | None = None

    def _show(self) -> None:
        if self._pending > 0:
            self.is_saving = True

    async def with_saving(self, operation: Callable[[], Awaitable[T]]) -> T:
        self._pending += 1
        if self._timer is None:
            self._timer = asyncio.get_running_loop().call_later(self.delay, self._show)
        try:
            return await operation()
        finally:
            self._pending -= 1
            if self._pending == 0:
                if self._timer is not None:
                    self._timer.cancel()
                    self._timer = None
                self.is_saving = False


class AdventureStore:
    """The loaded adventure of one story and the writes that modify it."""

    def __init__(
        self,
        storage: Storage,
        story_id: str,
        saving: SavingState | None = None,
    ) -> None:
        self._storage = storage
        self.story_id = story_id
        self.saving = saving or SavingState()
        self._adventure: Adventure | None = None

    @property
    def adventure(self) -> Adventure:
        if self._adventure is None:
            return self.load()
        return self._adventure

    def load(self) -> Adventure:
        """Load and parse the story. Cached until `reload_adventure()`."""
        if self._adventure is not None:
            return self._adventure
        story = self._storage.get_story(self.story_id)
        if story is None:
            raise AdventureNotFoundError()
        adventure = parse_adventure(story.content)
        for passage_id, goto in adventure.find_dangling_targets():
            logger.warning(
                "story %s: passage %d has a choice to missing passage %d",
                self.story_id, passage_id, goto,
            )
        self._adventure = adventure
        return adventure

    async def reload_adventure(self) -> Adventure:
        self._adventure = None
        return self.load()

    async def update_passage(self, passage_id: int, passage: Passage) -> None:
        async def write() -> None:
            adventure = self.adventure
            passages = {**adventure.passages, passage_id: passage}
            self._write(adventure.model_copy(update={"passages": passages}))

        await self.saving.with_saving(write)

    async def update_introduction(self, title: str, text: str) -> None:
        async def write() -> None:
            adventure = self.adventure
            updated = adventure.model_copy(
                update={
                    "metadata": adventure.metadata.model_copy(update={"title": title}),
                    "intro": adventure.intro.model_copy(
                        update={"paragraphs": split_paragraphs(text)}
                    ),
                }
            )
            self._write(updated)
            self._storage.update_story_title(self.story_id, title)

        await self.saving.with_saving(write)

    async def update_title(self, title: str) -> None:
        """Rename the story and the adventure's metadata title together."""

        async def write() -> None:
            adventure = self.adventure
            self._write(
                adventure.model_copy(
                    update={"metadata": adventure.metadata.model_copy(update={"title": title})}
                )
            )
            self._storage.update_story_title(self.story_id, title)

        await self.saving.with_saving(write)

    def _write(self, adventure: Adventure) -> None:
        self._storage.update_story_content(self.story_id, serialize_adventure(adventure))
        self._adventure = adventure
