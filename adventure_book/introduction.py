"""Draft of the adventure title and introduction text."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from adventure_book.editor import join_paragraphs
from adventure_book.models import Adventure
from adventure_book.validation import validate_introduction_text, validate_title

logger = logging.getLogger(__name__)

UpdateIntroduction = Callable[[str, str], Awaitable[None]]


class IntroductionEditor:
    def __init__(self, adventure: Adventure, on_save: UpdateIntroduction) -> None:
        self.adventure = adventure
        self._on_save = on_save
        self.reset()

    @property
    def has_changes(self) -> bool:
        if self.title != self.adventure.metadata.title:
            return True
        return self.text != join_paragraphs(self.adventure.intro.paragraphs)

    def set_title(self, value: str) -> None:
        self.title = value
        self.title_error = None

    def set_text(self, value: str) -> None:
        self.text = value
        self.text_error = None

    async def save(self) -> bool:
        """Validate both fields, then persist. Returns False if validation failed."""
        self.title_error = validate_title(self.title)
        self.text_error = validate_introduction_text(self.text)
        if self.title_error or self.text_error:
            logger.warning("introduction not saved, validation failed")
            return False
        await self._on_save(self.title, self.text)
        return True

    def reset(self) -> None:
        self.title = self.adventure.metadata.title
        self.text = join_paragraphs(self.adventure.intro.paragraphs)
        self.title_error: str | None = None
        self.text_error: str | None = None
