"""JSON file storage for story documents.

All state is stored in flat JSON files under a configurable base directory.
There is no database or ORM — reads and writes go through plain helper
methods that load and dump JSON.

Directory layout:

    {base}/
      config.json             ← application settings (see adventure_book.config)
      stories/
        {id}.json             ← StoredStory: id, title, content, timestamps

`content` is the adventure document serialised as JSON text. This module
does not interpret it; see adventure_book.adventures.
"""

from __future__ import annotations

import json
import logging
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from adventure_book.errors import StoryNotFoundError
from adventure_book.models import StoredStory

logger = logging.getLogger(__name__)

_STORY_ID_RE = re.compile(r"^[0-9a-f-]+$")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Storage:
    def __init__(self, base_path: Path) -> None:
        self._base = base_path
        self._stories_root = base_path / "stories"
        self._stories_root.mkdir(parents=True, exist_ok=True)

    @property
    def base_path(self) -> Path:
        return self._base

    # ------------------------------------------------------------------
    # Internal path helpers
    # ------------------------------------------------------------------

    def _story_file(self, story_id: str) -> Path | None:
        if not _STORY_ID_RE.match(story_id):
            return None
        return self._stories_root / f"{story_id}.json"

    def _read_json(self, path: Path) -> Any:
        return json.loads(path.read_text())

    def _write_json(self, path: Path, data: Any) -> None:
        path.write_text(json.dumps(data, indent=2))

    def _save(self, story: StoredStory) -> None:
        path = self._stories_root / f"{story.id}.json"
        path.write_text(story.model_dump_json(indent=2))
        logger.debug("stored story %s (%d chars)", story.id, len(story.content))

    # ------------------------------------------------------------------
    # Stories
    # ------------------------------------------------------------------

    def create_story(self, title: str, content: str) -> str:
        now = _now()
        story = StoredStory(
            id=str(uuid.uuid4()),
            title=title,
            content=content,
            last_edited=now,
            created_at=now,
        )
        self._save(story)
        logger.info("created story %s %r", story.id, title)
        return story.id

    def get_story(self, story_id: str) -> StoredStory | None:
        path = self._story_file(story_id)
        if path is None or not path.is_file():
            return None
        return StoredStory.model_validate_json(path.read_text())

    def list_stories(self) -> list[StoredStory]:
        """All stories, most recently edited first."""
        stories = [
            StoredStory.model_validate_json(path.read_text())
            for path in self._stories_root.glob("*.json")
        ]
        stories.sort(key=lambda s: s.last_edited, reverse=True)
        return stories

    def delete_story(self, story_id: str) -> bool:
        path = self._story_file(story_id)
        if path is None or not path.is_file():
            return False
        path.unlink()
        logger.info("deleted story %s", story_id)
        return True

    def update_story_content(self, story_id: str, content: str) -> StoredStory:
        return self._update(story_id, content=content)

    def update_story_title(self, story_id: str, title: str) -> StoredStory:
        return self._update(story_id, title=title)

    def _update(self, story_id: str, **fields: Any) -> StoredStory:
        story = self.get_story(story_id)
        if story is None:
            raise StoryNotFoundError(f"Story with id {story_id} not found")
        story = story.model_copy(update={**fields, "last_edited": _now()})
        self._save(story)
        return story

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def read_config(self) -> dict[str, Any]:
        path = self._base / "config.json"
        if not path.is_file():
            return {}
        return self._read_json(path)

    def write_config(self, config: dict[str, Any]) -> None:
        self._write_json(self._base / "config.json", config)
