"""Starter content for new stories and the `--demo` data set."""

from __future__ import annotations

import shutil

from adventure_book.adventures import serialize_adventure
from adventure_book.models import Adventure
from adventure_book.storage import Storage

NEW_STORY_TITLE = "Untitled adventure"

STARTER_ADVENTURE = {
    "metadata": {"title": NEW_STORY_TITLE, "author": "Anonymous", "version": "1.0"},
    "intro": {
        "paragraphs": ["Your adventure begins here."],
        "action": "Start your adventure",
    },
    "passages": {
        "1": {
            "paragraphs": ["You stand at a crossroads."],
            "choices": [{"text": "Walk on", "goto": 2}],
        },
        "2": {"paragraphs": ["The road ends here."], "ending": True, "type": "neutral"},
    },
}

DEMO_ADVENTURE = {
    "metadata": {"title": "The Lighthouse Key", "author": "Demo", "version": "1.0"},
    "intro": {
        "paragraphs": [
            "A storm is rolling in over the bay and the lighthouse is dark.",
            "Someone has to climb the tower and light the lamp before the fishing boats return.",
        ],
        "action": "Set out for the lighthouse",
    },
    "passages": {
        "1": {
            "paragraphs": ["The keeper's cottage door hangs open. A brass key glints on the table."],
            "choices": [
                {"text": "Take the key", "goto": 5},
                {"text": "Leave it and go straight to the tower", "goto": 3},
            ],
        },
        "2": {
            "paragraphs": ["The tower door is locked, but the brass key turns with a groan."],
            "choices": [{"text": "Climb the stairs", "goto": 4}],
            "effects": [{"type": "remove_item", "item": "brass_key"}],
        },
        "3": {
            "paragraphs": ["The tower door is locked. Waves crash over the rocks behind you."],
            "choices": [{"text": "Go back to the cottage", "goto": 1}],
        },
        "4": {
            "paragraphs": ["The lamp catches and sweeps its beam across the water.", "The boats turn for home."],
            "notes": "Only reachable with the key.",
            "ending": True,
            "type": "victory",
        },
        "5": {
            "paragraphs": ["The key is cold and heavier than it looks."],
            "choices": [{"text": "Head for the tower", "goto": 2}],
            "effects": [{"type": "add_item", "item": "brass_key"}],
        },
    },
    "items": [{"id": "brass_key", "name": "Brass key"}],
}


def create_story(storage: Storage, title: str = NEW_STORY_TITLE) -> str:
    """Create a story from the starter adventure, retitled."""
    metadata = {**STARTER_ADVENTURE["metadata"], "title": title}
    adventure = Adventure.model_validate({**STARTER_ADVENTURE, "metadata": metadata})
    return storage.create_story(title, serialize_adventure(adventure))


def create_demo_data(storage: Storage) -> str:
    """Wipe existing stories and create the demo adventure. Returns its story id."""
    stories_dir = storage.base_path / "stories"
    if stories_dir.exists():
        shutil.rmtree(stories_dir)
    stories_dir.mkdir(parents=True, exist_ok=True)

    adventure = Adventure.model_validate(DEMO_ADVENTURE)
    return storage.create_story(adventure.metadata.title, serialize_adventure(adventure))
