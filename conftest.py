import copy

import pytest

from adventure_book.models import Adventure
from adventure_book.storage import Storage

SAMPLE_ADVENTURE = {
    "metadata": {"title": "The Cave", "author": "Tester", "version": "1.0"},
    "intro": {"paragraphs": ["You wake in a cave.", "It is dark."], "action": "Begin"},
    "passages": {
        "1": {
            "paragraphs": ["A", "B"],
            "choices": [{"text": "Go", "goto": 2}],
        },
        "2": {
            "paragraphs": ["You find a key."],
            "choices": [{"text": "Onward", "goto": 3}, {"text": "Back", "goto": 1}],
            "effects": [{"type": "add_item", "item": "key"}],
        },
        "3": {
            "paragraphs": ["A locked door. You use the key."],
            "notes": "Key is consumed here.",
            "choices": [{"text": "Through the door", "goto": 4}],
            "effects": [
                {"type": "remove_item", "item": "key"},
                {"type": "add_item", "item": "lamp"},
            ],
        },
        "4": {"paragraphs": ["End"], "ending": True},
        "5": {"paragraphs": ["You escape."], "ending": True, "type": "victory"},
    },
    "items": [{"id": "lamp", "name": "Lamp"}, {"id": "key", "name": "Key"}],
}


@pytest.fixture
def storage(tmp_path):
    """A fresh, empty store in a temporary directory."""
    return Storage(tmp_path / "data")


@pytest.fixture
def sample_document() -> dict:
    """The sample adventure as a plain document, safe to mutate."""
    return copy.deepcopy(SAMPLE_ADVENTURE)


@pytest.fixture
def adventure(sample_document) -> Adventure:
    return Adventure.model_validate(sample_document)
