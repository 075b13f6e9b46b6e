"""Tests for application settings."""

import json

from adventure_book.config import get_config, update_config


def test_get_config_empty(storage):
    """Returns defaults when no config file exists."""
    assert get_config(storage) == {
        "ending_type_required": False,
        "check_choice_targets": False,
        "saving_indicator_delay_ms": 500,
    }


def test_update_config_persists(storage):
    result = update_config(storage, {"ending_type_required": True})
    assert result["ending_type_required"] is True
    assert get_config(storage)["ending_type_required"] is True
    assert get_config(storage)["check_choice_targets"] is False


def test_unknown_keys_ignored(storage):
    update_config(storage, {"theme": "dark"})
    assert "theme" not in get_config(storage)


def test_stored_values_override_defaults(storage):
    (storage.base_path / "config.json").write_text(json.dumps({"saving_indicator_delay_ms": 0}))
    config = get_config(storage)
    assert config["saving_indicator_delay_ms"] == 0
    assert config["ending_type_required"] is False
