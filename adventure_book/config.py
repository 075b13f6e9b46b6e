"""Application settings (authoring policies and the saving indicator)."""

from __future__ import annotations

from typing import Any

from adventure_book.storage import Storage

_CONFIG_DEFAULTS: dict[str, Any] = {
    # Endings may be saved without a victory/defeat/neutral type unless this is set.
    "ending_type_required": False,
    # Reject choices that point at a passage id the adventure does not have.
    "check_choice_targets": False,
    "saving_indicator_delay_ms": 500,
}


def get_config(storage: Storage) -> dict[str, Any]:
    """Read config, returning defaults merged with stored values."""
    config = dict(_CONFIG_DEFAULTS)
    stored = storage.read_config()
    for key in _CONFIG_DEFAULTS:
        if key in stored:
            config[key] = stored[key]
    return config


def update_config(storage: Storage, fields: dict[str, Any]) -> dict[str, Any]:
    """Merge known fields into config and persist. Returns full config."""
    config = get_config(storage)
    for key, value in fields.items():
        if key in _CONFIG_DEFAULTS:
            config[key] = value
    storage.write_config(config)
    return config
