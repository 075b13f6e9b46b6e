"""Runtime navigation engine.

Tracks the player's inventory while they walk the passage graph. The
inventory is a pure function of the route history plus debug overrides:

  1. Every call to `sync()` derives a session key from the route: the
     literal "intro" at the introduction, otherwise the passage id.
  2. If the key differs from the previous one and the new key is "intro",
     the inventory is cleared in that same call, before anything reads it.
  3. If the resolved passage id differs from the previous one, the
     destination passage's effects are applied once, in order. Missing
     passages and endings contribute nothing.

`add_item()` / `remove_item()` are the debug inspector's manual overrides and
use the same set semantics.
"""

from __future__ import annotations

import logging
import math

from adventure_book.models import Adventure, InventoryItem, RegularPassage
from adventure_book.routing import Route

logger = logging.getLogger(__name__)

INTRO_KEY = "intro"

SessionKey = str | int | None

_UNSET = object()


def normalize_passage_id(passage_id: int | float | None) -> int | None:
    """Map an unparseable id (NaN) to "no current passage"."""
    if passage_id is None:
        return None
    if isinstance(passage_id, float):
        if math.isnan(passage_id):
            return None
        return int(passage_id)
    return passage_id


def session_key(passage_id: int | float | None, is_introduction: bool) -> SessionKey:
    if is_introduction:
        return INTRO_KEY
    return normalize_passage_id(passage_id)


class InventorySession:
    """Inventory for one playtest session of one adventure."""

    def __init__(self, adventure: Adventure | None = None) -> None:
        self.adventure = adventure
        self._inventory: set[str] = set()
        self._session_key: SessionKey | object = _UNSET
        self._passage_id: int | None | object = _UNSET

    @property
    def inventory(self) -> frozenset[str]:
        return frozenset(self._inventory)

    @property
    def current_passage_id(self) -> int | None:
        return None if self._passage_id is _UNSET else self._passage_id

    def has_item(self, item_id: str) -> bool:
        return item_id in self._inventory

    def items(self) -> list[InventoryItem]:
        """Held items in the adventure's declared order."""
        if self.adventure is None:
            return []
        return [item for item in self.adventure.items if item.id in self._inventory]

    def sync(self, passage_id: int | float | None, is_introduction: bool) -> frozenset[str]:
        """Bring the inventory up to date with the current route and return it."""
        key = session_key(passage_id, is_introduction)
        if key != self._session_key:
            if key == INTRO_KEY:
                self._inventory.clear()
            logger.debug("session key %r -> %r", self._session_key, key)
            self._session_key = key

        resolved = None if is_introduction else normalize_passage_id(passage_id)
        if resolved != self._passage_id:
            self._passage_id = resolved
            if resolved is not None:
                self._apply_effects(resolved)

        return self.inventory

    def visit(self, route: Route) -> frozenset[str]:
        return self.sync(route.passage_id, route.is_introduction)

    def enter_introduction(self) -> frozenset[str]:
        return self.sync(None, True)

    def enter_passage(self, passage_id: int | float | None) -> frozenset[str]:
        return self.sync(passage_id, False)

    def add_item(self, item_id: str) -> None:
        self._inventory.add(item_id)

    def remove_item(self, item_id: str) -> None:
        self._inventory.discard(item_id)

    def _apply_effects(self, passage_id: int) -> None:
        if self.adventure is None:
            return
        passage = self.adventure.passages.get(passage_id)
        if not isinstance(passage, RegularPassage) or not passage.effects:
            return
        for effect in passage.effects:
            if effect.type == "add_item":
                self._inventory.add(effect.item)
            elif effect.type == "remove_item":
                self._inventory.discard(effect.item)
            else:
                logger.warning("Unknown effect type %r on passage %d, skipped", effect.type, passage_id)
        logger.debug("applied %d effects for passage %d", len(passage.effects), passage_id)
