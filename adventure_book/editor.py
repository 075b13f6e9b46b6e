"""Passage editor state machine.

Holds an editable draft of one passage:

    text          paragraphs joined by a blank line
    notes         free text, "" when the passage has none
    choices       [ChoiceDraft]  (regular passages)
    effects       [EffectDraft]  (regular passages)
    ending_type   "" | "victory" | "defeat" | "neutral"  (endings)
    is_ending     which shape the draft currently has

plus one error slot per field group. Each mutator clears only the error it
invalidates.

Switching shape with `set_is_ending()` keeps the data of the shape being left
in a two-slot shadow buffer, so flipping back restores it. The buffer lives
for the editing session only and `reset_state()` drops it.

`has_changes` is recomputed on every access by a positional diff against the
original passage.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel

from adventure_book.models import EndingPassage, Passage, RegularPassage

logger = logging.getLogger(__name__)

PARAGRAPH_DELIMITER = "\n\n"
_BLANK_LINE_RE = re.compile(r"\n\s*\n")

DraftEffectType = Literal["add_item", "remove_item", ""]


class ChoiceDraft(BaseModel):
    text: str = ""
    goto: int | None = None
    text_error: str | None = None
    goto_error: str | None = None


class EffectDraft(BaseModel):
    type: DraftEffectType = ""
    item: str = ""
    error: str | None = None


@dataclass
class ModeShadow:
    """What the draft looked like before its last shape switch."""

    saved_choices_and_effects: tuple[list[ChoiceDraft], list[EffectDraft]] | None = None
    saved_ending_type: str | None = None


def join_paragraphs(paragraphs: list[str]) -> str:
    return PARAGRAPH_DELIMITER.join(paragraphs)


def split_paragraphs(text: str) -> list[str]:
    """Split free text on blank lines, dropping empty paragraphs."""
    return [p.strip() for p in _BLANK_LINE_RE.split(text) if p.strip()]


def _choice_drafts(passage: Passage) -> list[ChoiceDraft]:
    if not isinstance(passage, RegularPassage):
        return []
    return [ChoiceDraft(text=c.text, goto=c.goto) for c in passage.choices]


def _effect_drafts(passage: Passage) -> list[EffectDraft]:
    if not isinstance(passage, RegularPassage):
        return []
    return [EffectDraft(type=e.type, item=e.item) for e in passage.effects or []]


def _parse_goto(value: int | str | None) -> int | None:
    if value is None or isinstance(value, int):
        return value
    value = value.strip()
    if not value.isdigit():
        return None
    return int(value)


class PassageEditor:
    """Editable draft of a single passage."""

    def __init__(self, passage: Passage) -> None:
        self.passage = passage
        self._load()

    def _load(self) -> None:
        passage = self.passage
        self.text = join_paragraphs(passage.paragraphs)
        self.notes = passage.notes or ""
        self.is_ending = passage.ending
        self.choices: list[ChoiceDraft] = _choice_drafts(passage)
        self.effects: list[EffectDraft] = _effect_drafts(passage)
        self.ending_type = (passage.type or "") if isinstance(passage, EndingPassage) else ""

        self.text_error: str | None = None
        self.choices_error: str | None = None
        self.effects_error: str | None = None
        self.ending_type_error: str | None = None

        self.pending_choice_focus: int | None = None
        self.pending_effect_focus: int | None = None
        self._shadow = ModeShadow()

    # ------------------------------------------------------------------
    # Text and notes
    # ------------------------------------------------------------------

    def set_text(self, value: str) -> None:
        self.text = value
        self.text_error = None

    def set_notes(self, value: str) -> None:
        self.notes = value

    # ------------------------------------------------------------------
    # Choices
    # ------------------------------------------------------------------

    def add_choice(self) -> int:
        """Append an empty choice and return its index, which should receive focus."""
        index = len(self.choices)
        self.choices = [*self.choices, ChoiceDraft()]
        self.pending_choice_focus = index
        self.choices_error = None
        return index

    def remove_choice(self, index: int) -> None:
        self.choices = [c for i, c in enumerate(self.choices) if i != index]

    def set_choice_text(self, index: int, value: str) -> None:
        self._replace_choice(index, text=value, text_error=None)

    def set_choice_goto(self, index: int, value: int | str | None) -> None:
        self._replace_choice(index, goto=_parse_goto(value), goto_error=None)

    def _replace_choice(self, index: int, **update) -> None:
        choices = list(self.choices)
        choices[index] = choices[index].model_copy(update=update)
        self.choices = choices

    def take_choice_focus(self) -> int | None:
        index, self.pending_choice_focus = self.pending_choice_focus, None
        return index

    # ------------------------------------------------------------------
    # Effects
    # ------------------------------------------------------------------

    def add_effect(self) -> int:
        index = len(self.effects)
        self.effects = [*self.effects, EffectDraft()]
        self.pending_effect_focus = index
        self.effects_error = None
        return index

    def remove_effect(self, index: int) -> None:
        self.effects = [e for i, e in enumerate(self.effects) if i != index]
        self.effects_error = None

    def set_effect_type(self, index: int, value: DraftEffectType) -> None:
        self._replace_effect(index, type=value, error=None)

    def set_effect_item(self, index: int, value: str) -> None:
        self._replace_effect(index, item=value, error=None)

    def _replace_effect(self, index: int, **update) -> None:
        effects = list(self.effects)
        effects[index] = effects[index].model_copy(update=update)
        self.effects = effects
        # a duplicate reported for the group may no longer apply
        self.effects_error = None

    def take_effect_focus(self) -> int | None:
        index, self.pending_effect_focus = self.pending_effect_focus, None
        return index

    # ------------------------------------------------------------------
    # Ending
    # ------------------------------------------------------------------

    def set_ending_type(self, value: str) -> None:
        self.ending_type = value
        self.ending_type_error = None

    def set_is_ending(self, value: bool) -> None:
        """Switch between the regular and the ending shape."""
        if value == self.is_ending:
            return
        self.is_ending = value
        shadow = self._shadow

        if value:
            shadow.saved_choices_and_effects = (list(self.choices), list(self.effects))
            self.choices = []
            self.effects = []
            if shadow.saved_ending_type:
                self.ending_type = shadow.saved_ending_type
        else:
            shadow.saved_ending_type = self.ending_type
            self.ending_type = ""
            if shadow.saved_choices_and_effects is not None:
                saved_choices, saved_effects = shadow.saved_choices_and_effects
                if saved_choices:
                    self.choices = list(saved_choices)
                if saved_effects:
                    self.effects = list(saved_effects)

        logger.debug("passage draft switched to %s", "ending" if value else "regular")

    # ------------------------------------------------------------------
    # Change tracking
    # ------------------------------------------------------------------

    @property
    def has_changes(self) -> bool:
        passage = self.passage
        if self.text != join_paragraphs(passage.paragraphs):
            return True
        if self.notes != (passage.notes or ""):
            return True
        if self.is_ending != passage.ending:
            return True

        if self.is_ending:
            original_type = (passage.type or "") if isinstance(passage, EndingPassage) else ""
            return self.ending_type != original_type

        original_choices = _choice_drafts(passage)
        if len(self.choices) != len(original_choices):
            return True
        for draft, original in zip(self.choices, original_choices):
            if draft.text != original.text or draft.goto != original.goto:
                return True

        original_effects = _effect_drafts(passage)
        if len(self.effects) != len(original_effects):
            return True
        for draft, original in zip(self.effects, original_effects):
            if draft.type != original.type or draft.item != original.item:
                return True

        return False

    @property
    def has_errors(self) -> bool:
        if self.text_error or self.choices_error or self.effects_error or self.ending_type_error:
            return True
        if any(c.text_error or c.goto_error for c in self.choices):
            return True
        return any(e.error for e in self.effects)

    def errors(self) -> dict:
        """Every error slot that is currently set, keyed like the draft fields."""
        result: dict = {}
        for name in ("text_error", "choices_error", "effects_error", "ending_type_error"):
            value = getattr(self, name)
            if value:
                result[name] = value
        choice_errors = {
            i: c.model_dump(include={"text_error", "goto_error"}, exclude_none=True)
            for i, c in enumerate(self.choices)
            if c.text_error or c.goto_error
        }
        if choice_errors:
            result["choices"] = choice_errors
        effect_errors = {i: e.error for i, e in enumerate(self.effects) if e.error}
        if effect_errors:
            result["effects"] = effect_errors
        return result

    def reset_state(self) -> None:
        """Discard every edit, error and shadow slot."""
        self._load()

    def rebase(self, passage: Passage) -> None:
        """Make `passage` the baseline for change tracking without touching the draft."""
        self.passage = passage
