"""Save/validate controller for the passage editor.

`save()` runs every authoring check in one pass, so a blank text and a
choice without a target are reported together. Any failure is written onto
the editor's error slots and nothing is persisted. On success the draft is
converted to the canonical passage shape and handed to the persistence
callback, which is awaited.

A second `save()` issued while one is pending returns SaveStatus.BUSY
instead of writing twice.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from adventure_book.editor import PassageEditor, split_paragraphs
from adventure_book.models import Choice, Effect, EndingPassage, Passage, RegularPassage
from adventure_book.validation import (
    EFFECT_INCOMPLETE_ERROR,
    NO_CHOICES_ERROR,
    ChoiceTargetRule,
    EffectsRule,
    EndingTypeRule,
    ending_type_optional,
    validate_choice_target,
    validate_choice_text,
    validate_effects,
    validate_ending_type_value,
    validate_passage_text,
)

logger = logging.getLogger(__name__)

UpdatePassage = Callable[[int, Passage], Awaitable[None]]

SAVE_FAILED_ERROR = "Failed to save passage"


class SaveStatus(str, Enum):
    SAVED = "saved"
    INVALID = "invalid"
    BUSY = "busy"
    FAILED = "failed"


class PassageSaveController:
    """Validates an editor's draft and persists it as passage `passage_id`.

    Args:
        passage_id:        Id the passage is stored under.
        editor:            The draft to validate and read from.
        update_passage:    Persistence callback, awaited on success.
        ending_type_rule:  Whether an ending must name its type.
        effects_rule:      Group rule over the well-formed effects.
        choice_target_rule: Rule for each choice's `goto`.
    """

    def __init__(
        self,
        passage_id: int,
        editor: PassageEditor,
        update_passage: UpdatePassage,
        *,
        ending_type_rule: EndingTypeRule = ending_type_optional,
        effects_rule: EffectsRule = validate_effects,
        choice_target_rule: ChoiceTargetRule = validate_choice_target,
    ) -> None:
        self.passage_id = passage_id
        self.editor = editor
        self._update_passage = update_passage
        self._ending_type_rule = ending_type_rule
        self._effects_rule = effects_rule
        self._choice_target_rule = choice_target_rule

        self.is_saving = False
        self.save_error: str | None = None
        self.last_saved: Passage | None = None

    def validate(self) -> bool:
        """Run every check, record errors on the editor, return True if the draft is valid."""
        editor = self.editor
        valid = True

        text_error = validate_passage_text(editor.text)
        if text_error:
            editor.text_error = text_error
            valid = False

        if editor.is_ending:
            ending_error = validate_ending_type_value(editor.ending_type) or self._ending_type_rule(
                editor.ending_type
            )
            if ending_error:
                editor.ending_type_error = ending_error
                valid = False
            return valid

        if not editor.choices:
            editor.choices_error = NO_CHOICES_ERROR
            valid = False

        choices = []
        for choice in editor.choices:
            text_err = validate_choice_text(choice.text)
            goto_err = self._choice_target_rule(choice.goto)
            if text_err or goto_err:
                valid = False
            choices.append(choice.model_copy(update={"text_error": text_err, "goto_error": goto_err}))
        editor.choices = choices

        effects = []
        for effect in editor.effects:
            if not effect.type or not effect.item:
                effects.append(effect.model_copy(update={"error": EFFECT_INCOMPLETE_ERROR}))
                valid = False
            else:
                effects.append(effect)
        editor.effects = effects

        group_error = self._effects_rule(self._well_formed_effects())
        if group_error:
            editor.effects_error = group_error
            valid = False

        return valid

    def _well_formed_effects(self) -> list[Effect]:
        return [
            Effect(type=e.type, item=e.item) for e in self.editor.effects if e.type and e.item
        ]

    def build_passage(self) -> Passage:
        """Convert a validated draft into the canonical passage shape."""
        editor = self.editor
        paragraphs = split_paragraphs(editor.text)
        notes = editor.notes or None

        if editor.is_ending:
            return EndingPassage(
                paragraphs=paragraphs,
                notes=notes,
                type=editor.ending_type or None,
            )

        return RegularPassage(
            paragraphs=paragraphs,
            notes=notes,
            choices=[Choice(text=c.text, goto=c.goto) for c in editor.choices],
            effects=self._well_formed_effects() or None,
        )

    async def save(self) -> SaveStatus:
        if self.is_saving:
            logger.warning("save of passage %d ignored, another save is in flight", self.passage_id)
            return SaveStatus.BUSY

        if not self.validate():
            logger.warning(
                "passage %d not saved, validation failed: %s",
                self.passage_id,
                sorted(self.editor.errors()),
            )
            return SaveStatus.INVALID

        passage = self.build_passage()
        self.is_saving = True
        self.save_error = None
        try:
            await self._update_passage(self.passage_id, passage)
        except Exception:
            logger.exception("Failed to persist passage %d", self.passage_id)
            self.save_error = SAVE_FAILED_ERROR
            return SaveStatus.FAILED
        finally:
            self.is_saving = False

        self.last_saved = passage
        logger.info("passage %d saved", self.passage_id)
        return SaveStatus.SAVED

    async def retry(self) -> SaveStatus:
        return await self.save()

    def reset(self) -> None:
        self.editor.reset_state()
        self.save_error = None
