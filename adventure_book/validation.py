"""Authoring rules.

Every rule returns an error message, or None when the value is acceptable.
Rules that the product has not settled on (whether an ending must name its
type, whether a choice may point at a passage that does not exist yet) are
policies chosen by the caller, usually from settings.
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable

from adventure_book.models import ENDING_TYPES, Effect

EndingTypeRule = Callable[[str], str | None]
EffectsRule = Callable[[list[Effect]], str | None]
ChoiceTargetRule = Callable[[int | None], str | None]

NO_CHOICES_ERROR = "Regular passages must have at least one choice"
EFFECT_INCOMPLETE_ERROR = "Effect type and item must be selected"


def validate_title(title: str) -> str | None:
    if not title or not title.strip():
        return "Title must not be blank"
    return None


def validate_introduction_text(text: str) -> str | None:
    if not text or not text.strip():
        return "Introduction content must not be blank"
    return None


def validate_passage_text(text: str) -> str | None:
    if not text or not text.strip():
        return "Passage content must not be blank"
    return None


def validate_choice_text(text: str) -> str | None:
    if not text or not text.strip():
        return "Choice content must not be blank"
    return None


def validate_choice_target(target: int | None) -> str | None:
    if target is None or target < 1:
        return "Go to passage must be selected"
    return None


def known_targets(passage_ids: Collection[int]) -> ChoiceTargetRule:
    """Target rule that also rejects ids missing from the adventure."""

    def rule(target: int | None) -> str | None:
        error = validate_choice_target(target)
        if error:
            return error
        if target not in passage_ids:
            return f"Passage #{target} does not exist"
        return None

    return rule


def validate_effects(effects: Iterable[Effect]) -> str | None:
    """Reject duplicate or contradictory inventory effects within one passage."""
    added: set[str] = set()
    removed: set[str] = set()

    for effect in effects:
        item = effect.item
        if effect.type == "add_item":
            if item in added:
                return f'Cannot add the same inventory item "{item}" multiple times'
            if item in removed:
                return f'Cannot add and remove the same inventory item "{item}" in the same passage'
            added.add(item)
        elif effect.type == "remove_item":
            if item in removed:
                return f'Cannot remove the same inventory item "{item}" multiple times'
            if item in added:
                return f'Cannot add and remove the same inventory item "{item}" in the same passage'
            removed.add(item)

    return None


def validate_ending_type_value(ending_type: str) -> str | None:
    if ending_type and ending_type not in ENDING_TYPES:
        return f'Unknown ending type "{ending_type}"'
    return None


def ending_type_optional(ending_type: str) -> str | None:
    return None


def ending_type_required(ending_type: str) -> str | None:
    if not ending_type:
        return "If there are no choices, ending type must be selected"
    return None


def ending_type_rule(required: bool) -> EndingTypeRule:
    return ending_type_required if required else ending_type_optional
