"""Pydantic request models for API endpoints."""

from typing import Literal

from pydantic import BaseModel, Field

from adventure_book.demo import NEW_STORY_TITLE


class CreateStory(BaseModel):
    title: str = NEW_STORY_TITLE


class UpdateStory(BaseModel):
    title: str


class IntroductionBody(BaseModel):
    title: str
    text: str


class ChoiceBody(BaseModel):
    text: str = ""
    goto: int | None = None


class EffectBody(BaseModel):
    type: Literal["add_item", "remove_item", ""] = ""
    item: str = ""


class PassageDraftBody(BaseModel):
    text: str
    notes: str = ""
    is_ending: bool = False
    ending_type: str = ""
    choices: list[ChoiceBody] = Field(default_factory=list)
    effects: list[EffectBody] = Field(default_factory=list)


class UpdateSettings(BaseModel):
    ending_type_required: bool | None = None
    check_choice_targets: bool | None = None
    saving_indicator_delay_ms: int | None = None
