"""Core domain models.

An adventure is a graph of numbered passages connected by choices. Every
engine (navigation, passage editor, save controller) and the storage layer
operate on these types. Pydantic is used for validation and serialisation at
every data boundary.

Passages are a tagged union:

    RegularPassage   paragraphs, notes?, choices (>= 1), effects?
    EndingPassage    paragraphs, notes?, ending: true, type?

`to_document()` produces the canonical persisted shape, where optional fields
are omitted rather than stored empty.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
    model_validator,
)

EndingType = Literal["victory", "defeat", "neutral"]
EffectType = Literal["add_item", "remove_item"]

ENDING_TYPES: tuple[str, ...] = ("victory", "defeat", "neutral")

# Passage id 0 never names a passage; routes use it to mean "back to the introduction".
RESET_PASSAGE_ID = 0


class Choice(BaseModel):
    """A labelled edge to another passage."""

    model_config = ConfigDict(extra="forbid")

    text: str
    goto: int


class Effect(BaseModel):
    """An inventory mutation applied when the player arrives at a passage."""

    model_config = ConfigDict(extra="forbid")

    type: EffectType
    item: str


class InventoryItem(BaseModel):
    id: str
    name: str


class _PassageBase(BaseModel):
    model_config = ConfigDict(extra="forbid")

    paragraphs: list[str] = Field(min_length=1)
    notes: str | None = None

    @field_validator("paragraphs")
    @classmethod
    def _paragraphs_not_blank(cls, value: list[str]) -> list[str]:
        if any(not p.strip() for p in value):
            raise ValueError("paragraphs must be non-empty strings")
        return value

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class RegularPassage(_PassageBase):
    """A passage the player leaves through one of its choices."""

    choices: list[Choice] = Field(min_length=1)
    effects: list[Effect] | None = None

    @field_validator("effects")
    @classmethod
    def _drop_empty_effects(cls, value: list[Effect] | None) -> list[Effect] | None:
        return value or None

    @model_validator(mode="before")
    @classmethod
    def _strip_false_ending(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("ending") is False:
            data = {k: v for k, v in data.items() if k != "ending"}
        return data

    @property
    def ending(self) -> bool:
        return False


class EndingPassage(_PassageBase):
    """A terminal passage. Carries no choices or effects."""

    ending: Literal[True] = True
    type: EndingType | None = None


def _passage_tag(value: Any) -> str:
    if isinstance(value, dict):
        return "ending" if value.get("ending") else "regular"
    return "ending" if getattr(value, "ending", False) else "regular"


Passage = Annotated[
    Union[
        Annotated[RegularPassage, Tag("regular")],
        Annotated[EndingPassage, Tag("ending")],
    ],
    Discriminator(_passage_tag),
]


class Metadata(BaseModel):
    title: str
    author: str
    version: str

    @field_validator("title", "author", "version")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must be a non-empty string")
        return value


class Introduction(BaseModel):
    paragraphs: list[str] = Field(min_length=1)
    action: str

    @field_validator("action")
    @classmethod
    def _action_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("intro action must be a non-empty string")
        return value


class Adventure(BaseModel):
    """A complete adventure document."""

    metadata: Metadata
    intro: Introduction
    passages: dict[int, Passage]
    items: list[InventoryItem] = Field(default_factory=list)

    @model_validator(mode="after")
    def _passage_ids_positive(self) -> Adventure:
        for passage_id in self.passages:
            if passage_id <= RESET_PASSAGE_ID:
                raise ValueError(f"Passage id {passage_id} is reserved or negative")
        return self

    def passage_ids(self) -> list[int]:
        return sorted(self.passages)

    def ending_passage_ids(self) -> list[int]:
        return [pid for pid in self.passage_ids() if self.passages[pid].ending]

    def find_dangling_targets(self) -> list[tuple[int, int]]:
        """Return (passage id, goto) pairs whose target does not exist."""
        dangling = []
        for pid in self.passage_ids():
            passage = self.passages[pid]
            if isinstance(passage, RegularPassage):
                for choice in passage.choices:
                    if choice.goto not in self.passages:
                        dangling.append((pid, choice.goto))
        return dangling

    def get_item(self, item_id: str) -> InventoryItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def to_document(self) -> dict[str, Any]:
        doc: dict[str, Any] = {
            "metadata": self.metadata.model_dump(),
            "intro": self.intro.model_dump(),
            "passages": {
                str(pid): self.passages[pid].to_document() for pid in self.passage_ids()
            },
        }
        if self.items:
            doc["items"] = [item.model_dump() for item in self.items]
        return doc


class StoredStory(BaseModel):
    """A story document as held by the store: raw content plus bookkeeping."""

    id: str
    title: str
    content: str
    last_edited: datetime
    created_at: datetime
