"""Route shapes for the editor and the playtest views.

    /adventure/{adventure_id}/content/introduction
    /adventure/{adventure_id}/content/passage/{passage_id}
    /adventure/{adventure_id}/test/introduction
    /adventure/{adventure_id}/test/passage/{passage_id}

A passage route with id 0 is the "reset" route: it resolves to the
introduction of the same view.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from adventure_book.errors import InvalidPassageIdError, PassageNotFoundError
from adventure_book.models import RESET_PASSAGE_ID, Adventure, Passage

View = Literal["content", "test"]

_ROUTE_RE = re.compile(
    r"^/adventure/(?P<adventure_id>[^/]+)/(?P<view>content|test)"
    r"/(?:(?P<intro>introduction)|passage/(?P<passage>[^/]+))/?$"
)
_DIGITS_RE = re.compile(r"^\d+$")


@dataclass(frozen=True)
class Route:
    """The resolved location: an adventure and either the introduction or a passage."""

    adventure_id: str
    view: View
    passage_id: int | None = None

    @property
    def is_introduction(self) -> bool:
        return self.passage_id is None

    @property
    def path(self) -> str:
        if self.passage_id is None:
            return introduction_path(self.adventure_id, self.view)
        return passage_path(self.adventure_id, self.passage_id, self.view)


def introduction_path(adventure_id: str, view: View = "test") -> str:
    return f"/adventure/{adventure_id}/{view}/introduction"


def passage_path(adventure_id: str, passage_id: int | str, view: View = "test") -> str:
    return f"/adventure/{adventure_id}/{view}/passage/{passage_id}"


def parse_passage_id(raw: str) -> int:
    """Parse a passage id from a URL segment. Only non-negative integers are valid."""
    raw = raw.strip()
    if not _DIGITS_RE.match(raw):
        raise InvalidPassageIdError(raw)
    return int(raw)


def resolve_route(path: str) -> Route:
    """Turn a path into a Route. Passage id 0 resolves to the introduction."""
    match = _ROUTE_RE.match(path)
    if not match:
        raise ValueError(f"Not an adventure route: {path!r}")
    adventure_id = match["adventure_id"]
    view = match["view"]
    if match["intro"]:
        return Route(adventure_id, view)
    passage_id = parse_passage_id(match["passage"])
    if passage_id == RESET_PASSAGE_ID:
        return Route(adventure_id, view)
    return Route(adventure_id, view, passage_id)


def resolve_passage(adventure: Adventure, passage_id: int) -> Passage:
    passage = adventure.passages.get(passage_id)
    if passage is None:
        raise PassageNotFoundError(passage_id)
    return passage


class Navigator:
    """Keeps the current route and moves between routes.

    `navigate(0)` goes back to the introduction of the current view.
    """

    def __init__(self, route: Route) -> None:
        self.route = route
        self.history: list[Route] = [route]

    def navigate(self, target: Route | str | int) -> Route:
        if isinstance(target, Route):
            route = target
        elif isinstance(target, int):
            passage_id = None if target == RESET_PASSAGE_ID else target
            route = Route(self.route.adventure_id, self.route.view, passage_id)
        else:
            route = resolve_route(target)
        self.route = route
        self.history.append(route)
        return route
