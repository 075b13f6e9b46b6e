"""Structural error kinds.

These are fatal to the current view and are caught by whatever renders the
page (the app shell maps each kind to its own HTTP status). Field-level
validation problems are never raised; see `adventure_book.editor`.
"""


class AdventureBookError(Exception):
    """Base class for all structural errors."""


class AdventureLoadError(AdventureBookError):
    def __init__(self, message: str = "Unable to load the adventure. Please try again.") -> None:
        super().__init__(message)


class AdventureNotFoundError(AdventureBookError):
    def __init__(self, message: str = "Adventure not found.") -> None:
        super().__init__(message)


class InvalidPassageIdError(AdventureBookError):
    def __init__(self, passage_id: str) -> None:
        super().__init__(
            f'The passage ID "{passage_id}" is not valid. Please use a valid number.'
        )
        self.passage_id = passage_id


class PassageNotFoundError(AdventureBookError):
    def __init__(self, passage_id: int) -> None:
        super().__init__(f"Passage #{passage_id} does not exist in this adventure.")
        self.passage_id = passage_id


class StoryNotFoundError(KeyError):
    """Raised by the store when updating a story id that does not exist."""
