"""Error taxonomy for quiz commands.

Every command catches :class:`QuizError` at its boundary and renders the
message as a single error line; :class:`QuizValidationError` renders one
line per field message instead.
"""

from __future__ import annotations

from typing import Sequence

__all__ = [
    "QuizError",
    "MissingParameterError",
    "InvalidParameterError",
    "QuizNotFoundError",
    "QuizValidationError",
    "StorageError",
    "EmptyCollectionError",
]


class QuizError(RuntimeError):
    """Base class for failures surfaced to the interactive user."""


class MissingParameterError(QuizError):
    def __init__(self, name: str = "id") -> None:
        super().__init__(f"Missing parameter <{name}>.")
        self.parameter = name


class InvalidParameterError(QuizError):
    def __init__(self, value: str, name: str = "id") -> None:
        super().__init__(f"The value of parameter <{name}> is not a number.")
        self.parameter = name
        self.value = value


class QuizNotFoundError(QuizError):
    def __init__(self, quiz_id: int) -> None:
        super().__init__(f"There is no quiz associated with id={quiz_id}.")
        self.quiz_id = quiz_id


class QuizValidationError(QuizError):
    """The repository rejected field content; ``messages`` lists each field."""

    def __init__(self, messages: Sequence[str]) -> None:
        super().__init__("; ".join(messages) or "Invalid quiz.")
        self.messages = tuple(messages)


class StorageError(QuizError):
    """Underlying repository operation failed (I/O, decoding, locking)."""


class EmptyCollectionError(QuizError):
    def __init__(self) -> None:
        super().__init__("There are no questions.")
