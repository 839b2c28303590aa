"""Quiz record shared by the repository, engine and views."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping

from .errors import StorageError


@dataclass
class Quiz:
    """A persisted question/answer pair.

    ``id`` is assigned by the repository on creation and never changes.
    """

    id: int
    question: str
    answer: str

    def copy(self) -> "Quiz":
        return Quiz(id=self.id, question=self.question, answer=self.answer)

    def to_dict(self) -> MutableMapping[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "answer": self.answer,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Quiz":
        try:
            quiz_id = payload["id"]
            question = payload["question"]
            answer = payload["answer"]
        except KeyError as exc:
            raise StorageError(
                f"Quiz record missing required field: {exc}"
            ) from exc
        if isinstance(quiz_id, bool) or not isinstance(quiz_id, int):
            raise StorageError(f"Quiz id must be an integer, got {quiz_id!r}.")
        return cls(id=quiz_id, question=str(question), answer=str(answer))
