"""Quiz persistence: the repository contract and a JSON-file implementation."""

from __future__ import annotations

import json
import os
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Mapping, Protocol, Sequence

from ..errors import QuizNotFoundError, QuizValidationError, StorageError
from ..models import Quiz

__all__ = [
    "DEFAULT_QUIZZES",
    "QuizRepository",
    "JsonQuizRepository",
    "validate_quiz_fields",
]


DEFAULT_QUIZZES: tuple[tuple[str, str], ...] = (
    ("Capital of Italy", "Rome"),
    ("Capital of France", "Paris"),
    ("Capital of Spain", "Madrid"),
    ("Capital of Portugal", "Lisbon"),
)

_LOCK_SUFFIX = ".lock"
_LOCK_TIMEOUT_SECONDS = 5.0


class QuizRepository(Protocol):
    """Storage operations the command engine relies on."""

    def find_all(self) -> list[Quiz]:
        """Return every quiz in stored order."""

    def find_by_id(self, quiz_id: int) -> Quiz | None:
        """Return the quiz with ``quiz_id`` or ``None``."""

    def create(self, question: str, answer: str) -> Quiz:
        """Validate and persist a new quiz, assigning its id."""

    def update(self, quiz: Quiz) -> Quiz:
        """Validate and persist new field values for an existing quiz."""

    def destroy(self, quiz_id: int) -> int:
        """Delete by id and return how many records were removed."""


def validate_quiz_fields(question: str, answer: str) -> list[str]:
    """Return one message per empty field; an empty list means valid."""

    messages: list[str] = []
    if not (question or "").strip():
        messages.append("The question must not be empty.")
    if not (answer or "").strip():
        messages.append("The answer must not be empty.")
    return messages


@dataclass
class _QuizTable:
    next_id: int
    quizzes: list[Quiz] = field(default_factory=list)

    def index_of(self, quiz_id: int) -> int | None:
        for idx, quiz in enumerate(self.quizzes):
            if quiz.id == quiz_id:
                return idx
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "next_id": self.next_id,
            "quizzes": [quiz.to_dict() for quiz in self.quizzes],
        }

    @classmethod
    def seeded(cls, pairs: Sequence[tuple[str, str]]) -> "_QuizTable":
        quizzes = [
            Quiz(id=idx, question=question, answer=answer)
            for idx, (question, answer) in enumerate(pairs, start=1)
        ]
        return cls(next_id=len(quizzes) + 1, quizzes=quizzes)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "_QuizTable":
        raw_quizzes = payload.get("quizzes", [])
        if not isinstance(raw_quizzes, list):
            raise StorageError("Quiz store 'quizzes' must be a list.")
        quizzes = [Quiz.from_dict(item) for item in raw_quizzes]
        highest = max((quiz.id for quiz in quizzes), default=0)
        next_id = payload.get("next_id", highest + 1)
        if isinstance(next_id, bool) or not isinstance(next_id, int):
            raise StorageError("Quiz store 'next_id' must be an integer.")
        return cls(next_id=max(next_id, highest + 1), quizzes=quizzes)


class JsonQuizRepository:
    """Persist quizzes in a single JSON document.

    The file is created on first access, seeded with :data:`DEFAULT_QUIZZES`
    when ``seed_defaults`` is set. Every operation holds an exclusive lock
    file for its duration and writes go through a temp file plus
    ``os.replace`` so readers never observe a partial document. Returned
    records are copies; mutating them has no effect until ``update``.
    """

    def __init__(
        self,
        path: Path,
        *,
        seed_defaults: bool = True,
        lock_timeout: float = _LOCK_TIMEOUT_SECONDS,
    ) -> None:
        self._path = Path(path)
        self._seed_defaults = seed_defaults
        self._lock_timeout = lock_timeout

    @property
    def path(self) -> Path:
        return self._path

    def find_all(self) -> list[Quiz]:
        with self._locked():
            table = self._load()
        return [quiz.copy() for quiz in table.quizzes]

    def find_by_id(self, quiz_id: int) -> Quiz | None:
        with self._locked():
            table = self._load()
        idx = table.index_of(quiz_id)
        return None if idx is None else table.quizzes[idx].copy()

    def create(self, question: str, answer: str) -> Quiz:
        messages = validate_quiz_fields(question, answer)
        if messages:
            raise QuizValidationError(messages)
        with self._locked():
            table = self._load()
            quiz = Quiz(id=table.next_id, question=question, answer=answer)
            table.quizzes.append(quiz)
            table.next_id += 1
            self._store(table)
        return quiz.copy()

    def update(self, quiz: Quiz) -> Quiz:
        messages = validate_quiz_fields(quiz.question, quiz.answer)
        if messages:
            raise QuizValidationError(messages)
        with self._locked():
            table = self._load()
            idx = table.index_of(quiz.id)
            if idx is None:
                raise QuizNotFoundError(quiz.id)
            table.quizzes[idx] = quiz.copy()
            self._store(table)
        return quiz.copy()

    def destroy(self, quiz_id: int) -> int:
        with self._locked():
            table = self._load()
            kept = [quiz for quiz in table.quizzes if quiz.id != quiz_id]
            removed = len(table.quizzes) - len(kept)
            if removed:
                table.quizzes = kept
                self._store(table)
        return removed

    def _load(self) -> _QuizTable:
        if not self._path.exists():
            table = (
                _QuizTable.seeded(DEFAULT_QUIZZES)
                if self._seed_defaults
                else _QuizTable(next_id=1)
            )
            self._store(table)
            return table
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise StorageError(
                f"Failed to parse quiz store {self._path}: {exc}"
            ) from exc
        except OSError as exc:
            raise StorageError(
                f"Unable to read quiz store {self._path}: {exc}"
            ) from exc
        if not isinstance(payload, Mapping):
            raise StorageError(
                f"Quiz store {self._path} must contain a JSON object."
            )
        return _QuizTable.from_dict(payload)

    def _store(self, table: _QuizTable) -> None:
        try:
            _atomic_write_json(self._path, table.to_dict())
        except OSError as exc:
            raise StorageError(
                f"Unable to write quiz store {self._path}: {exc}"
            ) from exc

    @contextmanager
    def _locked(self) -> Iterator[None]:
        lock_path = self._path.with_name(self._path.name + _LOCK_SUFFIX)
        try:
            lock_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                f"Unable to prepare quiz store directory: {exc}"
            ) from exc
        deadline = time.monotonic() + self._lock_timeout
        while True:
            try:
                fd = os.open(lock_path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
                os.close(fd)
                break
            except FileExistsError:
                if time.monotonic() > deadline:
                    raise StorageError(
                        f"Timed out waiting for quiz store lock: {lock_path}"
                    )
                time.sleep(0.05)
            except OSError as exc:
                raise StorageError(
                    f"Unable to lock quiz store {lock_path}: {exc}"
                ) from exc
        try:
            yield
        finally:
            lock_path.unlink(missing_ok=True)


def _atomic_write_json(path: Path, payload: Mapping[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    handle = tempfile.NamedTemporaryFile(
        "w",
        delete=False,
        encoding="utf-8",
        dir=str(path.parent),
        prefix=".quizzes-",
        suffix=".tmp",
    )
    try:
        json.dump(payload, handle, indent=2, ensure_ascii=False)
        handle.write("\n")
        handle.flush()
        os.fsync(handle.fileno())
    finally:
        handle.close()
    os.replace(handle.name, path)
    try:
        path.chmod(0o600)
    except PermissionError:  # pragma: no cover - depends on filesystem
        pass
