"""Command engine for the interactive quiz shell.

Each user-facing command is a method of :class:`CommandEngine` taking a
session handle (and, for id-taking commands, the raw argument string). The
methods run their steps in order and share one boundary: failures are turned
into error lines, the outcome is logged, and ``session.prompt()`` is called
exactly once so the driver can read the next command. ``quit`` is the only
command that closes the session instead.

The play mode is modelled as an explicit :class:`PlayState` value advanced by
:func:`advance_play`, so the state machine can be exercised without I/O.
"""

from __future__ import annotations

import functools
import logging
import random
from dataclasses import dataclass
from typing import Callable, Literal, Optional, Protocol, Sequence, TypeVar

from rich.console import Console

from .errors import (
    EmptyCollectionError,
    QuizError,
    QuizNotFoundError,
    QuizValidationError,
)
from .manager.quiz import QuizRepository
from .models import Quiz
from .utils import answers_match, shuffled, validate_id
from .view.quiz import (
    biglog,
    errorlog,
    log,
    render_change,
    render_command_table,
    render_quiz,
    render_validation_errors,
)

__all__ = [
    "COMMANDS",
    "CommandSpec",
    "CommandEngine",
    "PlayResult",
    "PlayState",
    "PlayStep",
    "SessionHandle",
    "advance_play",
    "resolve_command",
    "start_play",
]

R = TypeVar("R")
PlayReason = Literal["continue", "exhausted", "incorrect"]

QUESTION_LABEL = " Enter a question: "
ANSWER_LABEL = " Enter the answer: "


class SessionHandle(Protocol):
    """What a command needs from the interactive session driving it."""

    def ask(self, label: str, *, prefill: Optional[str] = None) -> str:
        """Prompt for one line of trimmed text."""

    def prompt(self) -> None:
        """Signal that the command finished and the next one may be read."""

    def close(self) -> None:
        """End the interactive session."""


@dataclass(frozen=True)
class CommandSpec:
    """A shell command, its aliases and whether it takes an ``<id>``."""

    name: str
    summary: str
    aliases: tuple[str, ...] = ()
    takes_id: bool = False

    @property
    def usage(self) -> str:
        names = "|".join((*self.aliases, self.name))
        return f"{names} <id>" if self.takes_id else names


COMMANDS: tuple[CommandSpec, ...] = (
    CommandSpec("help", "Show this help.", aliases=("h",)),
    CommandSpec("list", "List the existing quizzes."),
    CommandSpec(
        "show",
        "Show the question and the answer of the given quiz.",
        takes_id=True,
    ),
    CommandSpec("add", "Add a new quiz interactively."),
    CommandSpec("delete", "Delete the given quiz.", takes_id=True),
    CommandSpec("edit", "Edit the given quiz.", takes_id=True),
    CommandSpec("test", "Test yourself on the given quiz.", takes_id=True),
    CommandSpec(
        "play",
        "Answer every quiz in random order until you miss one.",
        aliases=("p",),
    ),
    CommandSpec("credits", "Show the credits."),
    CommandSpec("quit", "Quit the program.", aliases=("q",)),
)

_BY_WORD = {
    word: spec for spec in COMMANDS for word in (spec.name, *spec.aliases)
}


def resolve_command(word: str) -> Optional[CommandSpec]:
    return _BY_WORD.get(word.strip().lower())


@dataclass(frozen=True)
class PlayState:
    """Quizzes still to ask (taken from the end) and the running score."""

    queue: tuple[Quiz, ...]
    score: int = 0

    @property
    def current(self) -> Quiz:
        return self.queue[-1]

    @property
    def remaining(self) -> int:
        return len(self.queue)


@dataclass(frozen=True)
class PlayStep:
    """Result of answering the current quiz of a :class:`PlayState`."""

    quiz: Quiz
    answer: str
    correct: bool
    state: PlayState
    reason: PlayReason

    @property
    def finished(self) -> bool:
        return self.reason != "continue"


@dataclass(frozen=True)
class PlayResult:
    score: int
    asked: int
    reason: PlayReason


def start_play(
    quizzes: Sequence[Quiz], rng: Optional[random.Random] = None
) -> PlayState:
    """Build the initial state from a snapshot of ``quizzes``.

    Raises ``EmptyCollectionError`` when there is nothing to ask.
    """

    if not quizzes:
        raise EmptyCollectionError()
    queue = shuffled([quiz.copy() for quiz in quizzes], rng)
    return PlayState(queue=tuple(queue), score=0)


def advance_play(state: PlayState, answer: str) -> PlayStep:
    """Judge ``answer`` against ``state.current`` and return the next state.

    A wrong answer empties the queue: the remaining quizzes are never asked.
    """

    if not state.queue:
        raise ValueError("play session has no questions left")
    quiz, rest = state.queue[-1], state.queue[:-1]
    if not answers_match(answer, quiz.answer):
        return PlayStep(
            quiz=quiz,
            answer=answer,
            correct=False,
            state=PlayState(queue=(), score=state.score),
            reason="incorrect",
        )
    return PlayStep(
        quiz=quiz,
        answer=answer,
        correct=True,
        state=PlayState(queue=rest, score=state.score + 1),
        reason="continue" if rest else "exhausted",
    )


def _command(
    name: str,
) -> Callable[[Callable[..., R]], Callable[..., Optional[R]]]:
    """Wrap an engine method with the shared failure boundary and resume."""

    def decorator(func: Callable[..., R]) -> Callable[..., Optional[R]]:
        @functools.wraps(func)
        def wrapper(
            self: "CommandEngine", session: SessionHandle, *args: object
        ) -> Optional[R]:
            outcome = "ok"
            result: Optional[R] = None
            try:
                result = func(self, session, *args)
            except QuizValidationError as exc:
                outcome = "invalid"
                render_validation_errors(self._console, exc.messages)
            except QuizError as exc:
                outcome = type(exc).__name__
                errorlog(self._console, exc)
            except EOFError:
                # End of input belongs to the shell; it reports the abort.
                raise
            except Exception as exc:
                outcome = "error"
                self._logger.exception(
                    "Command failed unexpectedly",
                    extra={"command": name},
                )
                errorlog(self._console, str(exc) or type(exc).__name__)
            self._logger.info(
                "Command finished",
                extra={
                    "command": name,
                    "argument": args[0] if args else None,
                    "outcome": outcome,
                },
            )
            session.prompt()
            return result

        return wrapper

    return decorator


class CommandEngine:
    def __init__(
        self,
        repository: QuizRepository,
        *,
        console: Console,
        rng: Optional[random.Random] = None,
        credits: Sequence[str] = (),
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._repository = repository
        self._console = console
        self._rng = rng or random.Random()
        self._credits = tuple(credits)
        self._logger = logger or logging.getLogger(__name__)

    @_command("help")
    def help(self, session: SessionHandle) -> None:
        render_command_table(
            self._console, [(spec.usage, spec.summary) for spec in COMMANDS]
        )

    @_command("list")
    def list(self, session: SessionHandle) -> int:
        quizzes = self._repository.find_all()
        for quiz in quizzes:
            render_quiz(self._console, quiz)
        return len(quizzes)

    @_command("show")
    def show(
        self, session: SessionHandle, raw_id: Optional[str] = None
    ) -> Quiz:
        quiz = self._require(validate_id(raw_id))
        render_quiz(self._console, quiz, with_answer=True)
        return quiz

    @_command("add")
    def add(self, session: SessionHandle) -> Quiz:
        question = session.ask(QUESTION_LABEL)
        answer = session.ask(ANSWER_LABEL)
        quiz = self._repository.create(question, answer)
        render_change(self._console, "Added", quiz)
        return quiz

    @_command("delete")
    def delete(
        self, session: SessionHandle, raw_id: Optional[str] = None
    ) -> int:
        removed = self._repository.destroy(validate_id(raw_id))
        log(self._console, f" Deleted {removed} quiz(zes).")
        return removed

    @_command("edit")
    def edit(
        self, session: SessionHandle, raw_id: Optional[str] = None
    ) -> Quiz:
        quiz = self._require(validate_id(raw_id))
        question = session.ask(QUESTION_LABEL, prefill=quiz.question)
        answer = session.ask(ANSWER_LABEL, prefill=quiz.answer)
        quiz.question = question
        quiz.answer = answer
        saved = self._repository.update(quiz)
        render_change(self._console, f"Quiz {saved.id} changed to", saved)
        return saved

    @_command("test")
    def test(
        self, session: SessionHandle, raw_id: Optional[str] = None
    ) -> bool:
        quiz = self._require(validate_id(raw_id))
        answer = session.ask(f"{quiz.question}: ")
        correct = answers_match(answer, quiz.answer)
        log(self._console, "Your answer is:")
        if correct:
            biglog(self._console, "CORRECT", "green")
        else:
            biglog(self._console, "INCORRECT", "red")
        return correct

    @_command("play")
    def play(self, session: SessionHandle) -> PlayResult:
        state = start_play(self._repository.find_all(), self._rng)
        asked = 0
        while True:
            answer = session.ask(f"{state.current.question}: ")
            step = advance_play(state, answer)
            asked += 1
            state = step.state
            if step.correct:
                log(
                    self._console,
                    f"CORRECT - {state.score} correct so far.",
                    "green",
                )
            else:
                log(self._console, "INCORRECT.", "red")
            if step.finished:
                break
        if step.reason == "exhausted":
            log(self._console, "No more questions.")
        log(self._console, "End of the game. Score:")
        biglog(self._console, state.score, "blue")
        self._logger.info(
            "Play session finished",
            extra={
                "score": state.score,
                "asked": asked,
                "reason": step.reason,
            },
        )
        return PlayResult(score=state.score, asked=asked, reason=step.reason)

    @_command("credits")
    def credits(self, session: SessionHandle) -> None:
        log(self._console, "Credits:")
        for author in self._credits:
            log(self._console, author, "green")

    def quit(self, session: SessionHandle) -> None:
        self._logger.info("Command finished", extra={"command": "quit"})
        session.close()

    def _require(self, quiz_id: int) -> Quiz:
        quiz = self._repository.find_by_id(quiz_id)
        if quiz is None:
            raise QuizNotFoundError(quiz_id)
        return quiz
