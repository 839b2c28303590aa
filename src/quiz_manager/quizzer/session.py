"""REPL driver for the quiz shell.

``QuizShell`` reads command lines, resolves them against the engine's
command table and runs one command at a time. It is also the session handle
passed to every engine method: ``prompt()`` marks the command as finished
and ``close()`` ends the loop.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from rich.console import Console

from .engine import CommandEngine, CommandSpec, resolve_command
from .prompt import ShellPrompter
from .view.quiz import errorlog, log

DEFAULT_LABEL = "quiz > "


@dataclass(frozen=True)
class CommandLine:
    """A non-empty command line split into its command word and arguments."""

    name: str
    arguments: tuple[str, ...] = ()

    @property
    def first_argument(self) -> Optional[str]:
        return self.arguments[0] if self.arguments else None


def parse_command_line(raw: Optional[str]) -> Optional[CommandLine]:
    """Split ``raw`` on whitespace; ``None`` for blank input."""

    if raw is None:
        return None
    words = raw.split()
    if not words:
        return None
    head, *tail = words
    return CommandLine(name=head.lower(), arguments=tuple(tail))


class QuizShell:
    def __init__(
        self,
        engine: CommandEngine,
        prompter: ShellPrompter,
        console: Console,
        *,
        label: str = DEFAULT_LABEL,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._engine = engine
        self._prompter = prompter
        self._console = console
        self._label = label
        self._logger = logger or logging.getLogger(__name__)
        self._ready = True
        self._closed = False
        self._resumes = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def resumes(self) -> int:
        """How many times a command signalled it was done."""

        return self._resumes

    def ask(self, label: str, *, prefill: Optional[str] = None) -> str:
        return self._prompter.ask(label, prefill=prefill)

    def prompt(self) -> None:
        self._ready = True
        self._resumes += 1

    def close(self) -> None:
        self._closed = True

    def run(self) -> int:
        """Read and execute commands until ``quit`` or end of input."""

        self._closed = False
        self._logger.info("Shell started", extra={"label": self._label})
        while not self._closed:
            try:
                raw = self._prompter.read_command(self._label)
            except (EOFError, KeyboardInterrupt):
                self._console.print()
                self._engine.quit(self)
                break
            line = parse_command_line(raw)
            if line is None:
                continue
            spec = resolve_command(line.name)
            if spec is None:
                errorlog(self._console, f"Unknown command '{line.name}'.")
                log(self._console, "Use 'help' to see the available commands.")
                self._logger.info(
                    "Unknown command", extra={"command": line.name}
                )
                continue
            self.dispatch(spec, line)
        self._logger.info("Shell stopped", extra={"resumes": self._resumes})
        return 0

    def dispatch(self, spec: CommandSpec, line: CommandLine) -> None:
        """Run one resolved command, recovering from an interrupted prompt."""

        handler = getattr(self._engine, spec.name)
        args = (line.first_argument,) if spec.takes_id else ()
        self._ready = False
        try:
            handler(self, *args)
        except (KeyboardInterrupt, EOFError):
            self._console.print()
            errorlog(self._console, "Command aborted.")
            self._logger.info(
                "Command aborted", extra={"command": spec.name}
            )
            return
        if not (self._ready or self._closed):
            self._logger.warning(
                "Command finished without resuming the prompt",
                extra={"command": spec.name},
            )
