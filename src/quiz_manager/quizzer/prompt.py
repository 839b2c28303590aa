"""Line input for the quiz shell.

``ConsolePrompter`` reads through ``rich.console.Console.input`` so labels
share the shell's styling. Editable prefill (used by ``edit`` to offer the
current question and answer) relies on GNU readline's startup hook and is
only attempted when readline is importable, stdout is a terminal and the
feature is enabled; otherwise the prompt is asked plainly.
"""

from __future__ import annotations

import sys
from typing import Callable, Optional, Protocol, TextIO

from rich.console import Console
from rich.text import Text

try:  # readline is missing on some platforms (e.g. Windows).
    import readline
except ImportError:  # pragma: no cover - platform dependent
    readline = None  # type: ignore[assignment]

__all__ = ["InputPrompter", "ShellPrompter", "ConsolePrompter"]


class InputPrompter(Protocol):
    """Single-shot line input returning trimmed text."""

    def ask(self, label: str, *, prefill: Optional[str] = None) -> str:
        """Show ``label`` and return the user's trimmed reply."""


class ShellPrompter(InputPrompter, Protocol):
    """Prompter that can also read lines at the command prompt."""

    def read_command(self, label: str) -> str:
        """Return the trimmed command line typed after ``label``."""


class ConsolePrompter:
    def __init__(
        self,
        console: Console,
        *,
        prefill: bool = True,
        style: str = "red",
        stream: Optional[TextIO] = None,
        isatty: Optional[Callable[[], bool]] = None,
    ) -> None:
        self._console = console
        self._prefill_enabled = prefill
        self._style = style
        self._stream = stream
        self._isatty = isatty or sys.stdout.isatty

    @property
    def supports_prefill(self) -> bool:
        return (
            self._prefill_enabled
            and self._stream is None
            and readline is not None
            and self._isatty()
        )

    def ask(self, label: str, *, prefill: Optional[str] = None) -> str:
        return self._read(Text(label, style=self._style), prefill)

    def read_command(self, label: str) -> str:
        """Read a command line at the shell prompt (unstyled, no prefill)."""

        return self._read(Text(label, style="bold"), None)

    def _read(self, prompt: Text, prefill: Optional[str]) -> str:
        if prefill and self.supports_prefill:
            readline.set_startup_hook(lambda: readline.insert_text(prefill))
            try:
                raw = self._console.input(prompt)
            finally:
                readline.set_startup_hook()
        else:
            raw = self._console.input(prompt, stream=self._stream)
            # Stream reads return "" at end of input instead of raising.
            if self._stream is not None and raw == "":
                raise EOFError
        return raw.strip()
