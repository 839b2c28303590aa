"""Rich rendering helpers for the quiz shell.

User-supplied text (questions, answers, error messages) is always wrapped in
``Text`` objects so brackets in quiz content are never parsed as markup.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models import Quiz

__all__ = [
    "colorize",
    "log",
    "biglog",
    "errorlog",
    "render_quiz",
    "render_change",
    "render_validation_errors",
    "render_command_table",
]


def colorize(value: object, style: Optional[str] = None) -> Text:
    return Text(str(value), style=style or "")


def log(
    console: Console, message: object, style: Optional[str] = None
) -> None:
    console.print(colorize(message, style))


def biglog(console: Console, message: object, style: str = "green") -> None:
    """Print ``message`` prominently inside a bordered panel."""

    console.print(
        Panel(
            Text(str(message), style=f"bold {style}", justify="center"),
            border_style=style,
            box=box.HEAVY,
            expand=False,
            padding=(0, 4),
        )
    )


def errorlog(console: Console, message: object) -> None:
    line = Text.assemble(("Error", "bold red"), ": ", (str(message), "red"))
    console.print(line)


def render_quiz(
    console: Console, quiz: Quiz, *, with_answer: bool = False
) -> None:
    line = Text.assemble(" [", colorize(quiz.id, "magenta"), "]:  ")
    line.append(quiz.question)
    if with_answer:
        line.append(" ")
        line.append("=>", style="magenta")
        line.append(" ")
        line.append(quiz.answer)
    console.print(line)


def render_change(console: Console, prefix: str, quiz: Quiz) -> None:
    """Print a one-line confirmation such as ``Added: question => answer``."""

    line = Text.assemble(" ", (f"{prefix}:", "magenta"), " ")
    line.append(quiz.question)
    line.append(" ")
    line.append("=>", style="magenta")
    line.append(" ")
    line.append(quiz.answer)
    console.print(line)


def render_validation_errors(
    console: Console, messages: Iterable[str]
) -> None:
    errorlog(console, "Invalid quiz:")
    for message in messages:
        errorlog(console, message)


def render_command_table(
    console: Console, rows: Sequence[tuple[str, str]]
) -> None:
    """Render ``(usage, summary)`` pairs under a "Commands:" heading."""

    log(console, "Commands:", "bold")
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Usage", style="cyan", no_wrap=True)
    table.add_column("Summary")
    for usage, summary in rows:
        table.add_row(f"  {usage}", summary)
    console.print(table)
