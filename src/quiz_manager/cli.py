"""Unified CLI entry point for quiz-manager."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from importlib import import_module, metadata
from typing import Callable, Mapping, Optional, Sequence


CommandHandler = Callable[[Sequence[str]], int]


@dataclass(frozen=True)
class CommandSpec:
    """Represents a quiz subcommand."""

    name: str
    summary: str
    handler: Optional[CommandHandler] = None
    is_interactive: bool = False


_COMMAND_SPECS: Sequence[CommandSpec] = (
    CommandSpec(
        name="init",
        summary="Bootstrap the workspace and write a starter quiz.toml.",
        handler=lambda argv: _run_module_command(
            "quiz_manager.workspace.cli", "quiz init", argv
        ),
    ),
    CommandSpec(
        name="shell",
        summary="Manage and play quizzes in an interactive shell.",
        is_interactive=True,
        handler=lambda argv: _run_module_command(
            "quiz_manager.quizzer._main", "quiz shell", argv
        ),
    ),
)

COMMANDS: Mapping[str, CommandSpec] = {
    spec.name: spec for spec in _COMMAND_SPECS
}


def format_command_table() -> str:
    """Return a formatted command table for help output."""

    width = max(len(spec.name) for spec in _COMMAND_SPECS)
    lines = ["Available commands:"]
    for spec in _COMMAND_SPECS:
        name = spec.name.ljust(width)
        suffix = " (interactive)" if spec.is_interactive else ""
        lines.append(f"  {name}  {spec.summary}{suffix}")
    return "\n".join(lines)


def format_usage() -> str:
    """Build the top-level usage banner with command listings."""

    parts = [
        "Usage: quiz <command> [args...]",
        "Run `quiz list` for commands or `quiz help <name>` for details.",
        "",
        format_command_table(),
    ]
    return "\n".join(parts)


def _print(
    text: str, *, stream: Optional[Callable[[str], None]] = None
) -> None:
    target = stream if stream is not None else sys.stdout.write
    if text:
        target(text + "\n")


def _print_usage() -> None:
    _print(format_usage())


def _handle_list() -> int:
    _print(format_command_table())
    return 0


def _handle_version() -> int:
    try:
        version = metadata.version("quiz-manager")
    except metadata.PackageNotFoundError:
        version = "unknown"
    _print(version)
    return 0


def _handle_help(argv: Sequence[str]) -> int:
    if not argv:
        _print_usage()
        return 0

    command = argv[0]
    spec = COMMANDS.get(command)
    if not spec:
        _print(f"Unknown command '{command}'.", stream=sys.stderr.write)
        _print(format_command_table(), stream=sys.stderr.write)
        return 2

    _print(f"{spec.name}: {spec.summary}")
    _print(f"Run `quiz {spec.name} --help` for CLI-specific options.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(argv if argv is not None else sys.argv[1:])

    if not args:
        _print_usage()
        return 2

    head, *tail = args

    if head in ("-h", "--help"):
        _print_usage()
        return 0

    if head in ("-V", "--version", "version"):
        return _handle_version()

    if head == "list":
        return _handle_list()

    if head == "help":
        return _handle_help(tail)

    spec = COMMANDS.get(head)
    if spec and spec.handler:
        return spec.handler(tail)

    _print(f"Unknown command '{head}'.", stream=sys.stderr.write)
    _print(format_command_table(), stream=sys.stderr.write)
    return 2


def _run_module_command(
    module_name: str, prog_name: str, argv: Sequence[str]
) -> int:
    """Call ``module_name.main(argv)`` with ``sys.argv`` set for argparse."""

    module = import_module(module_name)
    old_argv = sys.argv
    sys.argv = [prog_name, *argv]
    try:
        result = module.main(list(argv))
    except SystemExit as exc:
        return _exit_code(exc.code)
    finally:
        sys.argv = old_argv
    return result if isinstance(result, int) else 0


def _exit_code(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    _print(str(code), stream=sys.stderr.write)
    return 1


if __name__ == "__main__":  # pragma: no cover - manual invocation guard
    raise SystemExit(main())
