"""CLI entry point for the interactive quiz shell (``quiz shell``)."""

from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv
from rich.console import Console

from quiz_manager.core.logging import configure_logger, release_logger
from quiz_manager.core.workspace import WorkspaceError

from .config import ConfigOverrides, QuizConfigError, load_config
from .engine import CommandEngine
from .manager.quiz import JsonQuizRepository
from .prompt import ConsolePrompter, ShellPrompter
from .session import QuizShell

LOGGER_NAME = "quiz_manager.quizzer"


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="quiz shell",
        description="Interactive shell to manage and play quizzes",
    )
    p.add_argument(
        "--config",
        type=Path,
        help=(
            "Path to a TOML config file (defaults to the workspace config "
            "directory)."
        ),
    )
    p.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root (QUIZ_MANAGER_HOME).",
    )
    p.add_argument(
        "--data-file",
        type=Path,
        help="Quiz store to use instead of the configured JSON file.",
    )
    p.add_argument(
        "--seed",
        type=int,
        help="Seed the play shuffle for a reproducible question order.",
    )
    p.add_argument(
        "--no-prefill",
        dest="prefill",
        action="store_false",
        default=None,
        help="Do not pre-fill the current text when editing a quiz.",
    )
    p.add_argument(
        "--log-level",
        help="Set the file logging level (defaults to INFO).",
    )
    p.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Also write log records to stderr.",
    )
    return p


def main(
    argv: Optional[Sequence[str]] = None,
    *,
    console: Optional[Console] = None,
    prompter: Optional[ShellPrompter] = None,
) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    load_dotenv()

    overrides = ConfigOverrides(
        data_file=args.data_file,
        seed=args.seed,
        prefill=args.prefill,
        log_level=args.log_level,
        verbose=args.verbose,
    )
    try:
        load_result = load_config(
            config_path=args.config,
            overrides=overrides,
            workspace_path=args.workspace,
        )
    except (QuizConfigError, WorkspaceError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 2

    config = load_result.config
    logger, log_path = configure_logger(
        LOGGER_NAME,
        log_dir=load_result.layout.path_for("logs"),
        level=config.logging.level,
        verbose=config.logging.verbose,
    )
    logger.info(
        "quiz shell invoked",
        extra={
            "config_path": str(load_result.config_path or ""),
            "data_file": str(config.storage.data_file),
            "log_path": str(log_path),
        },
    )

    console = console or Console()
    repository = JsonQuizRepository(
        config.storage.data_file,
        seed_defaults=config.storage.seed_defaults,
    )
    engine = CommandEngine(
        repository,
        console=console,
        rng=random.Random(config.play.seed),
        credits=config.credits,
        logger=logger,
    )
    prompter = prompter or ConsolePrompter(
        console, prefill=config.prompt.prefill
    )
    shell = QuizShell(
        engine, prompter, console, label=config.prompt.label, logger=logger
    )
    try:
        return shell.run()
    finally:
        release_logger(logger)


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
