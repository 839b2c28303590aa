"""Configuration loader for the interactive quiz shell."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Optional

from quiz_manager.core import config as core_config
from quiz_manager.core import workspace as workspace_mod

CONFIG_FILENAME = "quiz.toml"
CONFIG_ENV = "QUIZ_MANAGER_CONFIG"
ENV_PREFIX = "QUIZ_MANAGER_"

DATA_FILENAME = "quizzes.json"
DEFAULT_LABEL = "quiz > "
DEFAULT_AUTHORS: tuple[str, ...] = ("quiz-manager contributors",)

_DEFAULT_LOG_LEVEL = "INFO"
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class QuizConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class StorageConfig:
    data_file: Path
    seed_defaults: bool = True


@dataclass(frozen=True)
class PromptConfig:
    label: str = DEFAULT_LABEL
    prefill: bool = True


@dataclass(frozen=True)
class PlayConfig:
    seed: Optional[int] = None


@dataclass(frozen=True)
class LoggingConfig:
    level: str = _DEFAULT_LOG_LEVEL
    verbose: bool = False


@dataclass(frozen=True)
class QuizConfig:
    """Fully resolved configuration for a shell session."""

    storage: StorageConfig
    prompt: PromptConfig
    play: PlayConfig
    credits: tuple[str, ...]
    logging: LoggingConfig


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced overrides applied on top of file/env options."""

    data_file: Optional[Path] = None
    seed: Optional[int] = None
    prefill: Optional[bool] = None
    log_level: Optional[str] = None
    verbose: Optional[bool] = None


@dataclass(frozen=True)
class LoadResult:
    """Result of loading configuration, including workspace context."""

    config: QuizConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def config_template() -> str:
    """Return the commented TOML written by ``quiz init``."""

    authors = ", ".join(f'"{author}"' for author in DEFAULT_AUTHORS)
    return (
        "# quiz-manager configuration\n"
        "# Every key is optional; commented values show the defaults.\n\n"
        "[storage]\n"
        "# Quiz store; relative paths resolve against the workspace.\n"
        f'# data_file = "data/{DATA_FILENAME}"\n'
        "# Seed a new store with a few sample quizzes.\n"
        "seed_defaults = true\n\n"
        "[prompt]\n"
        f'label = "{DEFAULT_LABEL}"\n'
        "# Offer the current text when editing (needs readline).\n"
        "prefill = true\n\n"
        "[play]\n"
        "# Fix the shuffle order of the play command.\n"
        "# seed = 1234\n\n"
        "[credits]\n"
        f"authors = [{authors}]\n\n"
        "[logging]\n"
        f'level = "{_DEFAULT_LOG_LEVEL}"\n'
        "# Mirror log records to stderr.\n"
        "verbose = false\n"
    )


def write_template(path: Path, *, overwrite: bool = False) -> Path:
    try:
        return core_config.write_toml_template(
            path, template=config_template(), overwrite=overwrite
        )
    except core_config.TomlConfigError as exc:
        raise QuizConfigError(str(exc)) from exc
    except OSError as exc:
        raise QuizConfigError(
            f"Unable to write config template {path}: {exc}"
        ) from exc


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Load configuration applying precedence CLI > env > TOML > defaults."""

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    layout = workspace_mod.ensure_workspace(env=env_map, path=workspace_path)
    default_path = layout.path_for("config") / CONFIG_FILENAME

    requested_path = _resolve_config_path(
        config_path=config_path,
        env_map=env_map,
        default_path=default_path,
    )

    options: MutableMapping[str, Any] = _default_table()
    loaded_path: Optional[Path]
    if requested_path.exists():
        loaded_path = requested_path
        try:
            parsed = core_config.load_toml(requested_path)
            options = core_config.with_defaults(options, parsed)
        except core_config.TomlConfigError as exc:
            raise QuizConfigError(str(exc)) from exc
    else:
        loaded_path = None
        if config_path is not None or _has_env_config(env_map):
            raise QuizConfigError(f"Config file not found: {requested_path}")

    data_file = _resolve_data_file(
        _pick_first(
            overrides.data_file,
            _parse_env_path(env_map, "DATA_FILE"),
            _coerce_optional_path(options["storage"]["data_file"]),
        ),
        layout=layout,
    )
    storage = StorageConfig(
        data_file=data_file,
        seed_defaults=_require_bool(
            options["storage"]["seed_defaults"], "storage.seed_defaults"
        ),
    )

    prompt = PromptConfig(
        label=_require_label(options["prompt"]["label"]),
        prefill=_require_bool(
            _pick_first(overrides.prefill, options["prompt"]["prefill"]),
            "prompt.prefill",
        ),
    )

    play = PlayConfig(
        seed=_require_seed(
            _pick_first(overrides.seed, options["play"]["seed"])
        )
    )

    log_level = _resolve_log_level(
        overrides.log_level,
        _parse_env_string(env_map, "LOG_LEVEL"),
        options["logging"]["level"],
    )
    logging_cfg = LoggingConfig(
        level=log_level,
        verbose=_require_bool(
            _pick_first(overrides.verbose, options["logging"]["verbose"]),
            "logging.verbose",
        ),
    )

    config = QuizConfig(
        storage=storage,
        prompt=prompt,
        play=play,
        credits=_require_authors(options["credits"]["authors"]),
        logging=logging_cfg,
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def _default_table() -> MutableMapping[str, MutableMapping[str, Any]]:
    return {
        "storage": {"data_file": None, "seed_defaults": True},
        "prompt": {"label": DEFAULT_LABEL, "prefill": True},
        "play": {"seed": None},
        "credits": {"authors": list(DEFAULT_AUTHORS)},
        "logging": {"level": _DEFAULT_LOG_LEVEL, "verbose": False},
    }


def _resolve_config_path(
    *,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = env_map.get(CONFIG_ENV)
    if env_candidate and env_candidate.strip():
        return Path(env_candidate.strip()).expanduser()
    return default_path


def _has_env_config(env_map: Mapping[str, str]) -> bool:
    env_candidate = env_map.get(CONFIG_ENV)
    return bool(env_candidate and env_candidate.strip())


def _coerce_optional_path(value: object) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, str):
        raw = value.strip()
        return Path(raw) if raw else None
    raise QuizConfigError("storage.data_file must be a string when provided.")


def _resolve_data_file(
    candidate: object, *, layout: workspace_mod.WorkspaceLayout
) -> Path:
    if candidate is None:
        return layout.path_for("data") / DATA_FILENAME
    path = Path(candidate).expanduser()  # type: ignore[arg-type]
    if not path.is_absolute():
        return (layout.home / path).resolve()
    return path.resolve()


def _require_bool(value: object, key: str) -> bool:
    if not isinstance(value, bool):
        raise QuizConfigError(f"{key} must be true or false.")
    return value


def _require_label(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise QuizConfigError("prompt.label must be a non-empty string.")
    return value


def _require_seed(value: object) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise QuizConfigError("play.seed must be an integer.")
    return value


def _require_authors(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list) or not all(
        isinstance(item, str) for item in value
    ):
        raise QuizConfigError("credits.authors must be a list of strings.")
    return tuple(item.strip() for item in value if item.strip())


def _resolve_log_level(
    override: Optional[str],
    env_value: Optional[str],
    file_value: object,
) -> str:
    candidate = _pick_first(override, env_value, file_value)
    if not isinstance(candidate, str) or not candidate.strip():
        raise QuizConfigError("logging.level must be a non-empty string.")
    level = candidate.strip().upper()
    if level not in _LOG_LEVELS:
        expected = ", ".join(_LOG_LEVELS)
        raise QuizConfigError(
            f"Unknown log level '{candidate}'. Expected one of: {expected}."
        )
    return level


def _parse_env_path(env_map: Mapping[str, str], key: str) -> Optional[Path]:
    raw = _parse_env_string(env_map, key)
    if raw is None:
        return None
    return Path(raw).expanduser()


def _parse_env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _pick_first(*candidates: object) -> object:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
