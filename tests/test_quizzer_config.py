from __future__ import annotations

from pathlib import Path

import pytest

from quiz_manager.core import config as core_config
from quiz_manager.quizzer import config as quiz_config
from quiz_manager.quizzer.config import (
    ConfigOverrides,
    QuizConfigError,
    load_config,
)


def _write_config(workspace_root: Path, body: str) -> Path:
    path = workspace_root / "config" / quiz_config.CONFIG_FILENAME
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    return path


def test_defaults_without_config_file(tmp_path):
    result = load_config(env={}, workspace_path=tmp_path / "ws")

    config = result.config
    assert result.config_path is None
    assert config.storage.data_file == (
        result.layout.path_for("data") / "quizzes.json"
    )
    assert config.storage.seed_defaults is True
    assert config.prompt.label == "quiz > "
    assert config.prompt.prefill is True
    assert config.play.seed is None
    assert config.credits == quiz_config.DEFAULT_AUTHORS
    assert config.logging.level == "INFO"
    assert config.logging.verbose is False


def test_config_file_values_are_applied(tmp_path):
    root = tmp_path / "ws"
    path = _write_config(
        root,
        """
[storage]
data_file = "stores/mine.json"
seed_defaults = false

[prompt]
label = "> "
prefill = false

[play]
seed = 42

[credits]
authors = ["Ada", "Grace"]

[logging]
level = "debug"
verbose = true
""",
    )

    result = load_config(env={}, workspace_path=root)

    config = result.config
    assert result.config_path == path
    assert config.storage.data_file == (root / "stores/mine.json").resolve()
    assert config.storage.seed_defaults is False
    assert config.prompt.label == "> "
    assert config.prompt.prefill is False
    assert config.play.seed == 42
    assert config.credits == ("Ada", "Grace")
    assert config.logging.level == "DEBUG"
    assert config.logging.verbose is True


def test_precedence_cli_over_env_over_file(tmp_path):
    root = tmp_path / "ws"
    _write_config(
        root,
        '[storage]\ndata_file = "/file.json"\n[logging]\nlevel = "ERROR"\n',
    )
    env = {
        "QUIZ_MANAGER_DATA_FILE": str(tmp_path / "env.json"),
        "QUIZ_MANAGER_LOG_LEVEL": "warning",
    }

    from_env = load_config(env=env, workspace_path=root).config
    assert from_env.storage.data_file == (tmp_path / "env.json").resolve()
    assert from_env.logging.level == "WARNING"

    overrides = ConfigOverrides(
        data_file=tmp_path / "cli.json",
        log_level="debug",
        seed=7,
        prefill=False,
        verbose=True,
    )
    from_cli = load_config(
        env=env, workspace_path=root, overrides=overrides
    ).config
    assert from_cli.storage.data_file == (tmp_path / "cli.json").resolve()
    assert from_cli.logging.level == "DEBUG"
    assert from_cli.play.seed == 7
    assert from_cli.prompt.prefill is False
    assert from_cli.logging.verbose is True


def test_workspace_comes_from_env(tmp_path):
    root = tmp_path / "env-home"

    result = load_config(env={"QUIZ_MANAGER_HOME": str(root)})

    assert result.layout.home == root.resolve()


def test_explicit_missing_config_is_an_error(tmp_path):
    with pytest.raises(QuizConfigError, match="Config file not found"):
        load_config(
            config_path=tmp_path / "absent.toml",
            env={},
            workspace_path=tmp_path / "ws",
        )


def test_env_config_path_is_used(tmp_path):
    path = tmp_path / "elsewhere.toml"
    path.write_text("[play]\nseed = 5\n", encoding="utf-8")

    result = load_config(
        env={"QUIZ_MANAGER_CONFIG": str(path)},
        workspace_path=tmp_path / "ws",
    )

    assert result.config_path == path
    assert result.config.play.seed == 5


def test_missing_env_config_is_an_error(tmp_path):
    with pytest.raises(QuizConfigError):
        load_config(
            env={"QUIZ_MANAGER_CONFIG": str(tmp_path / "nope.toml")},
            workspace_path=tmp_path / "ws",
        )


@pytest.mark.parametrize(
    "body, message",
    [
        ("[storage]\nbogus = 1\n", "Unknown configuration key"),
        ("[extra]\n", "Unknown configuration key"),
        ("storage = 3\n", "Expected table"),
        ("[prompt]\nprefill = 'yes'\n", "prompt.prefill"),
        ("[prompt]\nlabel = ''\n", "prompt.label"),
        ("[play]\nseed = 'x'\n", "play.seed"),
        ("[play]\nseed = true\n", "play.seed"),
        ("[credits]\nauthors = [1]\n", "credits.authors"),
        ("[logging]\nlevel = 'LOUD'\n", "Unknown log level"),
        ("[storage]\ndata_file = 3\n", "storage.data_file"),
        ("not toml = = =", "Failed to parse"),
    ],
)
def test_invalid_config_values(tmp_path, body, message):
    root = tmp_path / "ws"
    _write_config(root, body)

    with pytest.raises(QuizConfigError, match=message):
        load_config(env={}, workspace_path=root)


def test_single_author_string_is_accepted(tmp_path):
    root = tmp_path / "ws"
    _write_config(root, '[credits]\nauthors = "Solo"\n')

    assert load_config(env={}, workspace_path=root).config.credits == (
        "Solo",
    )


def test_template_round_trips_through_loader(tmp_path):
    root = tmp_path / "ws"
    path = root / "config" / quiz_config.CONFIG_FILENAME

    quiz_config.write_template(path)
    parsed = core_config.load_toml(path)
    result = load_config(env={}, workspace_path=root)

    assert set(parsed) == {"storage", "prompt", "play", "credits", "logging"}
    assert result.config_path == path
    assert result.config.prompt.label == quiz_config.DEFAULT_LABEL


def test_write_template_refuses_to_overwrite(tmp_path):
    path = tmp_path / "quiz.toml"
    quiz_config.write_template(path)

    with pytest.raises(QuizConfigError, match="already exists"):
        quiz_config.write_template(path)

    path.write_text("# custom\n", encoding="utf-8")
    quiz_config.write_template(path, overwrite=True)
    assert "[storage]" in path.read_text(encoding="utf-8")
