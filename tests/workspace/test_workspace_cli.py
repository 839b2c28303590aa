from __future__ import annotations

from quiz_manager.core import workspace as workspace_mod
from quiz_manager.workspace import cli


def test_quiz_init_creates_workspace(tmp_path, capsys, monkeypatch):
    target = tmp_path / "workspace"
    monkeypatch.setenv("QUIZ_MANAGER_HOME", str(target))

    code = cli.main([])

    captured = capsys.readouterr()
    assert code == 0
    assert "Workspace ready" in captured.out
    assert "(created)" in captured.out
    for name in ("config", "logs", "data"):
        assert (target / name).is_dir()
    config_path = target / "config" / "quiz.toml"
    assert config_path.is_file()
    assert f"Config: {config_path.resolve()} (created)" in captured.out


def test_quiz_init_supports_custom_path(tmp_path, capsys):
    target = tmp_path / "custom"

    code = cli.main(["--path", str(target)])

    captured = capsys.readouterr()
    assert code == 0
    assert target.is_dir()
    assert str(target) in captured.out


def test_quiz_init_quiet_mode(tmp_path, capsys, monkeypatch):
    target = tmp_path / "quiet"
    monkeypatch.setenv("QUIZ_MANAGER_HOME", str(target))

    code = cli.main(["--quiet"])

    captured = capsys.readouterr()
    assert code == 0
    assert captured.out == ""


def test_quiz_init_keeps_existing_config(tmp_path, capsys):
    target = tmp_path / "ws"
    config_path = target / "config" / "quiz.toml"
    config_path.parent.mkdir(parents=True)
    config_path.write_text("# mine\n", encoding="utf-8")

    code = cli.main(["--path", str(target)])

    captured = capsys.readouterr()
    assert code == 0
    assert config_path.read_text(encoding="utf-8") == "# mine\n"
    assert "(exists)" in captured.out


def test_quiz_init_force_rewrites_config(tmp_path, capsys):
    target = tmp_path / "ws"
    config_path = target / "config" / "quiz.toml"
    config_path.parent.mkdir(parents=True)
    config_path.write_text("# mine\n", encoding="utf-8")

    code = cli.main(["--path", str(target), "--force"])

    captured = capsys.readouterr()
    assert code == 0
    assert "[storage]" in config_path.read_text(encoding="utf-8")
    assert "(overwritten)" in captured.out


def test_quiz_init_reports_workspace_errors(tmp_path, capsys, monkeypatch):
    def boom(**kwargs):
        raise workspace_mod.WorkspaceError("cannot create")

    monkeypatch.setattr(workspace_mod, "ensure_workspace", boom)

    code = cli.main(["--path", str(tmp_path / "ws")])

    captured = capsys.readouterr()
    assert code == 1
    assert "cannot create" in captured.err
