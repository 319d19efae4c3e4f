from __future__ import annotations

from pathlib import Path

import pytest

from quiz_manager.core import workspace


def test_ensure_workspace_creates_directories(tmp_path, monkeypatch):
    root = tmp_path / "data-home"
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    layout = workspace.ensure_workspace()

    assert layout.home == root.resolve()
    assert [name for name, _ in layout.items()] == ["config", "logs", "data"]
    for name, path in layout.items():
        assert path.is_dir()
        assert layout.created[name] is True
    assert layout.created["home"] is True


def test_ensure_workspace_is_idempotent(tmp_path, monkeypatch):
    root = tmp_path / "existing"
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    first = workspace.ensure_workspace()
    second = workspace.ensure_workspace()

    assert first.home == second.home
    assert all(not created for created in second.created.values())


def test_explicit_path_wins_over_environment(tmp_path, monkeypatch):
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(tmp_path / "env"))
    custom = tmp_path / "custom-root"

    layout = workspace.ensure_workspace(path=custom)

    assert layout.home == custom.resolve()
    assert not (tmp_path / "env").exists()


def test_ensure_workspace_without_create(tmp_path, monkeypatch):
    root = tmp_path / "deferred"
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    layout = workspace.ensure_workspace(create=False)

    assert layout.home == root.resolve()
    assert layout.path_for("config") == root.resolve() / "config"
    assert not root.exists()
    assert all(not created for created in layout.created.values())


def test_ensure_workspace_errors_when_path_is_file(tmp_path, monkeypatch):
    root = tmp_path / "file"
    root.write_text("not a dir", encoding="utf-8")
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace()


def test_path_for_unknown_key_errors(tmp_path, monkeypatch):
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(tmp_path / "ws"))

    layout = workspace.ensure_workspace(create=False)

    with pytest.raises(KeyError):
        layout.path_for("unknown")


def test_ensure_workspace_uses_env_mapping(tmp_path):
    env_home = tmp_path / "env-home"
    env = {workspace.WORKSPACE_ENV: str(env_home)}

    layout = workspace.ensure_workspace(env=env)

    assert layout.home == env_home.resolve()


def test_workspace_fallback_on_permission(tmp_path, monkeypatch):
    fallback = tmp_path / "fallback"
    default = tmp_path / "default-home"
    monkeypatch.setattr(workspace, "DEFAULT_WORKSPACE", default)
    monkeypatch.setattr(workspace, "_fallback_base", lambda: fallback)
    monkeypatch.delenv(workspace.WORKSPACE_ENV, raising=False)
    real_ensure_dir = workspace._ensure_dir

    def fake_ensure_dir(path: Path) -> bool:
        if path == default.resolve():
            raise PermissionError("denied")
        return real_ensure_dir(path)

    monkeypatch.setattr(workspace, "_ensure_dir", fake_ensure_dir)

    layout = workspace.ensure_workspace()

    assert layout.home == fallback
    assert layout.created["home"] is True


def test_explicit_path_never_falls_back(tmp_path, monkeypatch):
    monkeypatch.setattr(workspace, "_fallback_base", lambda: tmp_path / "fb")

    def deny(path: Path) -> bool:  # noqa: D401
        raise PermissionError("nope")

    monkeypatch.setattr(workspace, "_ensure_dir", deny)

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace(path=tmp_path / "explicit")
    assert not (tmp_path / "fb").exists()


def test_workspace_error_when_all_candidates_fail(tmp_path, monkeypatch):
    monkeypatch.setattr(workspace, "DEFAULT_WORKSPACE", tmp_path / "default")
    monkeypatch.setattr(workspace, "_fallback_base", lambda: tmp_path / "fb")
    monkeypatch.delenv(workspace.WORKSPACE_ENV, raising=False)

    def deny(path: Path) -> bool:  # noqa: D401
        raise PermissionError("nope")

    monkeypatch.setattr(workspace, "_ensure_dir", deny)

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace()
