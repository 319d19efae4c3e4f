from __future__ import annotations

from pathlib import Path

import pytest

from quiz_manager.core import config as config_mod
from quiz_manager.core.config import ConfigError, load_config


def write_config(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")
    return path


def test_defaults_without_any_file(tmp_path):
    config = load_config(config_dir=tmp_path / "missing", env={})

    assert config.paths.data_home is None
    assert config.store.filename == "quizzes.json"
    assert config.store.seed_defaults is True
    assert config.play.seed is None
    assert config.shell.prompt == "quiz > "
    assert config.credits.authors == ("Quiz Manager contributors",)
    assert config.logging.level == "INFO"
    assert config.logging.verbose is False


def test_workspace_copy_is_merged_over_defaults(tmp_path):
    write_config(
        tmp_path / config_mod.CONFIG_FILENAME,
        """
[play]
seed = 7

[credits]
authors = ["Ada", "Grace"]

[logging]
level = "debug"
""",
    )

    config = load_config(config_dir=tmp_path, env={})

    assert config.play.seed == 7
    assert config.credits.authors == ("Ada", "Grace")
    assert config.logging.level == "DEBUG"
    assert config.store.filename == "quizzes.json"


def test_explicit_path_beats_environment(tmp_path):
    explicit = write_config(tmp_path / "a.toml", '[shell]\nprompt = "> "\n')
    env_file = write_config(tmp_path / "b.toml", '[shell]\nprompt = "$ "\n')

    config = load_config(
        explicit_path=explicit,
        env={config_mod.CONFIG_PATH_ENV: str(env_file)},
    )

    assert config.shell.prompt == "> "


def test_environment_beats_workspace_copy(tmp_path):
    write_config(
        tmp_path / "ws" / config_mod.CONFIG_FILENAME,
        '[store]\nfilename = "ws.json"\n',
    )
    env_file = write_config(
        tmp_path / "env.toml", '[store]\nfilename = "env.json"\n'
    )

    config = load_config(
        config_dir=tmp_path / "ws",
        env={config_mod.CONFIG_PATH_ENV: str(env_file)},
    )

    assert config.store.filename == "env.json"


def test_missing_explicit_file_is_an_error(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_config(explicit_path=tmp_path / "nope.toml", env={})


def test_invalid_toml_is_an_error(tmp_path):
    path = write_config(tmp_path / "bad.toml", "[store\n")

    with pytest.raises(ConfigError, match="parse"):
        load_config(explicit_path=path, env={})


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ("[store]\nfilenme = 'x'\n", "store.filenme"),
        ("[unknown]\nx = 1\n", "unknown"),
        ("store = 1\n", "Expected table"),
        ("[store]\nfilename = '../x.json'\n", "bare file name"),
        ("[store]\nseed_defaults = 'yes'\n", "store.seed_defaults"),
        ("[play]\nseed = true\n", "play.seed"),
        ("[play]\nseed = 'abc'\n", "play.seed"),
        ("[shell]\nprompt = ''\n", "shell.prompt"),
        ("[credits]\nauthors = []\n", "credits.authors"),
        ("[credits]\nauthors = ['ok', 3]\n", "credits.authors[1]"),
        ("[logging]\nlevel = 'LOUD'\n", "logging.level"),
        ("[paths]\ndata_home = ''\n", "paths.data_home"),
    ],
)
def test_invalid_values_are_rejected(tmp_path, body, message):
    path = write_config(tmp_path / "quiz.toml", body)

    with pytest.raises(ConfigError) as excinfo:
        load_config(explicit_path=path, env={})

    assert message in str(excinfo.value)


def test_prompt_keeps_trailing_space_and_data_home_expands(tmp_path):
    path = write_config(
        tmp_path / "quiz.toml",
        '[shell]\nprompt = "quiz# "\n\n[paths]\ndata_home = "~/quiz"\n',
    )

    config = load_config(explicit_path=path, env={})

    assert config.shell.prompt == "quiz# "
    assert config.paths.data_home == Path("~/quiz").expanduser()


def test_template_round_trips_to_defaults(tmp_path):
    target = tmp_path / "config" / config_mod.CONFIG_FILENAME

    written = config_mod.write_template(target)

    assert written == target
    assert "[store]" in target.read_text(encoding="utf-8")
    assert load_config(explicit_path=target, env={}) == load_config(env={})


def test_write_template_refuses_to_overwrite(tmp_path):
    target = write_config(tmp_path / "quiz.toml", "# mine\n")

    with pytest.raises(ConfigError):
        config_mod.write_template(target)

    config_mod.write_template(target, overwrite=True)
    assert "# mine" not in target.read_text(encoding="utf-8")


def test_default_tree_is_a_copy():
    tree = config_mod.default_tree()
    tree["store"]["filename"] = "changed.json"

    assert config_mod.default_tree()["store"]["filename"] == "quizzes.json"
