"""Configuration management for the quiz shell.

Settings live in a TOML file grouped by concern. Values are merged over the
built-in defaults below; unknown keys are rejected so typos surface early
instead of being silently ignored.
"""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError as exc:  # pragma: no cover - should never happen
    raise RuntimeError("Python 3.11+ required for tomllib support") from exc

__all__ = [
    "CONFIG_FILENAME",
    "CONFIG_PATH_ENV",
    "ConfigError",
    "QuizConfig",
    "load_config",
    "resolve_config_path",
    "config_template",
    "write_template",
]


CONFIG_FILENAME = "quiz.toml"
CONFIG_PATH_ENV = "QUIZ_MANAGER_CONFIG"


class ConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class PathsConfig:
    data_home: Optional[Path]


@dataclass(frozen=True)
class StoreConfig:
    filename: str
    seed_defaults: bool


@dataclass(frozen=True)
class PlayConfig:
    seed: Optional[int]


@dataclass(frozen=True)
class ShellConfig:
    prompt: str


@dataclass(frozen=True)
class CreditsConfig:
    authors: tuple[str, ...]


@dataclass(frozen=True)
class LoggingConfig:
    level: str
    verbose: bool


@dataclass(frozen=True)
class QuizConfig:
    paths: PathsConfig
    store: StoreConfig
    play: PlayConfig
    shell: ShellConfig
    credits: CreditsConfig
    logging: LoggingConfig


def _merge_dict(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise ConfigError(f"Unknown configuration key '{dotted}'.")
        base_value = base[key]
        if isinstance(base_value, MutableMapping):
            if not isinstance(value, Mapping):
                raise ConfigError(
                    "Expected table for '{0}', found {1}.".format(
                        dotted,
                        type(value).__name__,
                    )
                )
            _merge_dict(base_value, value, path=f"{dotted}.")
        else:
            base[key] = value


def _require_bool(value: Any, *, field: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"'{field}' must be a boolean.")
    return value


def _require_string(
    value: Any, *, field: str, allow_whitespace: bool = False
) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{field}' must be a non-empty string.")
    return value if allow_whitespace else value.strip()


def _coerce_optional_int(value: Any, *, field: str) -> Optional[int]:
    if value is None:
        return None
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"'{field}' must be an integer when set.")
    return value


def _coerce_optional_path(value: Any, *, field: str) -> Optional[Path]:
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"'{field}' must be a non-empty string when set.")
    return Path(value.strip()).expanduser()


def _require_string_list(value: Any, *, field: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not value:
        raise ConfigError(f"'{field}' must be a non-empty list of strings.")
    items: list[str] = []
    for idx, item in enumerate(value):
        items.append(_require_string(item, field=f"{field}[{idx}]"))
    return tuple(items)


def _build_store(section: Mapping[str, Any]) -> StoreConfig:
    filename = _require_string(section.get("filename"), field="store.filename")
    if Path(filename).name != filename:
        raise ConfigError("'store.filename' must be a bare file name.")
    return StoreConfig(
        filename=filename,
        seed_defaults=_require_bool(
            section.get("seed_defaults"), field="store.seed_defaults"
        ),
    )


def _build_logging(section: Mapping[str, Any]) -> LoggingConfig:
    level = _require_string(
        section.get("level"), field="logging.level"
    ).upper()
    allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
    if level not in allowed:
        raise ConfigError(
            "logging.level must be one of "
            "DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )
    verbose = _require_bool(section.get("verbose"), field="logging.verbose")
    return LoggingConfig(level=level, verbose=verbose)


def _build_config(tree: Mapping[str, Any]) -> QuizConfig:
    return QuizConfig(
        paths=PathsConfig(
            data_home=_coerce_optional_path(
                tree["paths"].get("data_home"), field="paths.data_home"
            )
        ),
        store=_build_store(tree["store"]),
        play=PlayConfig(
            seed=_coerce_optional_int(
                tree["play"].get("seed"), field="play.seed"
            )
        ),
        shell=ShellConfig(
            prompt=_require_string(
                tree["shell"].get("prompt"),
                field="shell.prompt",
                allow_whitespace=True,
            )
        ),
        credits=CreditsConfig(
            authors=_require_string_list(
                tree["credits"].get("authors"), field="credits.authors"
            )
        ),
        logging=_build_logging(tree["logging"]),
    )


def _load_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except FileNotFoundError as exc:
        raise ConfigError(f"Config file not found: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Failed to parse config TOML: {exc}") from exc


def resolve_config_path(
    *,
    explicit_path: Optional[Path] = None,
    config_dir: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
) -> Optional[Path]:
    """Return the config file to read, or ``None`` to use the defaults.

    An explicit path or ``QUIZ_MANAGER_CONFIG`` must point at an existing
    file; the workspace copy under ``config_dir`` is optional.
    """

    env_map = os.environ if env is None else env
    if explicit_path is not None:
        return explicit_path.expanduser().resolve()
    env_override = (env_map.get(CONFIG_PATH_ENV) or "").strip()
    if env_override:
        return Path(env_override).expanduser().resolve()
    if config_dir is not None:
        candidate = config_dir / CONFIG_FILENAME
        if candidate.is_file():
            return candidate.resolve()
    return None


def load_config(
    *,
    explicit_path: Optional[Path] = None,
    config_dir: Optional[Path] = None,
    env: Mapping[str, str] | None = None,
) -> QuizConfig:
    """Load the TOML config, applying defaults and validation."""

    path = resolve_config_path(
        explicit_path=explicit_path, config_dir=config_dir, env=env
    )
    tree = default_tree()
    if path is not None:
        toml_data = _load_toml(path)
        _merge_dict(tree, toml_data)
    return _build_config(tree)


def default_tree() -> Dict[str, Any]:
    """Return a copy of the default configuration tree."""

    return copy.deepcopy(_DEFAULTS)


def config_template() -> str:
    """Return the TOML template written by ``quiz init``."""

    return _CONFIG_TEMPLATE.strip() + "\n"


def write_template(
    path: Path, *, overwrite: bool = False, mode: int = 0o600
) -> Path:
    """Write the default template to ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    if path.exists() and not overwrite:
        raise ConfigError(f"Config already exists: {path}")
    with path.open("w", encoding="utf-8") as fh:
        fh.write(config_template())
    try:
        path.chmod(mode)
    except PermissionError:
        pass
    return path


_DEFAULTS: Dict[str, Any] = {
    "paths": {
        "data_home": None,
    },
    "store": {
        "filename": "quizzes.json",
        "seed_defaults": True,
    },
    "play": {
        "seed": None,
    },
    "shell": {
        "prompt": "quiz > ",
    },
    "credits": {
        "authors": ["Quiz Manager contributors"],
    },
    "logging": {
        "level": "INFO",
        "verbose": False,
    },
}


_CONFIG_TEMPLATE = """
# Quiz manager configuration

[paths]
# Override the data directory (~/.quiz-manager-data by default)
# data_home = "~/quiz-data"

[store]
# Quiz records file, created under <data_home>/data
filename = "quizzes.json"
# Populate a brand new store with a few sample quizzes
seed_defaults = true

[play]
# Fix the question order of play sessions (handy for demos)
# seed = 1234

[shell]
prompt = "quiz > "

[credits]
authors = ["Quiz Manager contributors"]

[logging]
level = "INFO"
verbose = false
"""
