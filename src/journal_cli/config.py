"""Configuration management for journal-cli."""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

import toml
from platformdirs import user_config_dir

from .core.pages import DEFAULT_EXTENSION
from .errors import ConfigError, MissingEditorError, MissingJournalPathError

logger = logging.getLogger(__name__)

APP_NAME = "journal_cli"
CONFIG_ENV_VAR = "JOURNAL_CLI_CONFIG"


def get_config_path() -> Path:
    """Location of the config file, honouring JOURNAL_CLI_CONFIG."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path(user_config_dir(APP_NAME)) / f"{APP_NAME}.toml"


@dataclass
class Config:
    """journal-cli configuration."""

    editor: str | None = None
    path: str | None = None
    extension: str = DEFAULT_EXTENSION
    midnight_offset: int = 0
    # Macro name -> command line
    macros: dict[str, str] = field(default_factory=dict)

    def journal_root(self) -> Path:
        """Expanded journal directory. Raises if it was never configured."""
        if not self.path:
            raise MissingJournalPathError()
        return Path(self.path).expanduser()

    def to_dict(self) -> dict:
        data: dict = {}
        if self.editor is not None:
            data["editor"] = self.editor
        if self.path is not None:
            data["path"] = self.path
        data["extension"] = self.extension
        data["midnight_offset"] = self.midnight_offset
        data["macros"] = dict(self.macros)
        return data


def normalize_extension(extension: str) -> str:
    return extension.strip().lstrip(".")


def _expect(raw: dict, key: str, kind: type, config_path: Path):
    value = raw[key]
    # bool is an int subclass; TOML booleans are never valid here
    if not isinstance(value, kind) or isinstance(value, bool):
        raise ConfigError(f"Invalid value for '{key}' in {config_path}: expected {kind.__name__}")
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from the TOML file. Missing file yields defaults."""
    config_path = path or get_config_path()
    config = Config()

    if not config_path.exists():
        logger.debug(f"No config at {config_path}, using defaults")
        return config

    try:
        raw = toml.loads(config_path.read_text(encoding="utf-8"))
    except (toml.TomlDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"Failed to parse config file {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Problem opening config file {config_path}: {e}")

    if "editor" in raw:
        config.editor = _expect(raw, "editor", str, config_path)
    if "path" in raw:
        config.path = _expect(raw, "path", str, config_path)
    if "extension" in raw:
        extension = normalize_extension(_expect(raw, "extension", str, config_path))
        if extension:
            config.extension = extension
    if "midnight_offset" in raw:
        offset = _expect(raw, "midnight_offset", int, config_path)
        if offset < 0:
            raise ConfigError(f"Invalid value for 'midnight_offset' in {config_path}: must not be negative")
        config.midnight_offset = offset
    if "macros" in raw:
        macros = _expect(raw, "macros", dict, config_path)
        for name, command in macros.items():
            if not isinstance(command, str):
                raise ConfigError(f"Invalid command for macro '{name}' in {config_path}: expected str")
            config.macros[name] = command

    return config


def save_config(config: Config, path: Path | None = None) -> Path:
    """Write configuration to the TOML file, creating its directory."""
    config_path = path or get_config_path()
    try:
        text = toml.dumps(config.to_dict())
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Failed to serialize config: {e}")

    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to write config file {config_path}: {e}")

    logger.debug(f"Saved config to {config_path}")
    return config_path


def resolve_editor(config: Config, environ: Mapping[str, str]) -> str:
    """Editor command from config, falling back to $EDITOR."""
    if config.editor:
        return config.editor
    value = environ.get("EDITOR", "")
    if value.strip():
        return value
    raise MissingEditorError()
