"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Environment variables (CUESH_SYMBOLS, CUESH_COLOR, CUESH_HISTORY_FILE)
  2. Project config (.cuesh/config.yaml)
  3. User config (~/.config/cuesh/config.yaml)
  4. Defaults

Malformed files are skipped. Values that parse but make no sense are
reported by Config.validate() and stop the session from starting.
"""

import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

from .presentation.symbols import COLOR_CHOICES


SYMBOL_CHOICES = ("unicode", "ascii", "auto")


def user_config_dir() -> Path:
    """Per-user configuration directory. Raises RuntimeError without a home directory."""
    try:
        return Path.home() / ".config" / "cuesh"
    except KeyError:
        raise RuntimeError("could not determine home directory")


@dataclass
class ReplConfig:
    """Input grammar and line editor settings."""
    command_prefix: str = ":"
    statement_prefix: str = "="
    multiline_token: str = ";;"
    history_file: Optional[str] = None  # None = <user config dir>/history
    discover: bool = True

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        for name in ("command_prefix", "statement_prefix", "multiline_token"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value or value != value.strip():
                return f"repl.{name} must be a non-empty string without surrounding spaces"
        if self.command_prefix == self.statement_prefix:
            return "repl.command_prefix and repl.statement_prefix must differ"
        if self.multiline_token.startswith((self.command_prefix, self.statement_prefix)):
            return "repl.multiline_token must not start with a command or statement prefix"
        if not isinstance(self.discover, bool):
            return f"repl.discover must be true or false, got {self.discover!r}"
        if self.history_file is not None and not isinstance(self.history_file, str):
            return f"repl.history_file must be a path string, got {self.history_file!r}"
        return None

    def history_path(self) -> Path:
        if self.history_file:
            return Path(self.history_file).expanduser()
        return user_config_dir() / "history"


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"
    color: str = "auto"    # "auto" | "always" | "never"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.symbols not in SYMBOL_CHOICES:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(SYMBOL_CHOICES)}"
        if self.color not in COLOR_CHOICES:
            return f"Unknown color setting '{self.color}'. Valid: {', '.join(COLOR_CHOICES)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    repl: ReplConfig = field(default_factory=ReplConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def validate(self) -> Optional[str]:
        """First error of any section, or None."""
        return self.repl.validate() or self.display.validate()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        repl_data = data.get("repl") if isinstance(data.get("repl"), dict) else {}
        display_data = data.get("display") if isinstance(data.get("display"), dict) else {}

        defaults = ReplConfig()
        return cls(
            repl=ReplConfig(
                command_prefix=repl_data.get("command_prefix", defaults.command_prefix),
                statement_prefix=repl_data.get("statement_prefix", defaults.statement_prefix),
                multiline_token=repl_data.get("multiline_token", defaults.multiline_token),
                history_file=repl_data.get("history_file"),
                discover=repl_data.get("discover", True),
            ),
            display=DisplayConfig(
                symbols=display_data.get("symbols", "auto"),
                color=display_data.get("color", "auto"),
            ),
        )


class ConfigManager:
    """
    Manages configuration loading.

    Hierarchy:
      1. Environment variables
      2. Project config (.cuesh/config.yaml)
      3. User config (~/.config/cuesh/config.yaml)
      4. Defaults
    """

    PROJECT_CONFIG_DIR = ".cuesh"
    CONFIG_FILE = "config.yaml"

    # environment variable -> (section, setting)
    ENV_OVERRIDES = {
        "CUESH_SYMBOLS": ("display", "symbols"),
        "CUESH_COLOR": ("display", "color"),
        "CUESH_HISTORY_FILE": ("repl", "history_file"),
    }

    def __init__(self, project_dir: Optional[Path] = None, user_dir: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._user_dir = Path(user_dir) if user_dir else None
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return (self._user_dir or user_config_dir()) / self.CONFIG_FILE

    def _read(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            return {}  # Ignore malformed config
        return data if isinstance(data, dict) else {}

    def load(self) -> Config:
        """Load configuration from all sources."""
        if self._config is not None:
            return self._config

        # Start with defaults
        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data = self._merge(config_data, self._read(self.user_config_path))

        # Layer 2: Project config (higher priority)
        config_data = self._merge(config_data, self._read(self.project_config_path))

        # Layer 3: Environment overrides
        for env, (section, setting) in self.ENV_OVERRIDES.items():
            if os.environ.get(env):
                if not isinstance(config_data.get(section), dict):
                    config_data[section] = {}
                config_data[section][setting] = os.environ[env]

        self._config = Config.from_dict(config_data)
        return self._config

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result
