import logging
import os
import shutil
from dataclasses import dataclass, field, fields
from typing import Optional, Any, Dict

import toml

from .errors import ConfigError, PrerequisiteMissing

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = os.path.expanduser("~/.config/cli-translator")
DEFAULT_CONFIG_FILE = os.path.join(DEFAULT_CONFIG_DIR, "config.toml")
DEFAULT_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODEL = "gpt-4.1-mini"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _default_shell() -> Optional[str]:
    # On Windows subprocess picks COMSPEC itself.
    if os.name == "nt":
        return None
    return os.environ.get("SHELL") or "/bin/sh"


@dataclass(frozen=True)
class Config:
    """Immutable runtime settings, built once at startup and passed to each component."""

    api_key: Optional[str] = field(default=None, repr=False)
    api_url: str = DEFAULT_API_URL
    model: str = DEFAULT_MODEL
    temperature: float = 0.0
    max_tokens: int = 512
    analyze_max_tokens: int = 1024
    analyze_max_chars: int = 12000
    description: str = ""
    shell: Optional[str] = None
    backup_dir: str = os.path.expanduser("~/.cli_translator_backups")
    log_dir: str = os.path.join(DEFAULT_CONFIG_DIR, "logs")
    verbose: bool = False
    stream_output: bool = True
    request_timeout: Optional[float] = None

    @classmethod
    def load(cls, config_file: Optional[str] = None, **overrides: Any) -> "Config":
        """
        Build a Config from environment variables, the TOML config file and defaults.

        Environment variables win over the file, which wins over the defaults.
        Keyword overrides (typically from command-line flags) win over everything.
        """
        path = config_file or os.environ.get("CLI_TRANSLATOR_CONFIG") or DEFAULT_CONFIG_FILE
        file_config = load_config_file(path)

        def get(key: str, default: Any = None) -> Any:
            return _get_config(key, file_config, default)

        values: Dict[str, Any] = {
            "api_key": get("OPENAI_API_KEY") or None,
            "api_url": get("CLI_TRANSLATOR_API_URL", DEFAULT_API_URL),
            "model": get("CLI_TRANSLATOR_MODEL", DEFAULT_MODEL),
            "temperature": _to_float("CLI_TRANSLATOR_TEMPERATURE", get("CLI_TRANSLATOR_TEMPERATURE", 0.0)),
            "max_tokens": _to_int("CLI_TRANSLATOR_MAX_TOKENS", get("CLI_TRANSLATOR_MAX_TOKENS", 512)),
            "analyze_max_tokens": _to_int(
                "CLI_TRANSLATOR_ANALYZE_MAX_TOKENS", get("CLI_TRANSLATOR_ANALYZE_MAX_TOKENS", 1024)
            ),
            "analyze_max_chars": _to_int(
                "CLI_TRANSLATOR_ANALYZE_MAX_CHARS", get("CLI_TRANSLATOR_ANALYZE_MAX_CHARS", 12000)
            ),
            "description": get("CLI_TRANSLATOR_DESCRIPTION", ""),
            "shell": get("CLI_TRANSLATOR_SHELL") or _default_shell(),
            "backup_dir": os.path.expanduser(
                get("CLI_TRANSLATOR_BACKUP_DIR", "~/.cli_translator_backups")
            ),
            "log_dir": os.path.expanduser(
                get("CLI_TRANSLATOR_LOG_DIR", os.path.join(DEFAULT_CONFIG_DIR, "logs"))
            ),
            "verbose": _to_bool("CLI_TRANSLATOR_VERBOSE", get("CLI_TRANSLATOR_VERBOSE", False)),
            "stream_output": _to_bool(
                "CLI_TRANSLATOR_STREAM_OUTPUT", get("CLI_TRANSLATOR_STREAM_OUTPUT", True)
            ),
            "request_timeout": _to_optional_float(
                "CLI_TRANSLATOR_REQUEST_TIMEOUT", get("CLI_TRANSLATOR_REQUEST_TIMEOUT")
            ),
        }
        known = {f.name for f in fields(cls)}
        for key, value in overrides.items():
            if key not in known:
                raise ConfigError(f"Unknown configuration option: {key}")
            if value is not None:
                values[key] = value
        return cls(**values)

    def check_prerequisites(self) -> None:
        """Raise PrerequisiteMissing unless the credential and the shell are available."""
        if not self.api_key:
            logger.error("OPENAI_API_KEY environment variable not set.")
            raise PrerequisiteMissing(
                "OPENAI_API_KEY environment variable is not set. "
                "Set it with: export OPENAI_API_KEY=your_api_key"
            )
        if self.shell and shutil.which(self.shell) is None:
            logger.error(f"Shell not found: {self.shell}")
            raise PrerequisiteMissing(f"{self.shell} is required but not installed.")

    def __str__(self) -> str:
        config_dict = {f.name: getattr(self, f.name) for f in fields(self)}
        if self.api_key:
            config_dict["api_key"] = (
                f"{self.api_key[:4]}...{self.api_key[-4:]}" if len(self.api_key) > 8 else "****"
            )
        return str(config_dict)


def load_config_file(path: str) -> Dict[str, Any]:
    """Loads the TOML config file, returning an empty mapping when it is absent or unreadable."""
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r") as f:
            return toml.load(f)
    except (toml.TomlDecodeError, IOError) as e:
        logger.warning(f"Could not read config file at {path}. Error: {e}")
        return {}


def create_default_config(path: str = DEFAULT_CONFIG_FILE) -> bool:
    """
    Writes a default configuration file.

    Returns False without touching anything when the file already exists.
    """
    if os.path.exists(path):
        return False
    config_dir = os.path.dirname(path)
    if config_dir:
        os.makedirs(config_dir, exist_ok=True)
    default_config = {
        "api": {
            "CLI_TRANSLATOR_API_URL": DEFAULT_API_URL,
            "CLI_TRANSLATOR_MODEL": DEFAULT_MODEL,
            "CLI_TRANSLATOR_TEMPERATURE": 0.0,
            "CLI_TRANSLATOR_MAX_TOKENS": 512,
        },
        "system": {
            "CLI_TRANSLATOR_DESCRIPTION": "",
        },
        "application": {
            "CLI_TRANSLATOR_BACKUP_DIR": "~/.cli_translator_backups",
            "CLI_TRANSLATOR_LOG_DIR": os.path.join(DEFAULT_CONFIG_DIR, "logs"),
        },
        "behavior": {
            "CLI_TRANSLATOR_VERBOSE": False,
            "CLI_TRANSLATOR_STREAM_OUTPUT": True,
        },
    }
    with open(path, "w") as f:
        toml.dump(default_config, f)
    logger.info(f"Created default config file at: {path}")
    return True


def _get_config(key: str, file_config: Dict[str, Any], default: Optional[Any] = None) -> Any:
    """
    Get a configuration value, prioritizing environment variables,
    then the config file, and finally a default value.
    """
    value = os.environ.get(key)
    if value is not None:
        return value

    if key in file_config and not isinstance(file_config[key], dict):
        return file_config[key]
    for section in file_config.values():
        if isinstance(section, dict) and key in section:
            return section[key]

    return default


def _to_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"{key} must be a boolean, got {value!r}")


def _to_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    if parsed <= 0:
        raise ConfigError(f"{key} must be positive, got {value!r}")
    return parsed


def _to_float(key: str, value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{key} must be a number, got {value!r}")


def _to_optional_float(key: str, value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return _to_float(key, value)
