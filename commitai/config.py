"""Configuration management for commitai."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import ConfigError

CONFIG_FILE_NAME = ".commitai.json"
CONFIG_HOME_ENV = "COMMITAI_CONFIG_HOME"
API_KEY_ENV = "GEMINI_API_KEY"
MODEL_ENV = "COMMITAI_MODEL"

DEFAULT_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_MAX_TOKENS = 1024

COMMIT_STYLES = ("conventional", "simple")

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Runtime configuration for commitai."""

    gemini_api_key: str = ""
    language: str = "en"
    commit_style: str = "conventional"
    max_tokens: int = DEFAULT_MAX_TOKENS
    model: str = DEFAULT_MODEL
    endpoint: str = DEFAULT_ENDPOINT

    def validate(self) -> None:
        """Raise ConfigError when the configuration cannot reach the API."""
        if not self.gemini_api_key:
            raise ConfigError(
                "Gemini API key not set. Run: commitai config --key YOUR_KEY "
                f"or set {API_KEY_ENV} env var"
            )

    def masked_api_key(self) -> str:
        key = self.gemini_api_key
        if not key:
            return "(not set)"
        if len(key) > 8:
            return key[:4] + "*" * (len(key) - 8) + key[-4:]
        return "****"

    def to_dict(self) -> Dict[str, Any]:
        """Serialise configuration to a dict for persistence."""
        return asdict(self)


def config_dir() -> Path:
    """Directory holding the config file (home unless overridden)."""
    override = os.environ.get(CONFIG_HOME_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home()


def config_file_path() -> Path:
    return config_dir() / CONFIG_FILE_NAME


def load_persisted_config(path: Optional[Path] = None) -> Optional[Config]:
    """Read the JSON config file, returning None when it does not exist."""
    cfg_path = path or config_file_path()
    if not cfg_path.exists():
        return None
    try:
        data = json.loads(cfg_path.read_text())
    except (OSError, ValueError) as e:
        raise ConfigError(f"invalid config file {cfg_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"invalid config file {cfg_path}: expected an object")

    known = {f.name for f in fields(Config)}
    ignored = sorted(set(data) - known)
    if ignored:
        logger.debug("Ignoring unknown config keys: %s", ", ".join(ignored))
    values = {k: v for k, v in data.items() if k in known}
    if "max_tokens" in values:
        try:
            values["max_tokens"] = int(values["max_tokens"])
        except (TypeError, ValueError) as e:
            raise ConfigError(
                f"invalid config file {cfg_path}: max_tokens must be an integer"
            ) from e
    return Config(**values)


def load_config(
    *,
    path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Config:
    """Build configuration from defaults, config file, environment and overrides.

    Precedence (lowest to highest): built-in defaults, the config file,
    environment variables (``GEMINI_API_KEY``, ``COMMITAI_MODEL``), then
    explicit ``overrides`` (usually command-line flags).
    """
    config = load_persisted_config(path) or Config()

    env_key = os.environ.get(API_KEY_ENV)
    if env_key:
        config.gemini_api_key = env_key
    env_model = os.environ.get(MODEL_ENV)
    if env_model:
        config.model = env_model

    for key, value in (overrides or {}).items():
        if value in (None, ""):
            continue
        if not hasattr(config, key):
            raise ConfigError(f"Unknown configuration option: {key}")
        setattr(config, key, value)
    return config


def save_config(config: Config, path: Optional[Path] = None) -> Path:
    """Persist configuration JSON, never writing an env-provided API key."""
    cfg_path = path or config_file_path()
    data = config.to_dict()
    if os.environ.get(API_KEY_ENV):
        data["gemini_api_key"] = ""
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text(json.dumps(data, indent=2))
    os.chmod(cfg_path, 0o600)
    return cfg_path
