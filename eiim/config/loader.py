"""Configuration loader."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigurationError
from .models import ConfigModel, SourceConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "eiim"


def _secret(section: Dict[str, Any], key: str, env_key: str) -> Dict[str, Any]:
    """Replace section[key] with the value of the env var named by section[env_key], if set."""
    env_name = section.get(env_key)
    if env_name and os.environ.get(env_name):
        section[key] = os.environ[env_name]
    return section


class Config:
    """Configuration manager."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """Initialize config manager; falls back to $EIIM_CONFIG, then ~/.config/eiim."""
        if config_path is None:
            env_path = os.environ.get("EIIM_CONFIG")
            config_path = Path(env_path) if env_path else DEFAULT_CONFIG_DIR / "config.yaml"
        self.config_path = config_path
        self._config: Optional[ConfigModel] = None

    @property
    def config(self) -> ConfigModel:
        """Get loaded config."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    @property
    def sources_path(self) -> Path:
        """Path of the feed sources file next to the config."""
        return self.config_path.parent / "sources.yaml"

    def get_db_config(self) -> Dict[str, Any]:
        """Postgres settings with the password resolved from the environment."""
        return _secret(self.config.postgres.model_dump(), "password", "password_env")

    def get_redis_url(self) -> Optional[str]:
        """Get the Redis URL, or None when caching is disabled."""
        redis_config = _secret(self.config.redis.model_dump(), "url", "url_env")
        return redis_config["url"] or None

    def get_llm_config(self) -> Dict[str, Any]:
        """LLM settings with the API key resolved from the environment."""
        return _secret(self.config.llm.model_dump(), "api_key", "api_key_env")


def _read_yaml(path: Path, what: str) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"{what.capitalize()} file not found: {path}")
    try:
        with open(path) as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {what} file: {e}")


def _write_yaml(data: Dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file."""
    try:
        return ConfigModel(**_read_yaml(config_path, "config"))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def load_sources(sources_path: Path) -> List[SourceConfig]:
    """Load feed sources; invalid entries are skipped with a warning."""
    sources = []
    for entry in _read_yaml(sources_path, "sources").get("sources") or []:
        try:
            sources.append(SourceConfig(**entry))
        except ValidationError as e:
            logger.warning("Skipping invalid source %s: %s", entry.get("name", "unknown"), e)
    return sources


def save_config(config: ConfigModel, config_path: Path) -> None:
    _write_yaml(config.model_dump(), config_path)


def save_sources(sources: List[SourceConfig], sources_path: Path) -> None:
    _write_yaml({"sources": [s.model_dump() for s in sources]}, sources_path)
