"""
Infrastructure layer - configuration.

Settings come from two places:

- ``config/app.yaml`` (PyYAML) for UI and client defaults
- ``config/.env.local`` (python-dotenv) / process environment for deployment
  values such as the backend URL

Environment variables win over YAML values.
"""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from .exceptions import ConfigError
from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "config"

# env var -> (section, key, caster)
ENV_OVERRIDES = {
    "PLAYPRO_API_URL": ("api", "base_url", str),
    "PLAYPRO_STORAGE_URL": ("api", "storage_url", str),
    "PLAYPRO_HTTP_TIMEOUT": ("api", "timeout", float),
    "PLAYPRO_LOG_LEVEL": ("logging", "level", str),
    "PLAYPRO_PAGE_SIZE": ("table", "page_size", int),
}

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "api": {"base_url": "http://localhost:8000", "storage_url": "http://localhost:8000/storage", "timeout": 30.0},
    "table": {"page_size": 10, "pagination_delta": 2},
    "session": {"token_ttl_hours": 24},
    "import": {"max_upload_mb": 10, "allowed_extensions": [".xlsx", ".xls", ".csv"]},
    "logging": {"level": "INFO", "file": None},
}


class ConfigManager:
    """Loads and caches the merged YAML + environment configuration."""

    def __init__(self, config_dir: Optional[Path] = None, cache_ttl: float = 60.0):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.cache_ttl = cache_ttl
        self._config_cache: Dict[str, Dict[str, Any]] = {}
        self._cache_timestamps: Dict[str, float] = {}
        self._env_loaded = False

    def _load_env(self) -> None:
        if self._env_loaded:
            return
        dotenv_path = self.config_dir / ".env.local"
        if dotenv_path.exists():
            load_dotenv(dotenv_path)
            logger.info(f"Loaded environment from {dotenv_path}")
        self._env_loaded = True

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path.name}: {e}", config_key=str(path)) from e
        if not isinstance(data, dict):
            raise ConfigError(f"{path.name} must contain a mapping", config_key=str(path))
        return data

    def load_config(self, name: str = "app") -> Dict[str, Any]:
        """
        Return the merged configuration for ``config/<name>.yaml``.

        Args:
            name: YAML file stem

        Returns:
            section -> settings mapping with defaults, file values and env
            overrides applied in that order
        """
        now = time.time()
        cached = self._config_cache.get(name)
        if cached is not None and now - self._cache_timestamps.get(name, 0) < self.cache_ttl:
            return cached

        self._load_env()
        merged: Dict[str, Dict[str, Any]] = {k: dict(v) for k, v in DEFAULTS.items()}
        for section, values in self._read_yaml(self.config_dir / f"{name}.yaml").items():
            if isinstance(values, dict):
                merged.setdefault(section, {}).update(values)
            else:
                merged[section] = values

        for env_key, (section, key, caster) in ENV_OVERRIDES.items():
            raw = os.getenv(env_key)
            if raw is None or raw == "":
                continue
            try:
                merged.setdefault(section, {})[key] = caster(raw)
            except ValueError as e:
                raise ConfigError(f"{env_key} has an invalid value: {raw!r}", config_key=env_key) from e

        self._config_cache[name] = merged
        self._cache_timestamps[name] = now
        return merged

    def get_config_value(self, key: str, default: Any = None, section: str = "api") -> Any:
        value = self.load_config().get(section, {})
        if not isinstance(value, dict):
            return default
        return value.get(key, default)

    def get_section(self, section: str) -> Dict[str, Any]:
        value = self.load_config().get(section, {})
        return dict(value) if isinstance(value, dict) else {}

    def clear_cache(self) -> None:
        self._config_cache.clear()
        self._cache_timestamps.clear()
