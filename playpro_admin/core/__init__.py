"""
playpro_admin.core: pure data-shaping logic (no streamlit, no network).

- table / pagination: the generic list component core
- lookups: id -> name resolution and display formatting
- forms: per-entity validation and payload builders
- report: monthly report renderer
- auth_rules: session parsing, role checks, route guard
"""

from __future__ import annotations

from typing import Optional

from ..infra.config import ConfigManager
from ..infra.logging import LoggerManager

_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Process-wide ``ConfigManager``; also applies the logging section once."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
        log_cfg = _config_manager.get_section("logging")
        log_file = log_cfg.get("file")
        if log_file:
            from pathlib import Path

            log_path = Path(log_file)
            if not log_path.is_absolute():
                log_path = _config_manager.config_dir.parent / log_path
            LoggerManager.configure(level=log_cfg.get("level"), log_file=log_path)
        else:
            LoggerManager.configure(level=log_cfg.get("level"))
    return _config_manager


__all__ = ["ConfigManager", "get_config_manager"]
