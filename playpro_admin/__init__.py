"""
playpro_admin package entry (lightweight, lazy).

Principles:
- ``import playpro_admin`` must not import streamlit or aiohttp
- subpackages are loaded on first attribute access
"""

from __future__ import annotations

from typing import Any

__version__ = "1.0.0"

_LAZY_SUBPACKAGES = {"infra", "core", "api", "web"}


def __getattr__(name: str) -> Any:  # PEP 562
    if name in _LAZY_SUBPACKAGES:
        import importlib

        m = importlib.import_module(f"{__name__}.{name}")
        globals()[name] = m  # cache
        return m
    raise AttributeError(name)


__all__ = ["__version__", *_LAZY_SUBPACKAGES]
