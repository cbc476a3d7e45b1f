"""
Infrastructure layer - serialization.

JSON helpers shared by the table search and the session store.
"""

import json
from datetime import datetime, date, time
from decimal import Decimal
from typing import Any


class Serializer:
    """JSON serialization that never trips over backend values."""

    @staticmethod
    def _default(o: Any) -> Any:
        if isinstance(o, (datetime, date, time)):
            return o.isoformat()
        if isinstance(o, Decimal):
            return float(o)
        if isinstance(o, (set, frozenset)):
            return list(o)
        return str(o)

    @staticmethod
    def safe_json_dumps(obj: Any, **kwargs) -> str:
        """
        Serialize ``obj`` to JSON, converting dates, decimals and sets.

        Args:
            obj: value to serialize
            **kwargs: forwarded to ``json.dumps``

        Returns:
            JSON string
        """
        json_kwargs = {
            'ensure_ascii': False,
            'default': Serializer._default
        }
        json_kwargs.update(kwargs)
        return json.dumps(obj, **json_kwargs)

    @staticmethod
    def compact(obj: Any) -> str:
        """Compact JSON without whitespace between tokens, like ``JSON.stringify``."""
        return Serializer.safe_json_dumps(obj, separators=(",", ":"))


def safe_json_loads(text: Any, default=None) -> Any:
    """Parse JSON, returning ``default`` on malformed or missing input."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return default
