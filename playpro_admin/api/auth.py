"""Login, logout and registration against ``/auth/*``."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Tuple

from ..infra.exceptions import APIError, handle_errors
from ..infra.logging import get_logger
from .client import ApiSettings, BackendClient, run_sync

logger = get_logger(__name__)


async def _post(settings: ApiSettings, path: str, body: Any = None) -> Any:
    async with BackendClient(settings) as client:
        return await client.post(path, body)


@handle_errors(logger)
def login(settings: ApiSettings, email: str, password: str) -> Tuple[str, Dict[str, Any]]:
    """Return ``(access_token, user)``; raises ``APIError`` when the backend refuses."""
    result = run_sync(_post(settings, "/auth/login", {"email": email, "password": password}))
    if not isinstance(result, dict) or not result.get("access_token"):
        raise APIError("Login failed", endpoint="/auth/login", response=result)
    user = result.get("user") if isinstance(result.get("user"), dict) else {}
    logger.info(f"Logged in as {user.get('email', email)}")
    return str(result["access_token"]), user


def logout(settings: ApiSettings) -> None:
    run_sync(_post(settings, "/auth/logout"))


@handle_errors(logger)
def register(settings: ApiSettings, payload: Mapping[str, Any]) -> Any:
    return run_sync(_post(settings, "/auth/register", dict(payload)))
