"""
Async HTTP client for the Playpro REST backend.

Every request carries ``Accept: application/json`` and, when logged in,
``Authorization: Bearer <token>``. Non-2xx answers are turned into the
exceptions of ``infra.exceptions`` so pages only deal with one error family.
"""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

import aiohttp

from ..infra.exceptions import (
    APIError,
    AuthenticationError,
    NetworkError,
    UnprocessableEntityError,
    extract_error_message,
)
from ..infra.logging import get_logger

logger = get_logger(__name__)

# field -> (filename, content, content_type)
FileParts = Mapping[str, Tuple[str, bytes, str]]


@dataclass(frozen=True)
class ApiSettings:
    base_url: str
    token: Optional[str] = None
    timeout: float = 30.0

    @classmethod
    def from_config(cls, config_manager, token: Optional[str] = None) -> "ApiSettings":
        return cls(
            base_url=str(config_manager.get_config_value("base_url", "", "api")).rstrip("/"),
            token=token,
            timeout=float(config_manager.get_config_value("timeout", 30.0, "api")),
        )

    def url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"


def unwrap(payload: Any) -> Any:
    """Backend lists and records come wrapped as ``{"data": ...}``."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


def build_form_data(fields: Mapping[str, Any], files: Optional[FileParts] = None) -> aiohttp.FormData:
    form = aiohttp.FormData()
    for key, value in fields.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "1" if value else "0"
        form.add_field(key, str(value))
    for key, (filename, content, content_type) in (files or {}).items():
        form.add_field(key, content, filename=filename, content_type=content_type)
    return form


class BackendClient:
    """
    One aiohttp session per ``async with`` block.

    Usage:
        async with BackendClient(settings) as client:
            rows = unwrap(await client.get("/admin/branch"))
    """

    def __init__(self, settings: ApiSettings):
        self.settings = settings
        self.session: Optional[aiohttp.ClientSession] = None
        self._connector: Optional[aiohttp.TCPConnector] = None

    async def __aenter__(self):
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self):
        if not self.session:
            self._connector = aiohttp.TCPConnector(limit=10)
            self.session = aiohttp.ClientSession(
                connector=self._connector,
                timeout=aiohttp.ClientTimeout(total=self.settings.timeout),
                headers=self._headers(),
            )

    async def close(self):
        if self.session:
            await self.session.close()
            self.session = None
        if self._connector:
            await self._connector.close()
            self._connector = None

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.settings.token:
            headers["Authorization"] = f"Bearer {self.settings.token}"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        form: Optional[aiohttp.FormData] = None,
        params: Optional[Dict[str, Any]] = None,
        raw: bool = False,
    ) -> Any:
        """
        Send one request and decode the answer.

        Args:
            method: HTTP verb
            path: path below the base URL, e.g. ``/admin/branch/3``
            json_body: JSON body (mutually exclusive with ``form``)
            form: multipart body
            params: query string
            raw: return the body bytes instead of decoded JSON

        Returns:
            decoded JSON (``None`` for empty bodies) or bytes when ``raw``
        """
        await self._ensure_session()
        url = self.settings.url(path)
        logger.debug(f"{method} {url}")
        try:
            async with self.session.request(method, url, json=json_body, data=form, params=params) as response:
                body = await response.read()
                if response.status >= 400:
                    self._raise_for_status(response.status, url, body)
                if raw:
                    return body
                if not body:
                    return None
                return json.loads(body)
        except aiohttp.ClientError as e:
            raise NetworkError(f"Network error calling {path}: {e}", url=url) from e
        except asyncio.TimeoutError as e:
            raise NetworkError(f"Timed out calling {path}", url=url) from e
        except json.JSONDecodeError as e:
            raise NetworkError(f"Invalid JSON from {path}: {e}", url=url) from e

    @staticmethod
    def _raise_for_status(status: int, url: str, body: bytes) -> None:
        try:
            payload = json.loads(body) if body else None
        except json.JSONDecodeError:
            payload = body.decode("utf-8", errors="replace")[:500]

        if status == 422:
            errors = payload.get("errors") if isinstance(payload, dict) else None
            raise UnprocessableEntityError(
                errors=errors if isinstance(errors, dict) else {},
                message=extract_error_message(payload, "The given data was invalid."),
                endpoint=url,
                response=payload,
            )
        message = extract_error_message(payload, f"Request failed with status {status}")
        if status == 401:
            raise AuthenticationError(message, endpoint=url, response=payload)
        raise APIError(message, endpoint=url, status_code=status, response=payload)

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, body: Any = None) -> Any:
        return await self.request("POST", path, json_body=body)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def post_multipart(self, path: str, fields: Mapping[str, Any], files: Optional[FileParts] = None) -> Any:
        return await self.request("POST", path, form=build_form_data(fields, files))

    async def download(self, path: str) -> bytes:
        return await self.request("GET", path, raw=True)


def run_sync(coro):
    """Run a coroutine from Streamlit's script thread."""
    return asyncio.run(coro)
