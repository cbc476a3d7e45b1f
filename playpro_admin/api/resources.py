"""
REST resource services.

``ResourceService`` wraps the ``/{admin|api}/{resource}[/{id}]`` convention
with blocking methods the Streamlit pages can call directly. Each call opens
its own ``BackendClient`` and runs it to completion.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from .client import ApiSettings, BackendClient, FileParts, run_sync, unwrap

# endpoint paths
BRANCHES = "/api/branch"
ADMIN_BRANCHES = "/admin/branch"
CATEGORIES = "/admin/category"
SPORTS = "/admin/sport"
PRODUCTS = "/admin/product"
VENUES = "/admin/venue"
CLASSES = "/admin/class"
COACHES = "/admin/coach"
USERS = "/admin/users"
ROSTERS = "/admin/coach-schedule"
PLAY_KIDS = "/admin/play-kid"
SCHEDULES = "/admin/schedule"
MEMBERSHIPS = "/admin/membership"
SESSIONS = "/admin/session"
ATTENDANCE_REPORTS = "/admin/attendance-report"
MONTHLY_REPORTS = "/admin/playkid-reports"

PLAY_KID_TEMPLATE = f"{PLAY_KIDS}/download-template"
PLAY_KID_IMPORT = f"{PLAY_KIDS}/import"
REPORT_TEMPLATE = f"{MONTHLY_REPORTS}/download-template"
REPORT_IMPORT = f"{MONTHLY_REPORTS}/import"


class ResourceService:
    """CRUD over one REST collection."""

    def __init__(self, settings: ApiSettings, endpoint: str):
        self.settings = settings
        self.endpoint = endpoint.rstrip("/")

    def _item(self, item_id: Any) -> str:
        return f"{self.endpoint}/{item_id}"

    async def _call(self, method: str, path: str, **kwargs) -> Any:
        async with BackendClient(self.settings) as client:
            return await client.request(method, path, **kwargs)

    def list(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        data = unwrap(run_sync(self._call("GET", self.endpoint, params=params)))
        return data if isinstance(data, list) else []

    def get(self, item_id: Any) -> Optional[Dict[str, Any]]:
        data = unwrap(run_sync(self._call("GET", self._item(item_id))))
        return data if isinstance(data, dict) else None

    def create(self, payload: Mapping[str, Any]) -> Any:
        return unwrap(run_sync(self._call("POST", self.endpoint, json_body=dict(payload))))

    def update(self, item_id: Any, payload: Mapping[str, Any]) -> Any:
        return unwrap(run_sync(self._call("PUT", self._item(item_id), json_body=dict(payload))))

    def delete(self, item_id: Any) -> Any:
        return run_sync(self._call("DELETE", self._item(item_id)))

    async def _multipart(self, path: str, fields: Mapping[str, Any], files: Optional[FileParts]) -> Any:
        async with BackendClient(self.settings) as client:
            return await client.post_multipart(path, fields, files)

    def save_multipart(self, item_id: Any, fields: Mapping[str, Any], files: Optional[FileParts] = None) -> Any:
        """POST multipart to the collection, or to the item when ``item_id`` is set.

        Updates go through POST with ``_method=PUT`` in ``fields`` since PHP
        backends only parse multipart bodies on POST.
        """
        path = self.endpoint if item_id is None else self._item(item_id)
        return unwrap(run_sync(self._multipart(path, fields, files)))

    def nested(self, item_id: Any, child: str) -> "ResourceService":
        """Sub-collection such as ``/admin/schedule/{id}/coaches``."""
        return ResourceService(self.settings, f"{self._item(item_id)}/{child.strip('/')}")


async def _download(settings: ApiSettings, path: str) -> bytes:
    async with BackendClient(settings) as client:
        return await client.download(path)


def download_file(settings: ApiSettings, path: str) -> bytes:
    return run_sync(_download(settings, path))


async def _upload(settings: ApiSettings, path: str, files: FileParts) -> Any:
    async with BackendClient(settings) as client:
        return await client.post_multipart(path, {}, files)


def upload_file(settings: ApiSettings, path: str, filename: str, content: bytes,
                content_type: str = "application/octet-stream") -> Dict[str, Any]:
    result = run_sync(_upload(settings, path, {"file": (filename, content, content_type)}))
    return result if isinstance(result, dict) else {}
