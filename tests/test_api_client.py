"""
Unit tests for the backend client, resource service and dashboard counts.

No backend is needed: the aiohttp session is replaced by small fakes.
"""
import asyncio
import json
import sys
from pathlib import Path
from unittest.mock import patch

import aiohttp
import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from playpro_admin.api.client import ApiSettings, BackendClient, unwrap
from playpro_admin.api.dashboard import DashboardCounts, fetch_counts
from playpro_admin.api.resources import PLAY_KIDS, SCHEDULES, ResourceService
from playpro_admin.infra.exceptions import (
    APIError,
    AuthenticationError,
    NetworkError,
    UnprocessableEntityError,
)

SETTINGS = ApiSettings("http://backend.test", token="tok", timeout=5)


class FakeResponse:
    def __init__(self, status, body):
        self.status = status
        self._body = body if isinstance(body, bytes) else json.dumps(body).encode()

    async def read(self):
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False


class FakeSession:
    """Records requests and answers with a canned response (or raises)."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response


def run_request(session, *args, **kwargs):
    client = BackendClient(SETTINGS)
    client.session = session
    return asyncio.run(client.request(*args, **kwargs))


class TestBackendClient:

    def test_headers(self):
        assert BackendClient(SETTINGS)._headers() == {"Accept": "application/json", "Authorization": "Bearer tok"}
        assert "Authorization" not in BackendClient(ApiSettings("http://x"))._headers()

    def test_unwrap(self):
        assert unwrap({"data": [1, 2]}) == [1, 2]
        assert unwrap([1]) == [1]
        assert unwrap({"message": "ok"}) == {"message": "ok"}

    def test_successful_json(self):
        session = FakeSession(FakeResponse(200, {"data": [{"id": 1}]}))
        assert run_request(session, "GET", "/admin/branch") == {"data": [{"id": 1}]}
        method, url, _ = session.calls[0]
        assert (method, url) == ("GET", "http://backend.test/admin/branch")

    def test_empty_body(self):
        assert run_request(FakeSession(FakeResponse(204, b"")), "DELETE", "/admin/branch/1") is None

    def test_raw_download(self):
        assert run_request(FakeSession(FakeResponse(200, b"PK\x03\x04")), "GET", "/t", raw=True) == b"PK\x03\x04"

    def test_422_is_flattened(self):
        body = {"message": "The given data was invalid.", "errors": {"email": ["Taken."], "name": ["Required."]}}
        with pytest.raises(UnprocessableEntityError) as info:
            run_request(FakeSession(FakeResponse(422, body)), "POST", "/auth/register")
        assert info.value.messages == ["Taken.", "Required."]
        assert info.value.message == "Taken., Required."

    def test_401(self):
        with pytest.raises(AuthenticationError):
            run_request(FakeSession(FakeResponse(401, {"message": "Unauthenticated."})), "GET", "/admin/sport")

    def test_other_status(self):
        with pytest.raises(APIError) as info:
            run_request(FakeSession(FakeResponse(500, b"<html>oops</html>")), "GET", "/admin/sport")
        assert info.value.status_code == 500
        assert info.value.response == "<html>oops</html>"

    def test_connection_error(self):
        session = FakeSession(error=aiohttp.ClientConnectionError("refused"))
        with pytest.raises(NetworkError):
            run_request(session, "GET", "/admin/sport")

    def test_invalid_json(self):
        with pytest.raises(NetworkError):
            run_request(FakeSession(FakeResponse(200, b"{not json")), "GET", "/admin/sport")


class FakeBackendClient:
    """Stands in for BackendClient inside ResourceService."""

    calls = []
    answer = None

    def __init__(self, settings):
        self.settings = settings

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def request(self, method, path, **kwargs):
        FakeBackendClient.calls.append((method, path, kwargs))
        return FakeBackendClient.answer

    async def post_multipart(self, path, fields, files=None):
        FakeBackendClient.calls.append(("MULTIPART", path, {"fields": dict(fields), "files": files}))
        return FakeBackendClient.answer


class TestResourceService:

    def setup_method(self):
        FakeBackendClient.calls = []
        FakeBackendClient.answer = None
        self.patcher = patch("playpro_admin.api.resources.BackendClient", FakeBackendClient)
        self.patcher.start()

    def teardown_method(self):
        self.patcher.stop()

    def test_list_unwraps(self):
        FakeBackendClient.answer = {"data": [{"id": 1}, {"id": 2}]}
        assert ResourceService(SETTINGS, PLAY_KIDS).list() == [{"id": 1}, {"id": 2}]
        assert FakeBackendClient.calls[0][:2] == ("GET", "/admin/play-kid")

    def test_list_ignores_non_lists(self):
        FakeBackendClient.answer = {"data": {"id": 1}}
        assert ResourceService(SETTINGS, PLAY_KIDS).list() == []

    def test_update_and_delete_paths(self):
        svc = ResourceService(SETTINGS, "/admin/sport/")
        svc.update(3, {"name": "Futsal"})
        svc.delete(3)
        assert FakeBackendClient.calls[0] == ("PUT", "/admin/sport/3", {"json_body": {"name": "Futsal"}})
        assert FakeBackendClient.calls[1][:2] == ("DELETE", "/admin/sport/3")

    def test_save_multipart_targets(self):
        svc = ResourceService(SETTINGS, PLAY_KIDS)
        svc.save_multipart(None, {"_method": "POST"})
        svc.save_multipart(7, {"_method": "PUT"})
        assert FakeBackendClient.calls[0][1] == "/admin/play-kid"
        assert FakeBackendClient.calls[1][1] == "/admin/play-kid/7"

    def test_nested(self):
        nested = ResourceService(SETTINGS, SCHEDULES).nested(5, "/eligible-playkids")
        assert nested.endpoint == "/admin/schedule/5/eligible-playkids"


class FakeCountClient:
    """Answers list endpoints; one can fail and one can hang."""

    def __init__(self, sizes, failing=(), hanging=()):
        self.sizes = sizes
        self.failing = set(failing)
        self.hanging = set(hanging)
        self.cancelled = []

    async def get(self, endpoint):
        if endpoint in self.failing:
            raise APIError("boom", endpoint=endpoint, status_code=500)
        if endpoint in self.hanging:
            try:
                await asyncio.sleep(30)
            except asyncio.CancelledError:
                self.cancelled.append(endpoint)
                raise
        return {"data": [{}] * self.sizes.get(endpoint, 0)}


class TestDashboardCounts:

    SIZES = {"/admin/play-kid": 120, "/admin/coach": 8, "/admin/sport": 4, "/admin/branch": 3}

    def test_all_counts(self):
        counts = asyncio.run(fetch_counts(FakeCountClient(self.SIZES)))
        assert counts == DashboardCounts(play_kids=120, coaches=8, sports=4, branches=3)

    def test_failure_counts_as_zero(self):
        counts = asyncio.run(fetch_counts(FakeCountClient(self.SIZES, failing={"/admin/coach"})))
        assert counts.coaches == 0
        assert counts.play_kids == 120

    def test_cancellation_zeroes_pending_counts(self):
        async def scenario():
            cancel = asyncio.Event()
            asyncio.get_running_loop().call_later(0.05, cancel.set)
            client = FakeCountClient(self.SIZES, hanging={"/admin/sport"})
            return await fetch_counts(client, cancel)

        counts = asyncio.run(scenario())
        assert counts.sports == 0
        assert counts.branches == 3

    def test_cancelled_requests_settle_before_return(self):
        client = FakeCountClient(self.SIZES, hanging={"/admin/sport", "/admin/coach"})

        async def scenario():
            cancel = asyncio.Event()
            asyncio.get_running_loop().call_later(0.05, cancel.set)
            await fetch_counts(client, cancel)
            return list(client.cancelled)

        assert sorted(asyncio.run(scenario())) == ["/admin/coach", "/admin/sport"]


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
