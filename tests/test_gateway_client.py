"""
Gateway Client Tests
====================

Tests for the device gateway REST client.
"""

from typing import Any, Dict, List, Optional

import requests

from wifi_rrm.config import GatewayConfig
from wifi_rrm.gateway import GatewayClient


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, body: Any = None, status: int = 200, invalid_json: bool = False) -> None:
        self.body = body
        self.status = status
        self.invalid_json = invalid_json

    def raise_for_status(self) -> None:
        if self.status >= 400:
            raise requests.HTTPError(f"{self.status} error")

    def json(self) -> Any:
        if self.invalid_json:
            raise ValueError("Expecting value")
        return self.body


class FakeSession:
    """Records GET calls and replays a canned response or error."""

    def __init__(
        self,
        response: Optional[FakeResponse] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.headers: Dict[str, str] = {}
        self.response = response
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        return self.response


def _client(session: FakeSession, **kwargs: Any) -> GatewayClient:
    return GatewayClient("https://gw.test:16002/", session=session, **kwargs)


class TestListDevices:
    """Tests for list_devices."""

    def test_returns_serial_numbers(self):
        session = FakeSession(FakeResponse({
            "devicesWithStatus": [
                {"serialNumber": "aaaaaaaaaaaa", "connected": True},
                {"serialNumber": "bbbbbbbbbbbb", "connected": False},
                {"connected": True},
            ]
        }))

        assert _client(session).list_devices() == ["aaaaaaaaaaaa", "bbbbbbbbbbbb"]
        call = session.calls[0]
        assert call["url"] == "https://gw.test:16002/api/v1/devices"
        assert call["params"] == {"deviceWithStatus": "true"}

    def test_plain_devices_key(self):
        session = FakeSession(FakeResponse({"devices": [{"serialNumber": "cccccccccccc"}]}))
        assert _client(session).list_devices() == ["cccccccccccc"]

    def test_transport_error_gives_empty_list(self):
        session = FakeSession(error=requests.ConnectionError("refused"))
        assert _client(session).list_devices() == []

    def test_http_error_gives_empty_list(self):
        session = FakeSession(FakeResponse({}, status=503))
        assert _client(session).list_devices() == []

    def test_non_object_body_gives_empty_list(self):
        session = FakeSession(FakeResponse(["aaaaaaaaaaaa"]))
        assert _client(session).list_devices() == []


class TestLatestTelemetry:
    """Tests for latest_telemetry."""

    def test_returns_records(self):
        body = {"serialNumber": "aaaaaaaaaaaa", "data": [{"data": {"radios": []}}]}
        session = FakeSession(FakeResponse(body))

        assert _client(session, timeout=3.0).latest_telemetry("aaaaaaaaaaaa", 2) == body
        call = session.calls[0]
        assert call["url"] == "https://gw.test:16002/api/v1/device/aaaaaaaaaaaa/statistics"
        assert call["params"] == {"newest": "true", "limit": "2"}
        assert call["timeout"] == 3.0

    def test_invalid_json_gives_none(self):
        session = FakeSession(FakeResponse(invalid_json=True))
        assert _client(session).latest_telemetry("aaaaaaaaaaaa", 1) is None

    def test_timeout_gives_none(self):
        session = FakeSession(error=requests.Timeout("slow"))
        assert _client(session).latest_telemetry("aaaaaaaaaaaa", 1) is None


class TestConstruction:
    """Tests for client construction."""

    def test_token_sets_authorization_header(self):
        session = FakeSession()
        _client(session, token="secret")
        assert session.headers["Authorization"] == "Bearer secret"

    def test_from_config(self):
        config = GatewayConfig(
            base_url="https://gw.example.com/", timeout_seconds=2.5, verify_ssl=False
        )
        client = GatewayClient.from_config(config)
        assert client.base_url == "https://gw.example.com"
        assert client.timeout == 2.5
        assert client.verify_ssl is False
