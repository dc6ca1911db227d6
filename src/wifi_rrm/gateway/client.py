"""
Device Gateway Client
=====================

HTTP client for the device gateway REST API.

This client:
    - Lists the devices known to the gateway
    - Fetches the latest stored statistics (telemetry) of a device

Design Rules:
    - Never raises on transport or decode errors
    - Failures are logged and mapped to an empty/absent result
    - Does NOT parse telemetry; payloads are returned as plain dicts
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

import requests

from wifi_rrm.config import GatewayConfig

logger = logging.getLogger(__name__)


class DeviceGateway(Protocol):
    """
    Protocol for device gateway clients consumed by the modeler.

    Implementations must not raise: failures return [] or None.
    """

    def list_devices(self) -> List[str]:
        """Return the identifiers of all devices known to the gateway."""
        ...

    def latest_telemetry(self, serial_number: str, count: int) -> Optional[Dict[str, Any]]:
        """Return the latest `count` statistics records, or None."""
        ...


class GatewayError(Exception):
    """Raised internally when a gateway call fails."""
    pass


class GatewayClient:
    """
    requests-based device gateway client.

    Attributes:
        base_url: Gateway REST API base URL
        timeout: Request timeout in seconds
        verify_ssl: Whether TLS certificates are verified

    Example:
        client = GatewayClient("https://gw.example.com:16002", token="...")
        for serial_number in client.list_devices():
            records = client.latest_telemetry(serial_number, 1)
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        verify_ssl: bool = True,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize gateway client.

        Args:
            base_url: Gateway REST API base URL
            token: Bearer token sent with every request (optional)
            timeout: Request timeout in seconds
            verify_ssl: Verify TLS certificates
            session: Pre-configured requests session (optional)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self._session = session or requests.Session()
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    @classmethod
    def from_config(cls, config: GatewayConfig, token: Optional[str] = None) -> "GatewayClient":
        """Create a client from the gateway section of the settings."""
        return cls(
            config.base_url,
            token=token,
            timeout=config.timeout_seconds,
            verify_ssl=config.verify_ssl,
        )

    def list_devices(self) -> List[str]:
        """
        List device serial numbers.

        Returns:
            Serial numbers, or [] on failure
        """
        try:
            body = self._get("/api/v1/devices", params={"deviceWithStatus": "true"})
        except GatewayError as e:
            logger.error(f"Failed to fetch devices: {e}")
            return []

        devices = body.get("devicesWithStatus")
        if devices is None:
            devices = body.get("devices", [])
        serial_numbers = [
            d["serialNumber"]
            for d in devices
            if isinstance(d, dict) and d.get("serialNumber")
        ]
        logger.debug(f"Received device list of size = {len(serial_numbers)}")
        return serial_numbers

    def latest_telemetry(self, serial_number: str, count: int) -> Optional[Dict[str, Any]]:
        """
        Fetch the newest statistics records of a device.

        Args:
            serial_number: Device identifier
            count: Number of records to fetch

        Returns:
            Statistics records payload, or None on failure
        """
        try:
            return self._get(
                f"/api/v1/device/{serial_number}/statistics",
                params={"newest": "true", "limit": str(count)},
            )
        except GatewayError as e:
            logger.error(f"Device {serial_number}: failed to fetch statistics: {e}")
            return None

    def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.get(
                url, params=params, timeout=self.timeout, verify=self.verify_ssl
            )
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            raise GatewayError(f"GET {url} failed: {e}") from e
        except ValueError as e:
            raise GatewayError(f"GET {url} returned invalid JSON: {e}") from e

        if not isinstance(body, dict):
            raise GatewayError(f"GET {url} returned {type(body).__name__}, expected object")
        return body
