"""
Test Configuration
==================

Pytest fixtures and builders shared by the wifi-rrm tests.
"""

from typing import Any, Dict, List, Optional

import pytest

from wifi_rrm.device_data import DeviceDataManager
from wifi_rrm.models.device import DeviceConfig
from wifi_rrm.models.state import DeviceState


TEST_ZONE = "test-zone"
DEVICE_A = "aaaaaaaaaaaa"
DEVICE_B = "bbbbbbbbbbbb"
DEVICE_C = "cccccccccccc"


def create_state_payload(
    channel: int = 36,
    channel_width: Optional[Any] = 20,
    tx_power: Optional[int] = 20,
    bssid: str = "aa:bb:cc:dd:ee:01",
    client_rssis: Optional[List[int]] = None,
) -> Dict[str, Any]:
    """Build a raw device state report with one radio and one network."""
    radio: Dict[str, Any] = {"channel": channel}
    if channel_width is not None:
        radio["channel_width"] = channel_width
    if tx_power is not None:
        radio["tx_power"] = tx_power

    associations = [
        {"bssid": f"11:22:33:44:55:{i:02x}", "rssi": rssi}
        for i, rssi in enumerate(client_rssis or [])
    ]
    return {
        "unit": {"load": [0, 0, 0]},
        "radios": [radio],
        "interfaces": [
            {
                "name": "up0v0",
                "ssids": [
                    {"ssid": "office", "bssid": bssid, "associations": associations}
                ],
            }
        ],
    }


def create_state(**kwargs: Any) -> DeviceState:
    """Build a parsed DeviceState (see create_state_payload)."""
    return DeviceState.model_validate(create_state_payload(**kwargs))


def create_wifi_scan_payload(channels: List[int], signal: int = -70) -> Dict[str, Any]:
    """Build a raw wifi scan payload with one entry per channel."""
    return {
        "status": {
            "scan": [
                {
                    "bssid": f"de:ad:be:ef:00:{i:02x}",
                    "ssid": f"neighbor-{i}",
                    "channel": channel,
                    "signal": signal,
                }
                for i, channel in enumerate(channels)
            ]
        }
    }


def create_device_status(band: str, channel: int) -> List[Dict[str, Any]]:
    """Build a radio configuration list with a single radio."""
    return [{"band": band, "channel": channel}]


@pytest.fixture
def device_data_manager():
    """Topology with devices A and B in TEST_ZONE, both RRM-enabled."""
    manager = DeviceDataManager()
    manager.set_topology({TEST_ZONE: [DEVICE_A, DEVICE_B]})
    return manager


@pytest.fixture
def located_device_data_manager():
    """Devices A at (0, 0) and B at (1, 1) allowed only 10 or 20 dBm."""
    manager = DeviceDataManager()
    manager.set_topology({TEST_ZONE: [DEVICE_A, DEVICE_B]})
    allowed = {"2G": [10, 20], "5G": [10, 20]}
    manager.set_device_config(
        DEVICE_A, DeviceConfig(location=[0, 0], allowed_tx_powers=allowed)
    )
    manager.set_device_config(
        DEVICE_B, DeviceConfig(location=[1, 1], allowed_tx_powers=allowed)
    )
    return manager
