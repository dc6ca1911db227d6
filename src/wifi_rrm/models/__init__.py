"""
Data Models
===========

Pydantic models for wifi-rrm.

Models:
    State:
        - DeviceState: Latest state report of a device
        - RadioState, Interface, Ssid, Association: Report components

    Wifi scan:
        - WifiScanEntry: One neighbor seen in a scan
        - parse_wifi_scan_entries: Payload parser

    Gateway:
        - StatisticsRecords: Stored telemetry of a device
        - DeviceCapabilities: Capability report
        - ApConfiguration: Active AP configuration

    Device:
        - DeviceConfig: Per-device RRM configuration
        - BAND_2G, BAND_5G, BANDS: Band identifiers
"""

from wifi_rrm.models.state import Association, DeviceState, Interface, RadioState, Ssid
from wifi_rrm.models.wifiscan import WifiScanEntry, parse_wifi_scan_entries
from wifi_rrm.models.gateway import (
    ApConfiguration,
    DeviceCapabilities,
    StatisticsDetails,
    StatisticsRecords,
    radio_bands,
)
from wifi_rrm.models.device import BAND_2G, BAND_5G, BANDS, DeviceConfig

__all__ = [
    # State
    "DeviceState",
    "RadioState",
    "Interface",
    "Ssid",
    "Association",
    # Wifi scan
    "WifiScanEntry",
    "parse_wifi_scan_entries",
    # Gateway
    "StatisticsDetails",
    "StatisticsRecords",
    "DeviceCapabilities",
    "ApConfiguration",
    "radio_bands",
    # Device
    "DeviceConfig",
    "BAND_2G",
    "BAND_5G",
    "BANDS",
]
