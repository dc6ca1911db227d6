"""
Gateway Payload Models
======================

Schemas for payloads obtained from the device gateway and from the
capability and configuration sources.

Statistics records (latest telemetry of a device):
    {
        "serialNumber": "aabbccddee01",
        "data": [
            {"recorded": 1707321234, "data": {...device state...}}
        ]
    }

Capabilities:
    {"capabilities": {"wifi": {...}}}

AP configuration:
    {"radios": [{"band": "5G", "channel": 36, ...}], "interfaces": [...]}
"""

from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, Field


class StatisticsDetails(BaseModel):
    """One stored statistics report."""

    recorded: Optional[int] = None
    data: Optional[Dict[str, Any]] = None

    class Config:
        extra = "allow"


class StatisticsRecords(BaseModel):
    """Latest statistics reports for one device."""

    serial_number: Optional[str] = Field(default=None, alias="serialNumber")
    data: List[StatisticsDetails] = Field(default_factory=list)

    class Config:
        extra = "allow"
        populate_by_name = True


class DeviceCapabilities(BaseModel):
    """Capability report of a device."""

    capabilities: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        extra = "allow"

    @property
    def wifi(self) -> Optional[Dict[str, Any]]:
        """The wifi capability block, if present."""
        wifi = self.capabilities.get("wifi")
        return wifi if isinstance(wifi, dict) else None


class ApConfiguration(BaseModel):
    """
    Active configuration of an access point.

    Only the radio list is interpreted; everything else is kept opaque.
    """

    radios: Optional[List[Dict[str, Any]]] = None

    class Config:
        extra = "allow"

    def radio_config_list(self) -> List[Dict[str, Any]]:
        """Return the configured radios (empty if none)."""
        return list(self.radios or [])


def radio_bands(radios: Optional[List[Dict[str, Any]]]) -> Set[str]:
    """Return the set of bands configured in a radio list."""
    bands: Set[str] = set()
    for radio in radios or []:
        band = radio.get("band") if isinstance(radio, dict) else None
        if band is not None:
            bands.add(str(band))
    return bands
