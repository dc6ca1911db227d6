"""
Device State Models
===================

Pydantic models for the periodic state report published by each device.

A state report is replaced wholesale on every update; it is never merged
with the previous report for the same device.

Input Contract (state record payload):
    {
        "state": {
            "unit": {...},
            "radios": [
                {"channel": 36, "channel_width": "80", "tx_power": 23}
            ],
            "interfaces": [
                {
                    "name": "up0v0",
                    "ssids": [
                        {
                            "ssid": "office",
                            "bssid": "aa:bb:cc:dd:ee:01",
                            "associations": [
                                {"bssid": "11:22:33:44:55:66", "rssi": -62}
                            ]
                        }
                    ]
                }
            ]
        }
    }

Unknown fields are kept so that copies of the data model round-trip the
full report.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Association(BaseModel):
    """
    A client associated to a served network.

    Attributes:
        bssid: Client MAC address
        station: Station identifier reported by the device
        rssi: Client signal strength as seen by the AP (dBm)
    """

    bssid: Optional[str] = None
    station: Optional[str] = None
    rssi: Optional[int] = Field(default=None, description="Client RSSI (dBm)")

    class Config:
        extra = "allow"


class Ssid(BaseModel):
    """A network served on an interface."""

    ssid: Optional[str] = None
    bssid: Optional[str] = None
    mode: Optional[str] = None
    associations: Optional[List[Association]] = None

    class Config:
        extra = "allow"


class Interface(BaseModel):
    """A network interface and the networks it serves."""

    name: Optional[str] = None
    ssids: Optional[List[Ssid]] = None

    class Config:
        extra = "allow"


class RadioState(BaseModel):
    """
    Operating state of one radio.

    Attributes:
        channel: Primary channel number
        channel_width: Channel width in MHz (numeric strings are accepted)
        tx_power: Current transmit power (dBm)
    """

    channel: Optional[int] = None
    channel_width: Optional[int] = Field(default=None, description="Channel width (MHz)")
    tx_power: Optional[int] = Field(default=None, description="Current tx power (dBm)")

    class Config:
        extra = "allow"


class DeviceState(BaseModel):
    """
    Latest state report of a device.

    Attributes:
        unit: Opaque system information block
        radios: Radio states, in the order reported by the device
        interfaces: Interfaces with their served networks and clients
    """

    unit: Optional[Dict[str, Any]] = None
    radios: Optional[List[RadioState]] = None
    interfaces: Optional[List[Interface]] = None

    class Config:
        extra = "allow"

    def client_rssi_list(self) -> List[int]:
        """Collect the RSSI of every associated client on every network."""
        rssi_list: List[int] = []
        for iface in self.interfaces or []:
            for ssid in iface.ssids or []:
                for client in ssid.associations or []:
                    if client.rssi is not None:
                        rssi_list.append(client.rssi)
        return rssi_list
