"""
Wifi Scan Models
================

Schema for wifi scan results reported by devices.

Input Contract (wifi scan record payload):
    {
        "status": {
            "scan": [
                {
                    "bssid": "aa:bb:cc:dd:ee:01",
                    "ssid": "office",
                    "channel": 36,
                    "frequency": 5180,
                    "signal": -71
                }
            ]
        }
    }
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class WifiScanEntry(BaseModel):
    """
    One neighbor observed during a wifi scan.

    Attributes:
        bssid: BSSID of the neighbor
        ssid: Advertised network name
        channel: Channel the neighbor was heard on
        frequency: Center frequency (MHz)
        signal: Received signal strength (dBm)
        last_seen: Scan timestamp reported by the device
    """

    bssid: Optional[str] = None
    ssid: Optional[str] = None
    channel: Optional[int] = Field(default=None, ge=0, description="Channel number")
    frequency: Optional[int] = None
    signal: Optional[int] = Field(default=None, description="Signal strength (dBm)")
    last_seen: Optional[int] = None
    tsf: Optional[int] = None
    ht_oper: Optional[str] = None
    vht_oper: Optional[str] = None
    capability: Optional[int] = None

    class Config:
        extra = "allow"


class _ScanStatus(BaseModel):
    scan: List[WifiScanEntry]


class WifiScanResult(BaseModel):
    """Envelope of a wifi scan record payload."""

    status: _ScanStatus


def parse_wifi_scan_entries(payload: Dict[str, Any]) -> List[WifiScanEntry]:
    """
    Parse the scan entries out of a wifi scan record payload.

    Args:
        payload: Unparsed record payload

    Returns:
        List of scan entries (possibly empty)

    Raises:
        pydantic.ValidationError: If the payload does not match the contract
    """
    return WifiScanResult.model_validate(payload).status.scan
