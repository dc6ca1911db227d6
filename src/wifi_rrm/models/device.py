"""
Device Configuration Model
==========================

Per-device RRM configuration consulted by the modeler and the optimizers.

Example:
    config = DeviceConfig(
        enable_rrm=True,
        location=[12.5, 40.0],
        allowed_tx_powers={"5G": [10, 15, 20]},
        boundary=150,
    )
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


# Bands over which power and channel decisions are made independently
BAND_2G = "2G"
BAND_5G = "5G"
BANDS = [BAND_2G, BAND_5G]


class DeviceConfig(BaseModel):
    """
    RRM configuration of a single device.

    Attributes:
        enable_rrm: Whether RRM manages this device
        location: Device coordinates in meters (only 2-D is supported)
        allowed_tx_powers: Allowed tx power values (dBm) per band
        boundary: Extent of the deployment area in meters
    """

    enable_rrm: bool = Field(default=True, description="RRM enabled for device")
    location: Optional[List[float]] = Field(
        default=None,
        description="Device coordinates [x, y] in meters",
    )
    allowed_tx_powers: Optional[Dict[str, List[int]]] = Field(
        default=None,
        description="Allowed tx powers (dBm) per band",
    )
    boundary: Optional[int] = Field(
        default=None,
        ge=0,
        description="Deployment area extent in meters",
    )
