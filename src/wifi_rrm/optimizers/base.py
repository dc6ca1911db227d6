"""
Optimizer Contracts
===================

Interfaces implemented by RRM optimizers and the read-only helpers they
share.

Optimizers are constructed from three read-only inputs:
    - a DataModel (live or a snapshot)
    - a zone name
    - a DeviceDataManager for per-device configuration

They keep no shared mutable state; each variant is an independent class.

Output shape (both contracts):
    {serial_number: {band: value}}
"""

import logging
from typing import Dict, Protocol

from wifi_rrm.device_data import DeviceDataManager
from wifi_rrm.models.device import DeviceConfig
from wifi_rrm.models.state import DeviceState
from wifi_rrm.modeler.data_model import DataModel


logger = logging.getLogger(__name__)


# Hardware tx power limits (dBm)
MIN_TX_POWER = 0
MAX_TX_POWER = 30

TxPowerMap = Dict[str, Dict[str, int]]
ChannelMap = Dict[str, Dict[str, int]]


class TxPowerOptimizer(Protocol):
    """Protocol for transmit power control algorithms."""

    def compute_tx_power_map(self) -> TxPowerMap:
        """
        Compute new tx powers.

        Returns:
            Mapping of serial number -> band -> tx power (dBm)
        """
        ...


class ChannelOptimizer(Protocol):
    """Protocol for channel assignment algorithms."""

    def compute_channel_map(self) -> ChannelMap:
        """
        Compute new channels.

        Returns:
            Mapping of serial number -> band -> channel
        """
        ...


def zone_device_configs(
    device_data_manager: DeviceDataManager, zone: str
) -> Dict[str, DeviceConfig]:
    """Return configurations of the RRM-enabled devices in a zone."""
    return {
        serial_number: config
        for serial_number, config in device_data_manager.get_all_device_configs(zone).items()
        if config.enable_rrm
    }


def zone_device_states(
    model: DataModel, device_configs: Dict[str, DeviceConfig]
) -> Dict[str, DeviceState]:
    """
    Return the latest states of the given devices, sorted by serial number.

    Reads the model's state map once; later ingestion does not affect the
    returned dict.
    """
    states = model.states()
    return {
        serial_number: states[serial_number]
        for serial_number in sorted(states)
        if serial_number in device_configs
    }
