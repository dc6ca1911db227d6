"""
Optimizers Module
=================

RRM optimizers that consume the DataModel.

Components:
    - TxPowerOptimizer, ChannelOptimizer: Optimizer contracts
    - PropagationModel: Coverage / SINR model for location-based search
    - tpc: Transmit power control algorithms
    - create_tpc: Builds a TPC algorithm by ID from the settings

Design Philosophy:
    Optimizers are read-mostly passes over the data model. They never
    mutate it and keep no state beyond their construction inputs.
"""

from wifi_rrm.optimizers.base import (
    MAX_TX_POWER,
    MIN_TX_POWER,
    ChannelOptimizer,
    TxPowerOptimizer,
    zone_device_configs,
    zone_device_states,
)
from wifi_rrm.optimizers.propagation import PropagationModel
from wifi_rrm.optimizers.tpc import LocationBasedOptimalTPC, MeasurementBasedApClientTPC
from wifi_rrm.optimizers.factory import TPC_ALGORITHMS, create_tpc


__all__ = [
    "MIN_TX_POWER",
    "MAX_TX_POWER",
    "TxPowerOptimizer",
    "ChannelOptimizer",
    "zone_device_configs",
    "zone_device_states",
    "PropagationModel",
    "MeasurementBasedApClientTPC",
    "LocationBasedOptimalTPC",
    "TPC_ALGORITHMS",
    "create_tpc",
]
