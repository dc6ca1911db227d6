"""
TPC Algorithms
==============

Transmit power control algorithms.

Components:
    - MeasurementBasedApClientTPC: Closed form from client RSSI
    - LocationBasedOptimalTPC: Exhaustive search over AP locations
"""

from wifi_rrm.optimizers.tpc.measurement import MeasurementBasedApClientTPC
from wifi_rrm.optimizers.tpc.location import (
    LocationBasedOptimalTPC,
    get_permutations_with_repetitions,
    run_location_based_optimal_tpc,
)


__all__ = [
    "MeasurementBasedApClientTPC",
    "LocationBasedOptimalTPC",
    "get_permutations_with_repetitions",
    "run_location_based_optimal_tpc",
]
