"""
Location-Based Optimal TPC
==========================

Assigns tx power by exhaustive search over all tx power combinations of
the co-located APs, given their positions.

For each band:
    1. Keep devices with an active radio and a valid 2-D, non-negative
       location
    2. Intersect [min, max] with every participant's allowed tx powers
    3. Enumerate every combination with repetition and score it with the
       propagation model; the lowest metric wins (first seen on ties)

The search is aborted for the band when the locations exceed the
boundary, the choice set is empty, or the number of combinations exceeds
MAX_COMBINATIONS.
"""

import itertools
import logging
import math
from typing import Dict, List, Optional, Protocol, Sequence

from wifi_rrm.device_data import DeviceDataManager
from wifi_rrm.models.device import BANDS
from wifi_rrm.modeler.data_model import DataModel
from wifi_rrm.optimizers.base import (
    MAX_TX_POWER,
    MIN_TX_POWER,
    TxPowerMap,
    zone_device_configs,
    zone_device_states,
)
from wifi_rrm.optimizers.propagation import PropagationModel


logger = logging.getLogger(__name__)


DEFAULT_BOUNDARY = 100
# Ceiling on |choices| ** |devices|; bounds the search runtime
MAX_COMBINATIONS = 1000
FALLBACK_TX_POWER = 30


class MetricModel(Protocol):
    """Scores one tx power combination (lower is better)."""

    def evaluate(
        self,
        sample_space: int,
        ap_loc_x: Sequence[float],
        ap_loc_y: Sequence[float],
        tx_powers: Sequence[float],
    ) -> float:
        ...


def get_permutations_with_repetitions(choices: Sequence[int], n: int) -> List[List[int]]:
    """
    Generate all length-n sequences drawn from choices, with repetition.

    Sequences are produced in lexicographic order of the choice positions,
    e.g. choices [10, 20], n = 2 -> [10, 10], [10, 20], [20, 10], [20, 20].

    Args:
        choices: All values to consider
        n: Length of each sequence

    Returns:
        len(choices) ** n sequences
    """
    return [list(p) for p in itertools.product(choices, repeat=n)]


def run_location_based_optimal_tpc(
    sample_space: int,
    ap_loc_x: List[float],
    ap_loc_y: List[float],
    tx_power_choices: List[int],
    metric_model: MetricModel,
) -> List[int]:
    """
    Find the tx power combination with the lowest metric.

    Args:
        sample_space: Side of the square area in meters
        ap_loc_x: AP x coordinates
        ap_loc_y: AP y coordinates
        tx_power_choices: Candidate tx powers (dBm)
        metric_model: Scores each combination

    Returns:
        Tx power per AP, in the order of the locations. If no combination
        yields a finite metric, FALLBACK_TX_POWER for every AP.
    """
    num_of_aps = len(ap_loc_x)
    permutations = get_permutations_with_repetitions(tx_power_choices, num_of_aps)
    logger.info(f"Number of tx power combinations: {len(permutations)}")

    optimal_index: Optional[int] = None
    optimal_metric = math.inf
    for index, tx_powers in enumerate(permutations):
        metric = metric_model.evaluate(
            sample_space, ap_loc_x, ap_loc_y, [float(p) for p in tx_powers]
        )
        if metric < optimal_metric:
            optimal_metric = metric
            optimal_index = index

    if optimal_index is None:
        return [FALLBACK_TX_POWER] * num_of_aps
    logger.debug(f"Optimal combination #{optimal_index}: metric={optimal_metric:.4f}")
    return permutations[optimal_index]


class LocationBasedOptimalTPC:
    """
    Exhaustive-search TPC over AP locations.

    Attributes:
        zone: Zone whose devices are optimized
        metric_model: Propagation model scoring each combination
        min_tx_power: Lower tx power bound (dBm)
        max_tx_power: Upper tx power bound (dBm)

    Example:
        tpc = LocationBasedOptimalTPC(model, "zone-a", device_data_manager)
        tx_power_map = tpc.compute_tx_power_map()
        # {"aaaaaaaaaaaa": {"2G": 10, "5G": 20}, ...}
    """

    ALGORITHM_ID = "location_optimal"

    def __init__(
        self,
        model: DataModel,
        zone: str,
        device_data_manager: DeviceDataManager,
        metric_model: Optional[MetricModel] = None,
        min_tx_power: int = MIN_TX_POWER,
        max_tx_power: int = MAX_TX_POWER,
    ) -> None:
        if min_tx_power > max_tx_power:
            raise ValueError("min_tx_power must be <= max_tx_power")

        self.model = model
        self.zone = zone
        self.device_configs = zone_device_configs(device_data_manager, zone)
        self.metric_model = metric_model or PropagationModel()
        self.min_tx_power = min_tx_power
        self.max_tx_power = max_tx_power

    def build_tx_power_map_for_band(self, band: str, tx_power_map: TxPowerMap) -> None:
        """
        Compute tx powers for one band and add them to tx_power_map.

        Args:
            band: Band identifier
            tx_power_map: Accumulated serial number -> band -> tx power
        """
        boundary = DEFAULT_BOUNDARY
        valid_aps: Dict[str, int] = {}
        ap_loc_x: List[float] = []
        ap_loc_y: List[float] = []
        tx_power_choices = list(range(self.min_tx_power, self.max_tx_power + 1))

        for serial_number, state in zone_device_states(self.model, self.device_configs).items():
            if not state.radios:
                logger.debug(f"Device {serial_number}: No radios found, skipping...")
                continue

            config = self.device_configs[serial_number]
            location = config.location
            if location is None:
                logger.debug(f"Device {serial_number}: No location data, skipping...")
                continue
            # Only 2-D maps are supported
            if len(location) != 2 or location[0] < 0 or location[1] < 0:
                logger.error(f"Device {serial_number}: the location data is invalid, skipping...")
                continue

            valid_aps[serial_number] = len(ap_loc_x)
            ap_loc_x.append(float(location[0]))
            ap_loc_y.append(float(location[1]))

            allowed = (config.allowed_tx_powers or {}).get(band)
            if allowed is not None:
                allowed_set = set(allowed)
                tx_power_choices = [p for p in tx_power_choices if p in allowed_set]

            if config.boundary is not None:
                boundary = max(boundary, config.boundary)

        if not ap_loc_x:
            logger.error(f"Band {band}: no valid APs, missing location data or inactive APs!")
            return

        if max(ap_loc_x) > boundary or max(ap_loc_y) > boundary:
            logger.error(f"Band {band}: invalid boundary: {boundary}!")
            return

        if not tx_power_choices:
            logger.error(f"Band {band}: invalid tx power choices! It is empty!")
            return

        combinations = len(tx_power_choices) ** len(ap_loc_x)
        if combinations > MAX_COMBINATIONS:
            logger.error(
                f"Band {band}: invalid operation: complexity issue!! "
                f"Number of combinations: {combinations}"
            )
            return

        tx_power_list = run_location_based_optimal_tpc(
            boundary, ap_loc_x, ap_loc_y, tx_power_choices, self.metric_model
        )

        for serial_number, index in valid_aps.items():
            tx_power = tx_power_list[index]
            tx_power_map.setdefault(serial_number, {})[band] = tx_power
            logger.info(f"Device {serial_number}: Assigning {band} tx power = {tx_power}")

    def compute_tx_power_map(self) -> TxPowerMap:
        """Compute tx powers for every band."""
        tx_power_map: TxPowerMap = {}
        for band in BANDS:
            self.build_tx_power_map_for_band(band, tx_power_map)
        return tx_power_map
