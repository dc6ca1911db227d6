"""
Optimizer Factory
=================

Builds TPC algorithms by algorithm ID from the loaded settings.
"""

import logging
from typing import Optional

from wifi_rrm.config import Settings, settings as default_settings
from wifi_rrm.device_data import DeviceDataManager
from wifi_rrm.modeler.data_model import DataModel
from wifi_rrm.optimizers.base import TxPowerOptimizer
from wifi_rrm.optimizers.propagation import PropagationModel
from wifi_rrm.optimizers.tpc.location import LocationBasedOptimalTPC
from wifi_rrm.optimizers.tpc.measurement import MeasurementBasedApClientTPC


logger = logging.getLogger(__name__)


TPC_ALGORITHMS = (
    MeasurementBasedApClientTPC.ALGORITHM_ID,
    LocationBasedOptimalTPC.ALGORITHM_ID,
)


def create_tpc(
    algorithm_id: str,
    model: DataModel,
    zone: str,
    device_data_manager: DeviceDataManager,
    settings: Optional[Settings] = None,
) -> TxPowerOptimizer:
    """
    Create a TPC algorithm.

    Fails fast on an unknown algorithm ID or an invalid configuration.

    Args:
        algorithm_id: One of TPC_ALGORITHMS
        model: Data model (live or snapshot)
        zone: Zone to optimize
        device_data_manager: Device configuration lookup
        settings: Settings to use (defaults to the global settings)
    """
    settings = settings or default_settings
    tpc_config = settings.tpc

    if algorithm_id == MeasurementBasedApClientTPC.ALGORITHM_ID:
        logger.info(f"Using MeasurementBasedApClientTPC: target_mcs={tpc_config.target_mcs}")
        return MeasurementBasedApClientTPC(
            model,
            zone,
            device_data_manager,
            target_mcs=tpc_config.target_mcs,
            default_tx_power=tpc_config.default_tx_power,
            min_tx_power=tpc_config.min_tx_power,
            max_tx_power=tpc_config.max_tx_power,
        )

    elif algorithm_id == LocationBasedOptimalTPC.ALGORITHM_ID:
        logger.info("Using LocationBasedOptimalTPC")
        return LocationBasedOptimalTPC(
            model,
            zone,
            device_data_manager,
            metric_model=PropagationModel(settings.propagation),
            min_tx_power=tpc_config.min_tx_power,
            max_tx_power=tpc_config.max_tx_power,
        )

    else:
        raise ValueError(f"Unknown TPC algorithm: {algorithm_id}")
