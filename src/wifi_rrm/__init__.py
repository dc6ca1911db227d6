"""
wifi-rrm
========

Radio resource management for fleets of wireless access points.

This package ingests streaming device telemetry into a shared data model
and runs transmit power control (TPC) algorithms over that model.

Components:
    - models: Telemetry and device configuration schemas
    - modeler: Shared data model and the telemetry ingestion pipeline
    - optimizers: TPC algorithms and the propagation model
    - gateway: Device gateway HTTP client
    - device_data: Zone topology and per-device configuration lookup

Example:
    from wifi_rrm.modeler import Modeler
    from wifi_rrm.optimizers.tpc import MeasurementBasedApClientTPC

    modeler = Modeler(params, device_data_manager, client=gateway)
    task = asyncio.create_task(modeler.run())

    tpc = MeasurementBasedApClientTPC(
        modeler.get_data_model_copy(), "zone-a", device_data_manager
    )
    tx_power_map = tpc.compute_tx_power_map()
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
