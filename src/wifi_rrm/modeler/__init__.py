"""
Modeler Module
==============

Telemetry ingestion and the shared data model.

This module provides the ingestion layer for wifi-rrm:
    - DataModel: Concurrency-safe per-device telemetry store
    - BatchQueue: Bounded FIFO of telemetry batches (drops oldest on overflow)
    - Modeler: Worker that applies batches and hook updates to the DataModel
    - TelemetryDispatcher, CapabilityDispatcher, ConfigDispatcher:
      Synchronous subscriber registries

Example:
    from wifi_rrm.modeler import Modeler, TelemetryDispatcher

    dispatcher = TelemetryDispatcher()
    modeler = Modeler(params, device_data_manager, telemetry_source=dispatcher)

    # Run worker as background task
    task = asyncio.create_task(modeler.run())

    # Broker thread
    dispatcher.dispatch_state_records(records)
"""

from wifi_rrm.modeler.data_model import DataModel, DeviceMap
from wifi_rrm.modeler.queue import BatchQueue, InputBatch, InputDataType, TelemetryRecord
from wifi_rrm.modeler.listeners import (
    CapabilityDispatcher,
    CapabilityListener,
    ConfigDispatcher,
    ConfigListener,
    TelemetryDispatcher,
    TelemetryListener,
)
from wifi_rrm.modeler.modeler import Modeler, ModelerMetrics, ModelerState


__all__ = [
    "DataModel",
    "DeviceMap",
    "BatchQueue",
    "InputBatch",
    "InputDataType",
    "TelemetryRecord",
    "TelemetryListener",
    "CapabilityListener",
    "ConfigListener",
    "TelemetryDispatcher",
    "CapabilityDispatcher",
    "ConfigDispatcher",
    "Modeler",
    "ModelerMetrics",
    "ModelerState",
]
