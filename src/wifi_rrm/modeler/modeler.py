"""
Modeler
=======

Telemetry ingestion pipeline that builds and maintains the shared DataModel.

This module provides the Modeler class which:
    - Backfills the latest state of every RRM-enabled device on startup
    - Consumes state and wifi scan batches from a bounded queue
    - Drops records of devices that are not RRM-enabled
    - Applies capability and configuration updates from hooks
    - Prunes disabled devices from the data model on demand

Lifecycle:
    STARTING -> FETCHING_INITIAL -> RUNNING -> TERMINATED

Design Rules:
    - One worker task drains the queue; listeners only enqueue
    - A malformed record is logged and skipped, never fatal
    - Cancellation while waiting for a batch is the clean shutdown
    - Any other exception in the worker is logged and re-raised
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from wifi_rrm.config import ModelerConfig
from wifi_rrm.device_data import DeviceDataManager
from wifi_rrm.gateway.client import DeviceGateway
from wifi_rrm.models.gateway import (
    ApConfiguration,
    DeviceCapabilities,
    StatisticsRecords,
    radio_bands,
)
from wifi_rrm.models.state import DeviceState
from wifi_rrm.models.wifiscan import parse_wifi_scan_entries
from wifi_rrm.modeler.data_model import DataModel
from wifi_rrm.modeler.listeners import (
    CapabilityDispatcher,
    ConfigDispatcher,
    TelemetryDispatcher,
)
from wifi_rrm.modeler.queue import (
    BatchQueue,
    InputBatch,
    InputDataType,
    TelemetryRecord,
)


logger = logging.getLogger(__name__)


class ModelerState(str, Enum):
    """Lifecycle states of the modeler worker."""

    STARTING = "STARTING"
    FETCHING_INITIAL = "FETCHING_INITIAL"
    RUNNING = "RUNNING"
    TERMINATED = "TERMINATED"


class ModelerMetrics:
    """Metrics for Modeler observability."""

    __slots__ = (
        "batches_processed",
        "records_dropped",
        "parse_errors",
        "state_updates",
        "wifiscan_updates",
        "initial_states",
    )

    def __init__(self) -> None:
        self.batches_processed: int = 0
        self.records_dropped: int = 0
        self.parse_errors: int = 0
        self.state_updates: int = 0
        self.wifiscan_updates: int = 0
        self.initial_states: int = 0

    def to_dict(self) -> dict:
        """Export metrics as dict."""
        return {
            "batches_processed": self.batches_processed,
            "records_dropped": self.records_dropped,
            "parse_errors": self.parse_errors,
            "state_updates": self.state_updates,
            "wifiscan_updates": self.wifiscan_updates,
            "initial_states": self.initial_states,
        }


class Modeler:
    """
    Telemetry ingestion worker.

    Registers itself with the given telemetry, capability and config
    sources at construction. Telemetry callbacks only enqueue batches;
    the batches are applied by run() on the worker's event loop.
    Capability and config callbacks update the data model directly on
    the caller's thread.

    Attributes:
        params: Ingestion parameters
        metrics: Operational metrics

    Example:
        modeler = Modeler(
            ModelerConfig(),
            device_data_manager,
            telemetry_source=dispatcher,
            client=GatewayClient(url),
        )
        task = asyncio.create_task(modeler.run())
        ...
        task.cancel()
    """

    LISTENER_NAME = "Modeler"

    def __init__(
        self,
        params: ModelerConfig,
        device_data_manager: DeviceDataManager,
        telemetry_source: Optional[TelemetryDispatcher] = None,
        client: Optional[DeviceGateway] = None,
        capability_source: Optional[CapabilityDispatcher] = None,
        config_source: Optional[ConfigDispatcher] = None,
    ) -> None:
        """
        Initialize modeler and register hooks.

        Args:
            params: Ingestion parameters
            device_data_manager: Device configuration lookup
            telemetry_source: Broker record dispatcher (optional)
            client: Device gateway used for the initial backfill (optional)
            capability_source: Capability change dispatcher (optional)
            config_source: Configuration change dispatcher (optional)
        """
        self.params = params
        self.device_data_manager = device_data_manager
        self.client = client

        self.data_model = DataModel(params.wifi_scan_buffer_size)
        self.metrics = ModelerMetrics()
        self._queue = BatchQueue(maxsize=params.max_queue_size)
        self._state = ModelerState.STARTING

        if telemetry_source is not None:
            telemetry_source.add_telemetry_listener(self.LISTENER_NAME, self)
        if capability_source is not None:
            capability_source.add_capability_listener(self.LISTENER_NAME, self)
        if config_source is not None:
            config_source.add_config_listener(self.LISTENER_NAME, self)

    @property
    def state(self) -> ModelerState:
        """Current lifecycle state."""
        return self._state

    @property
    def queue(self) -> BatchQueue:
        """The batch queue drained by the worker."""
        return self._queue

    # =========================================================================
    # Telemetry listener (broker thread)
    # =========================================================================

    def handle_state_records(self, records: List[TelemetryRecord]) -> None:
        self._queue.offer(InputBatch(InputDataType.STATE, list(records)))

    def handle_wifi_scan_records(self, records: List[TelemetryRecord]) -> None:
        self._queue.offer(InputBatch(InputDataType.WIFISCAN, list(records)))

    # =========================================================================
    # Worker
    # =========================================================================

    async def run(self) -> None:
        """
        Run the ingestion worker until cancelled.

        Fetches initial data once, then processes batches oldest first.

        Raises:
            asyncio.CancelledError: On cancellation (clean shutdown)
            Exception: Any other failure, after logging it
        """
        if self._state != ModelerState.STARTING:
            raise RuntimeError(f"Modeler cannot be started from state {self._state.value}")

        self._queue.bind()
        try:
            self._state = ModelerState.FETCHING_INITIAL
            logger.info("Fetching initial data...")
            await asyncio.to_thread(self.fetch_initial_data)

            self._state = ModelerState.RUNNING
            logger.info("Modeler awaiting data...")
            while True:
                batch = await self._queue.get()
                self.process_batch(batch)
        except asyncio.CancelledError:
            logger.info("Modeler cancelled, shutting down")
            raise
        except Exception:
            logger.exception("Modeler worker failed")
            raise
        finally:
            self._state = ModelerState.TERMINATED
            logger.info("Modeler terminated")

    def fetch_initial_data(self) -> None:
        """Install the latest stored state of every RRM-enabled device."""
        if self.client is None:
            logger.warning("No gateway client configured, skipping initial data")
            return

        devices = self.client.list_devices()
        logger.debug(f"Received device list of size = {len(devices)}")

        for serial_number in devices:
            if not self._is_rrm_enabled(serial_number):
                logger.debug(f"Skipping data for non-RRM-enabled device {serial_number}")
                continue
            try:
                self._fetch_initial_state(serial_number)
            except Exception:
                logger.exception(f"Device {serial_number}: failed to fetch initial state")

    def _fetch_initial_state(self, serial_number: str) -> None:
        payload = self.client.latest_telemetry(
            serial_number, self.params.initial_telemetry_count
        )
        if payload is None:
            return

        try:
            records = StatisticsRecords.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Device {serial_number}: invalid statistics records: {e}")
            return
        if len(records.data) != 1 or records.data[0].data is None:
            logger.debug(
                f"Device {serial_number}: expected one statistics record, "
                f"got {len(records.data)}, skipping"
            )
            return

        state = records.data[0].data
        try:
            self.data_model.put_state(serial_number, DeviceState.model_validate(state))
        except ValidationError as e:
            logger.error(f"Device {serial_number}: failed to deserialize state: {e}")
            return
        self.metrics.initial_states += 1
        logger.debug(f"Device {serial_number}: added initial state from gateway")

    def process_batch(self, batch: InputBatch) -> None:
        """
        Apply one batch to the data model.

        Records of non-RRM-enabled devices are dropped first.
        """
        record_count = len(batch.records)
        records = [r for r in batch.records if self._is_rrm_enabled(r.serial_number)]
        dropped = record_count - len(records)
        if dropped:
            self.metrics.records_dropped += dropped
            logger.debug(f"Dropping {dropped} record(s) for non-RRM-enabled devices")

        if batch.type == InputDataType.STATE:
            for record in records:
                self._process_state_record(record)
        elif batch.type == InputDataType.WIFISCAN:
            for record in records:
                self._process_wifi_scan_record(record)

        self.metrics.batches_processed += 1

    def _process_state_record(self, record: TelemetryRecord) -> None:
        state = record.payload.get("state") if isinstance(record.payload, dict) else None
        if not isinstance(state, dict):
            logger.debug(f"Device {record.serial_number}: state record has no state, skipping")
            return

        try:
            state_model = DeviceState.model_validate(state)
        except ValidationError as e:
            self.metrics.parse_errors += 1
            logger.error(f"Device {record.serial_number}: failed to deserialize state: {e}")
            return

        self.data_model.put_state(record.serial_number, state_model)
        self.metrics.state_updates += 1
        logger.debug(f"Device {record.serial_number}: received state update")

    def _process_wifi_scan_record(self, record: TelemetryRecord) -> None:
        try:
            entries = parse_wifi_scan_entries(record.payload)
        except ValidationError as e:
            self.metrics.parse_errors += 1
            logger.error(f"Device {record.serial_number}: failed to parse wifi scan: {e}")
            return

        self.data_model.append_wifi_scan(record.serial_number, entries)
        self.metrics.wifiscan_updates += 1
        logger.debug(f"Device {record.serial_number}: received wifi scan result")

    # =========================================================================
    # Capability and config hooks (caller's thread)
    # =========================================================================

    def process_device_capabilities(
        self, serial_number: str, capabilities: Dict[str, Any]
    ) -> None:
        """Replace the stored wifi capabilities of a device."""
        if not self._is_known(serial_number):
            logger.debug(f"Ignoring capabilities of unknown device {serial_number}")
            return
        try:
            wifi = DeviceCapabilities.model_validate(capabilities).wifi
        except ValidationError as e:
            logger.error(f"Device {serial_number}: invalid capabilities: {e}")
            return
        if wifi is None:
            logger.debug(f"Device {serial_number}: capabilities have no wifi block")
            return

        previous = self.data_model.put_capabilities(serial_number, wifi)
        if previous != wifi:
            logger.debug(f"Device {serial_number}: capabilities updated")

    def process_device_config(self, serial_number: str, config: Dict[str, Any]) -> bool:
        """
        Store the radio list of a device's new configuration.

        Logs only when the set of configured bands changed.

        Returns:
            False; the modeler never asks for further propagation.
        """
        if not self._is_known(serial_number):
            logger.debug(f"Ignoring config of unknown device {serial_number}")
            return False
        try:
            ap_config = ApConfiguration.model_validate(config)
        except ValidationError as e:
            logger.error(f"Device {serial_number}: invalid configuration: {e}")
            return False

        new_radios = ap_config.radio_config_list()
        old_radios = self.data_model.put_device_status(serial_number, new_radios)

        new_bands = radio_bands(new_radios)
        old_bands = radio_bands(old_radios)
        if new_bands != old_bands:
            logger.info(
                f"Device {serial_number}: the new radios list is: "
                f"{sorted(new_bands)} (was {sorted(old_bands)})."
            )
        return False

    # =========================================================================
    # Data model access
    # =========================================================================

    def get_data_model(self) -> DataModel:
        """Return the live data model (direct reference)."""
        return self.data_model

    def get_data_model_copy(self) -> DataModel:
        """Return an independent deep copy of the data model."""
        return self.data_model.snapshot()

    def revalidate(self) -> Dict[str, bool]:
        """
        Remove all non-RRM-enabled devices from the data model.

        Returns:
            Map name -> whether entries were removed from it
        """
        removed = self.data_model.revalidate(self._is_rrm_enabled)
        for name, changed in removed.items():
            if changed:
                logger.debug(f"Removed some {name} entries from data model")
        return removed

    def _is_rrm_enabled(self, serial_number: str) -> bool:
        return self.device_data_manager.is_rrm_enabled(serial_number)

    def _is_known(self, serial_number: str) -> bool:
        return self.device_data_manager.get_device_config(serial_number) is not None
