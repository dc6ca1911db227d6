"""
Listener Registries
===================

Subscriber interfaces for telemetry, capability and configuration updates,
and the registries that fan updates out to named subscribers.

Execution contract:
    Dispatch is synchronous. Every subscriber runs on the thread that
    called the dispatch method (the broker consumer thread, the capability
    poller, the config manager, ...). No event loop or worker thread is
    assumed. Subscribers that need to hand work to another context must do
    so themselves (the modeler enqueues telemetry batches for its worker).
"""

import logging
import threading
from typing import Any, Dict, List, Protocol

from wifi_rrm.modeler.queue import TelemetryRecord


logger = logging.getLogger(__name__)


class TelemetryListener(Protocol):
    """Receives batches of records from the streaming broker."""

    def handle_state_records(self, records: List[TelemetryRecord]) -> None:
        ...

    def handle_wifi_scan_records(self, records: List[TelemetryRecord]) -> None:
        ...


class CapabilityListener(Protocol):
    """Receives a device's capabilities whenever they change."""

    def process_device_capabilities(
        self, serial_number: str, capabilities: Dict[str, Any]
    ) -> None:
        ...


class ConfigListener(Protocol):
    """
    Receives a device's configuration whenever it changes.

    Returns whether the caller should propagate the change further.
    """

    def process_device_config(self, serial_number: str, config: Dict[str, Any]) -> bool:
        ...


class _Registry:
    """Named subscriber list shared by the dispatchers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: Dict[str, Any] = {}

    def _add(self, name: str, listener: Any) -> None:
        with self._lock:
            if name in self._listeners:
                logger.warning(f"Replacing listener '{name}' in {type(self).__name__}")
            self._listeners[name] = listener

    def remove_listener(self, name: str) -> None:
        with self._lock:
            self._listeners.pop(name, None)

    def _snapshot(self) -> List[Any]:
        with self._lock:
            return list(self._listeners.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)


class TelemetryDispatcher(_Registry):
    """Fans broker record batches out to telemetry listeners."""

    def add_telemetry_listener(self, name: str, listener: TelemetryListener) -> None:
        self._add(name, listener)

    def dispatch_state_records(self, records: List[TelemetryRecord]) -> None:
        for listener in self._snapshot():
            # Each listener gets its own list so it may filter in place
            listener.handle_state_records(list(records))

    def dispatch_wifi_scan_records(self, records: List[TelemetryRecord]) -> None:
        for listener in self._snapshot():
            listener.handle_wifi_scan_records(list(records))


class CapabilityDispatcher(_Registry):
    """Fans capability changes out to capability listeners."""

    def add_capability_listener(self, name: str, listener: CapabilityListener) -> None:
        self._add(name, listener)

    def dispatch_capabilities(self, serial_number: str, capabilities: Dict[str, Any]) -> None:
        for listener in self._snapshot():
            listener.process_device_capabilities(serial_number, capabilities)


class ConfigDispatcher(_Registry):
    """Fans configuration changes out to config listeners."""

    def add_config_listener(self, name: str, listener: ConfigListener) -> None:
        self._add(name, listener)

    def dispatch_config(self, serial_number: str, config: Dict[str, Any]) -> bool:
        """
        Notify all config listeners.

        Returns:
            True if any listener asked for the change to be propagated.
        """
        propagate = False
        for listener in self._snapshot():
            if listener.process_device_config(serial_number, config):
                propagate = True
        return propagate
