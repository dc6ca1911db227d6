"""
Data Model
==========

Shared, concurrency-safe store of per-device telemetry.

The data model owns four maps keyed by device identifier:
    - state: latest DeviceState report (replaced wholesale)
    - wifi_scans: bounded FIFO history of wifi scan batches
    - device_status: latest radio configuration list (opaque)
    - capabilities: latest wifi capability block (opaque)

Design Rules:
    - Each map is guarded by its own lock; there is no global lock
    - Raw maps are never handed out; readers get shallow copies
    - snapshot() returns a deep copy sharing no mutable state
    - No operation blocks beyond the duration of a single map operation
"""

import copy
import logging
import threading
from collections import deque
from typing import Any, Callable, Deque, Dict, Generic, List, Optional, TypeVar

from wifi_rrm.models.state import DeviceState
from wifi_rrm.models.wifiscan import WifiScanEntry


logger = logging.getLogger(__name__)

V = TypeVar("V")

WifiScanHistory = Deque[List[WifiScanEntry]]


class DeviceMap(Generic[V]):
    """
    Lock-guarded mapping of device identifier to value.

    Every method holds the lock for the duration of one operation only.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._lock = threading.RLock()
        self._data: Dict[str, V] = {}

    def get(self, device_id: str) -> Optional[V]:
        with self._lock:
            return self._data.get(device_id)

    def put(self, device_id: str, value: V) -> Optional[V]:
        """Store a value and return the previous one (or None)."""
        with self._lock:
            previous = self._data.get(device_id)
            self._data[device_id] = value
            return previous

    def update(
        self,
        device_id: str,
        factory: Callable[[], V],
        mutate: Callable[[V], None],
    ) -> None:
        """Mutate a value in place, creating it first if absent."""
        with self._lock:
            if device_id not in self._data:
                self._data[device_id] = factory()
            mutate(self._data[device_id])

    def items_as(self, convert: Callable[[V], Any]) -> Dict[str, Any]:
        """Copy of the current entries with each value converted under the lock."""
        with self._lock:
            return {key: convert(value) for key, value in self._data.items()}

    def get_as(self, device_id: str, convert: Callable[[V], Any], default: Any = None) -> Any:
        with self._lock:
            if device_id not in self._data:
                return default
            return convert(self._data[device_id])

    def remove(self, device_id: str) -> Optional[V]:
        with self._lock:
            return self._data.pop(device_id, None)

    def remove_if(self, predicate: Callable[[str], bool]) -> bool:
        """
        Remove every entry whose key matches the predicate.

        Returns:
            True if at least one entry was removed.
        """
        with self._lock:
            doomed = [key for key in self._data if predicate(key)]
            for key in doomed:
                del self._data[key]
            return bool(doomed)

    def items(self) -> Dict[str, V]:
        """Shallow copy of the current entries."""
        with self._lock:
            return dict(self._data)

    def deep_copy(self) -> Dict[str, V]:
        with self._lock:
            return copy.deepcopy(self._data)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __contains__(self, device_id: object) -> bool:
        with self._lock:
            return device_id in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class DataModel:
    """
    Aggregate of the four per-device telemetry maps.

    Attributes:
        wifi_scan_buffer_size: Maximum scan batches kept per device

    Example:
        model = DataModel(wifi_scan_buffer_size=10)
        model.put_state("aaaaaaaaaaaa", state)
        model.append_wifi_scan("aaaaaaaaaaaa", entries)

        view = model.snapshot()  # safe to iterate while ingestion continues
    """

    def __init__(self, wifi_scan_buffer_size: int = 10) -> None:
        if wifi_scan_buffer_size < 1:
            raise ValueError("wifi_scan_buffer_size must be >= 1")

        self.wifi_scan_buffer_size = wifi_scan_buffer_size
        self._state: DeviceMap[DeviceState] = DeviceMap("state")
        self._wifi_scans: DeviceMap[WifiScanHistory] = DeviceMap("wifi_scans")
        self._device_status: DeviceMap[List[Dict[str, Any]]] = DeviceMap("device_status")
        self._capabilities: DeviceMap[Dict[str, Any]] = DeviceMap("capabilities")

    # -------------------------------------------------------------------------
    # Device state
    # -------------------------------------------------------------------------

    def get_state(self, device_id: str) -> Optional[DeviceState]:
        return self._state.get(device_id)

    def put_state(self, device_id: str, state: DeviceState) -> Optional[DeviceState]:
        return self._state.put(device_id, state)

    def remove_state(self, device_id: str) -> Optional[DeviceState]:
        return self._state.remove(device_id)

    def states(self) -> Dict[str, DeviceState]:
        return self._state.items()

    # -------------------------------------------------------------------------
    # Wifi scans
    # -------------------------------------------------------------------------

    def append_wifi_scan(self, device_id: str, entries: List[WifiScanEntry]) -> None:
        """
        Append a scan batch to a device's history.

        The oldest batch is evicted once the buffer size is reached.
        """
        self._wifi_scans.update(
            device_id,
            lambda: deque(maxlen=self.wifi_scan_buffer_size),
            lambda history: history.append(entries),
        )

    def get_wifi_scans(self, device_id: str) -> List[List[WifiScanEntry]]:
        """Scan batches of a device, oldest first."""
        return self._wifi_scans.get_as(device_id, list, default=[])

    def remove_wifi_scans(self, device_id: str) -> Optional[WifiScanHistory]:
        return self._wifi_scans.remove(device_id)

    def wifi_scans(self) -> Dict[str, List[List[WifiScanEntry]]]:
        return self._wifi_scans.items_as(list)

    # -------------------------------------------------------------------------
    # Device status (radio configuration list)
    # -------------------------------------------------------------------------

    def get_device_status(self, device_id: str) -> Optional[List[Dict[str, Any]]]:
        return self._device_status.get(device_id)

    def put_device_status(
        self, device_id: str, radios: List[Dict[str, Any]]
    ) -> Optional[List[Dict[str, Any]]]:
        return self._device_status.put(device_id, radios)

    def remove_device_status(self, device_id: str) -> Optional[List[Dict[str, Any]]]:
        return self._device_status.remove(device_id)

    def device_statuses(self) -> Dict[str, List[Dict[str, Any]]]:
        return self._device_status.items()

    # -------------------------------------------------------------------------
    # Capabilities
    # -------------------------------------------------------------------------

    def get_capabilities(self, device_id: str) -> Optional[Dict[str, Any]]:
        return self._capabilities.get(device_id)

    def put_capabilities(
        self, device_id: str, capabilities: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        return self._capabilities.put(device_id, capabilities)

    def remove_capabilities(self, device_id: str) -> Optional[Dict[str, Any]]:
        return self._capabilities.remove(device_id)

    def capabilities(self) -> Dict[str, Dict[str, Any]]:
        return self._capabilities.items()

    # -------------------------------------------------------------------------
    # Whole-model operations
    # -------------------------------------------------------------------------

    def revalidate(self, is_enabled: Callable[[str], bool]) -> Dict[str, bool]:
        """
        Remove entries of devices that are no longer enabled.

        Each map is pruned atomically under its own lock.

        Args:
            is_enabled: Predicate telling whether a device is still enabled

        Returns:
            Map name -> whether any entry was removed from that map
        """
        removed: Dict[str, bool] = {}
        for device_map in self._maps():
            removed[device_map.name] = device_map.remove_if(
                lambda device_id: not is_enabled(device_id)
            )
        return removed

    def snapshot(self) -> "DataModel":
        """
        Return an independent deep copy of the data model.

        The copy shares no mutable structure with this instance, so a
        reader can iterate it while writers keep mutating the live model.
        """
        clone = DataModel(self.wifi_scan_buffer_size)
        for source, target in zip(self._maps(), clone._maps()):
            target._data = source.deep_copy()
        return clone

    def clear(self) -> None:
        """Remove every entry from every map."""
        for device_map in self._maps():
            device_map.clear()

    def _maps(self) -> List[DeviceMap]:
        return [self._wifi_scans, self._state, self._device_status, self._capabilities]

    def __repr__(self) -> str:
        return (
            f"DataModel(state={len(self._state)}, "
            f"wifi_scans={len(self._wifi_scans)}, "
            f"device_status={len(self._device_status)}, "
            f"capabilities={len(self._capabilities)})"
        )
