"""
Device Data Manager
===================

Zone topology and per-device RRM configuration lookup.

This is the in-process view of the device configuration store. Persistence
is handled elsewhere; this class only answers lookups and accepts updates.

Thread-safety:
    All methods may be called from any thread. Returned configurations are
    copies, so callers cannot mutate the stored values.
"""

import logging
import threading
from typing import Dict, Iterable, Optional, Set

from wifi_rrm.models.device import DeviceConfig


logger = logging.getLogger(__name__)


class DeviceDataManager:
    """
    Thread-safe store of zone topology and device configurations.

    A device is "known" once it appears in the topology. Devices in the
    topology without an explicit configuration get the default
    DeviceConfig.

    Example:
        manager = DeviceDataManager()
        manager.set_topology({"zone-a": {"aaaaaaaaaaaa", "bbbbbbbbbbbb"}})
        manager.set_device_config("aaaaaaaaaaaa", DeviceConfig(location=[0, 0]))
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._topology: Dict[str, Set[str]] = {}
        self._device_zone: Dict[str, str] = {}
        self._device_configs: Dict[str, DeviceConfig] = {}

    def set_topology(self, topology: Dict[str, Iterable[str]]) -> None:
        """
        Replace the zone topology.

        Args:
            topology: Mapping of zone name to device identifiers

        Raises:
            ValueError: If a device is listed in more than one zone
        """
        device_zone: Dict[str, str] = {}
        zones: Dict[str, Set[str]] = {}
        for zone, devices in topology.items():
            zones[zone] = set(devices)
            for device_id in zones[zone]:
                if device_id in device_zone:
                    raise ValueError(
                        f"Device {device_id} is in multiple zones: "
                        f"{device_zone[device_id]}, {zone}"
                    )
                device_zone[device_id] = zone

        with self._lock:
            self._topology = zones
            self._device_zone = device_zone
        logger.info(f"Topology updated: {len(zones)} zone(s), {len(device_zone)} device(s)")

    def set_device_config(self, device_id: str, config: DeviceConfig) -> None:
        """Set the configuration of a device."""
        with self._lock:
            self._device_configs[device_id] = config.model_copy(deep=True)

    def get_zones(self) -> Set[str]:
        """Return all zone names."""
        with self._lock:
            return set(self._topology)

    def get_device_zone(self, device_id: str) -> Optional[str]:
        """Return the zone of a device, or None if unknown."""
        with self._lock:
            return self._device_zone.get(device_id)

    def get_device_config(self, device_id: str) -> Optional[DeviceConfig]:
        """
        Return the configuration of a device.

        Returns:
            DeviceConfig, or None if the device is not in the topology
        """
        with self._lock:
            if device_id not in self._device_zone:
                return None
            config = self._device_configs.get(device_id)
            return config.model_copy(deep=True) if config else DeviceConfig()

    def get_all_device_configs(self, zone: str) -> Dict[str, DeviceConfig]:
        """Return the configurations of all devices in a zone."""
        with self._lock:
            device_ids = self._topology.get(zone, set())
            return {
                device_id: (
                    self._device_configs[device_id].model_copy(deep=True)
                    if device_id in self._device_configs
                    else DeviceConfig()
                )
                for device_id in sorted(device_ids)
            }

    def is_rrm_enabled(self, device_id: str) -> bool:
        """Return whether the given device is known and has RRM enabled."""
        config = self.get_device_config(device_id)
        if config is None:
            return False
        return config.enable_rrm
