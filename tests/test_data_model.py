"""
Data Model Tests
================

Tests for the shared per-device telemetry store.
"""

import threading

import pytest

from wifi_rrm.modeler.data_model import DataModel, DeviceMap
from wifi_rrm.models.wifiscan import WifiScanEntry

from conftest import DEVICE_A, DEVICE_B, create_device_status, create_state


def _scan(channel: int):
    return [WifiScanEntry(channel=channel, signal=-70)]


def _fill(model: DataModel, device_id: str) -> None:
    model.put_state(device_id, create_state())
    model.append_wifi_scan(device_id, _scan(1))
    model.put_device_status(device_id, create_device_status("5G", 36))
    model.put_capabilities(device_id, {"2G": {"channels": [1, 6, 11]}})


class TestDeviceMap:
    """Tests for the lock-guarded map."""

    def test_put_returns_previous(self):
        device_map = DeviceMap("test")
        assert device_map.put("a", 1) is None
        assert device_map.put("a", 2) == 1
        assert device_map.get("a") == 2

    def test_remove_if_reports_removal(self):
        device_map = DeviceMap("test")
        device_map.put("a", 1)
        device_map.put("b", 2)

        assert device_map.remove_if(lambda key: key == "a") is True
        assert device_map.remove_if(lambda key: key == "a") is False
        assert "a" not in device_map
        assert "b" in device_map

    def test_items_is_a_copy(self):
        device_map = DeviceMap("test")
        device_map.put("a", 1)
        items = device_map.items()
        items["b"] = 2
        assert "b" not in device_map


class TestDataModel:
    """Tests for the DataModel aggregate."""

    def test_invalid_buffer_size(self):
        with pytest.raises(ValueError):
            DataModel(wifi_scan_buffer_size=0)

    def test_state_replaced_wholesale(self):
        model = DataModel()
        model.put_state(DEVICE_A, create_state(tx_power=10, client_rssis=[-60]))
        model.put_state(DEVICE_A, create_state(tx_power=None))

        state = model.get_state(DEVICE_A)
        assert state.radios[0].tx_power is None
        assert state.client_rssi_list() == []

    def test_wifi_scan_history_evicts_oldest(self):
        model = DataModel(wifi_scan_buffer_size=3)
        for channel in range(1, 6):
            model.append_wifi_scan(DEVICE_A, _scan(channel))

        history = model.get_wifi_scans(DEVICE_A)
        assert [batch[0].channel for batch in history] == [3, 4, 5]

    def test_wifi_scans_of_unknown_device(self):
        assert DataModel().get_wifi_scans(DEVICE_A) == []

    def test_revalidate_removes_disabled_device_everywhere(self):
        model = DataModel()
        _fill(model, DEVICE_A)
        _fill(model, DEVICE_B)
        state_b = model.get_state(DEVICE_B)

        removed = model.revalidate(lambda device_id: device_id != DEVICE_A)

        assert removed == {
            "wifi_scans": True,
            "state": True,
            "device_status": True,
            "capabilities": True,
        }
        assert model.get_state(DEVICE_A) is None
        assert model.get_wifi_scans(DEVICE_A) == []
        assert model.get_device_status(DEVICE_A) is None
        assert model.get_capabilities(DEVICE_A) is None

        assert model.get_state(DEVICE_B) is state_b
        assert len(model.get_wifi_scans(DEVICE_B)) == 1
        assert model.get_device_status(DEVICE_B) == create_device_status("5G", 36)
        assert model.get_capabilities(DEVICE_B) is not None

    def test_revalidate_without_changes(self):
        model = DataModel()
        _fill(model, DEVICE_A)
        removed = model.revalidate(lambda device_id: True)
        assert not any(removed.values())

    def test_snapshot_shares_no_mutable_state(self):
        model = DataModel(wifi_scan_buffer_size=2)
        _fill(model, DEVICE_A)

        copy = model.snapshot()

        # Mutate the live model
        model.get_state(DEVICE_A).radios[0].tx_power = 1
        model.get_device_status(DEVICE_A).append({"band": "2G"})
        model.append_wifi_scan(DEVICE_A, _scan(2))
        model.append_wifi_scan(DEVICE_A, _scan(3))
        model.remove_capabilities(DEVICE_A)

        assert copy.get_state(DEVICE_A).radios[0].tx_power == 20
        assert copy.get_device_status(DEVICE_A) == create_device_status("5G", 36)
        assert [b[0].channel for b in copy.get_wifi_scans(DEVICE_A)] == [1]
        assert copy.get_capabilities(DEVICE_A) is not None

        # The copy keeps the buffer bound
        for channel in range(10):
            copy.append_wifi_scan(DEVICE_A, _scan(channel))
        assert len(copy.get_wifi_scans(DEVICE_A)) == 2

    def test_clear(self):
        model = DataModel()
        _fill(model, DEVICE_A)
        model.clear()
        assert model.states() == {}
        assert model.wifi_scans() == {}
        assert model.device_statuses() == {}
        assert model.capabilities() == {}

    def test_concurrent_writers(self):
        model = DataModel(wifi_scan_buffer_size=1000)

        def writer(device_id: str) -> None:
            for channel in range(200):
                model.append_wifi_scan(device_id, _scan(channel))
                model.put_state(device_id, create_state(channel=channel))

        threads = [
            threading.Thread(target=writer, args=(f"device{i}",)) for i in range(4)
        ]
        for t in threads:
            t.start()
        for _ in range(50):
            model.snapshot()
        for t in threads:
            t.join()

        assert len(model.states()) == 4
        for device_id in model.states():
            assert len(model.get_wifi_scans(device_id)) == 200
