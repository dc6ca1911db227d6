"""
Measurement-Based AP-Client TPC
===============================

Assigns tx power from the weakest associated client's RSSI and a fixed
target MCS index.

Formula:
    tx_power = SNR_min(mcs) + current_tx_power - client_rssi + NP + NF - M

    NP = 10 * log10(k * T * B * 1000)   noise power (dBm)
    k  = 1.38e-23                       Boltzmann's constant
    T  = 290 K
    B  = channel width (Hz)
    NF = 6 dB                           noise floor
    M  = 2 dB                           margin

The result is rounded up to an integer. If it exceeds the maximum tx power
the computation is repeated at the next lower MCS; below MCS 0 the minimum
tx power is used. Results under the minimum are raised to the minimum.

Limitations:
    Only the first radio of each device is considered, and the result is
    always reported for the 5G band.
"""

import logging
import math

from wifi_rrm.device_data import DeviceDataManager
from wifi_rrm.models.device import BAND_5G
from wifi_rrm.models.state import DeviceState
from wifi_rrm.modeler.data_model import DataModel
from wifi_rrm.optimizers.base import (
    MAX_TX_POWER,
    MIN_TX_POWER,
    TxPowerMap,
    zone_device_configs,
    zone_device_states,
)


logger = logging.getLogger(__name__)


# Required SNR (dB) per MCS index in 802.11ac
MCS_TO_SNR = (
    5.0,   # MCS 0
    7.5,   # MCS 1
    10.0,  # MCS 2
    12.5,  # MCS 3
    15.0,  # MCS 4
    17.5,  # MCS 5
    20.0,  # MCS 6
    22.5,  # MCS 7
    25.0,  # MCS 8
    27.5,  # MCS 9
)

BOLTZMANN = 1.38e-23
TEMPERATURE_K = 290.0
NOISE_FLOOR_DB = 6.0
MARGIN_DB = 2.0

DEFAULT_CHANNEL_WIDTH_MHZ = 20


def compute_tx_power(
    mcs: int, current_tx_power: int, client_rssi: int, bandwidth_hz: int
) -> float:
    """
    Compute the adjusted tx power (dBm) before rounding.

    Args:
        mcs: MCS index
        current_tx_power: Current tx power (dBm)
        client_rssi: Minimum client RSSI (dBm)
        bandwidth_hz: Channel bandwidth (Hz)
    """
    snr_min = MCS_TO_SNR[mcs]
    noise_power = 10.0 * math.log10(BOLTZMANN * TEMPERATURE_K * bandwidth_hz * 1000.0)
    return snr_min + current_tx_power - client_rssi + noise_power + NOISE_FLOOR_DB - MARGIN_DB


class MeasurementBasedApClientTPC:
    """
    Closed-form TPC driven by client RSSI measurements.

    Attributes:
        zone: Zone whose devices are optimized
        target_mcs: MCS index the weakest client should sustain
        default_tx_power: Tx power for devices without clients
        min_tx_power: Lower tx power bound (dBm)
        max_tx_power: Upper tx power bound (dBm)

    Example:
        tpc = MeasurementBasedApClientTPC(model, "zone-a", device_data_manager)
        tx_power_map = tpc.compute_tx_power_map()
        # {"aaaaaaaaaaaa": {"5G": 17}, ...}
    """

    ALGORITHM_ID = "measure_ap_client"

    DEFAULT_TARGET_MCS = 8
    DEFAULT_TX_POWER = 10

    def __init__(
        self,
        model: DataModel,
        zone: str,
        device_data_manager: DeviceDataManager,
        target_mcs: int = DEFAULT_TARGET_MCS,
        default_tx_power: int = DEFAULT_TX_POWER,
        min_tx_power: int = MIN_TX_POWER,
        max_tx_power: int = MAX_TX_POWER,
    ) -> None:
        """
        Initialize the algorithm.

        Raises:
            ValueError: If target_mcs is outside the MCS table or the
                tx power bounds are inverted or exclude default_tx_power
        """
        if target_mcs < 0 or target_mcs >= len(MCS_TO_SNR):
            raise ValueError(f"Invalid target MCS {target_mcs}")
        if min_tx_power > max_tx_power:
            raise ValueError("min_tx_power must be <= max_tx_power")
        if not min_tx_power <= default_tx_power <= max_tx_power:
            raise ValueError(
                f"default_tx_power {default_tx_power} outside "
                f"[{min_tx_power}, {max_tx_power}]"
            )

        self.model = model
        self.zone = zone
        self.device_configs = zone_device_configs(device_data_manager, zone)
        self.target_mcs = target_mcs
        self.default_tx_power = default_tx_power
        self.min_tx_power = min_tx_power
        self.max_tx_power = max_tx_power

    def compute_tx_power_for_device(
        self, serial_number: str, state: DeviceState, radio_index: int = 0
    ) -> int:
        """Compute the new tx power (dBm) of one device's radio."""
        radio = state.radios[radio_index]
        current_tx_power = radio.tx_power if radio.tx_power is not None else 0
        channel_width_mhz = (
            radio.channel_width
            if radio.channel_width is not None
            else DEFAULT_CHANNEL_WIDTH_MHZ
        )
        bandwidth_hz = channel_width_mhz * 1_000_000

        client_rssi_list = state.client_rssi_list()
        if not client_rssi_list:
            logger.info(
                f"Device {serial_number}: no clients, assigning default tx power "
                f"{self.default_tx_power} (was {current_tx_power})"
            )
            return self.default_tx_power
        client_rssi = min(client_rssi_list)

        new_tx_power = self._fit_tx_power(
            serial_number, current_tx_power, client_rssi, bandwidth_hz
        )
        logger.info(
            f"Device {serial_number}: assigning tx power = {new_tx_power} "
            f"(was {current_tx_power})"
        )
        return new_tx_power

    def _fit_tx_power(
        self,
        serial_number: str,
        current_tx_power: int,
        client_rssi: int,
        bandwidth_hz: int,
    ) -> int:
        mcs = self.target_mcs
        while True:
            computed = compute_tx_power(mcs, current_tx_power, client_rssi, bandwidth_hz)
            # APs only accept integer tx power
            new_tx_power = math.ceil(computed)
            logger.debug(
                f"Device {serial_number}: computed tx power (mcs={mcs}, "
                f"current={current_tx_power}, rssi={client_rssi}, "
                f"bandwidth={bandwidth_hz}) = {computed:.2f}, ceil() = {new_tx_power}"
            )

            if new_tx_power > self.max_tx_power:
                mcs -= 1
                if mcs >= 0:
                    logger.debug(
                        f"Device {serial_number}: computed tx power > maximum "
                        f"{self.max_tx_power}, trying with mcs={mcs}"
                    )
                    continue
                logger.info(
                    f"Device {serial_number}: already at lowest MCS, "
                    f"setting to minimum tx power {self.min_tx_power}"
                )
                return self.min_tx_power

            if new_tx_power < self.min_tx_power:
                logger.debug(
                    f"Device {serial_number}: computed tx power < minimum "
                    f"{self.min_tx_power}, using minimum"
                )
                return self.min_tx_power

            return new_tx_power

    def compute_tx_power_map(self) -> TxPowerMap:
        """
        Compute the tx power of every device in the zone.

        Devices without radios are left out of the result.
        """
        tx_power_map: TxPowerMap = {}

        for serial_number, state in zone_device_states(self.model, self.device_configs).items():
            if not state.radios:
                logger.debug(f"Device {serial_number}: No radios found, skipping...")
                continue

            # TODO: consider every radio, not only the first one
            tx_power = self.compute_tx_power_for_device(serial_number, state, radio_index=0)
            tx_power_map[serial_number] = {BAND_5G: tx_power}

        return tx_power_map
