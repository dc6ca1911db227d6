"""
Propagation Model
=================

Coverage and interference model used to score tx power combinations.

Given AP positions and tx powers, the model samples a square area on a
1 m grid and derives:

    rx_power[x, y, ap] = tx_power[ap] - PL(distance)
    heat_map[x, y]     = max over APs of rx_power
    sinr[x, y]         = S / (sum of other APs + noise), in dB

Path loss (log-distance, free space at the reference distance):
    PL(d) = 20 * log10(4 * pi * d0 * f / c) + 10 * n * log10(d / d0)

    Distances below d0 are clamped to d0.

Metric (lower is better):
    fraction of points with sinr <= SINR threshold,
    or +inf if fewer than `coverage_threshold` of the points have
    rx power above the RX threshold.
"""

import logging
import math
from typing import Optional, Sequence

import numpy as np

from wifi_rrm.config import PropagationConfig


logger = logging.getLogger(__name__)


SPEED_OF_LIGHT = 299_792_458.0  # m/s


def dbm_to_mw(dbm: np.ndarray) -> np.ndarray:
    return np.power(10.0, dbm / 10.0)


def mw_to_dbm(mw: np.ndarray) -> np.ndarray:
    return 10.0 * np.log10(mw)


class PropagationModel:
    """
    Grid-based received power / SINR model.

    Attributes:
        config: Model constants and thresholds

    Example:
        model = PropagationModel()
        metric = model.evaluate(100, [10.0, 60.0], [10.0, 60.0], [20.0, 15.0])
    """

    def __init__(self, config: Optional[PropagationConfig] = None) -> None:
        self.config = config or PropagationConfig()

        c = self.config
        self._reference_loss_db = 20.0 * math.log10(
            4.0 * math.pi * c.reference_distance_m * c.frequency_ghz * 1e9 / SPEED_OF_LIGHT
        )

    def path_loss(self, distance: np.ndarray) -> np.ndarray:
        """Path loss (dB) at the given distances (m)."""
        c = self.config
        d = np.maximum(distance, c.reference_distance_m)
        return self._reference_loss_db + 10.0 * c.path_loss_exponent * np.log10(
            d / c.reference_distance_m
        )

    def rx_power(
        self,
        sample_space: int,
        ap_loc_x: Sequence[float],
        ap_loc_y: Sequence[float],
        tx_powers: Sequence[float],
    ) -> np.ndarray:
        """
        Received power of every AP at every grid point.

        Args:
            sample_space: Side of the square area in meters
            ap_loc_x: AP x coordinates
            ap_loc_y: AP y coordinates
            tx_powers: AP tx powers (dBm)

        Returns:
            Array of shape (sample_space, sample_space, n_aps) in dBm

        Raises:
            ValueError: On inconsistent inputs
        """
        n_aps = len(tx_powers)
        if len(ap_loc_x) != n_aps or len(ap_loc_y) != n_aps:
            raise ValueError("AP locations and tx powers must have the same length")
        if sample_space < 1:
            raise ValueError("sample_space must be >= 1")

        grid = np.arange(sample_space, dtype=float)
        gx, gy = np.meshgrid(grid, grid, indexing="ij")

        xs = np.asarray(ap_loc_x, dtype=float)
        ys = np.asarray(ap_loc_y, dtype=float)
        distance = np.sqrt(
            (gx[:, :, None] - xs[None, None, :]) ** 2
            + (gy[:, :, None] - ys[None, None, :]) ** 2
        )
        return np.asarray(tx_powers, dtype=float)[None, None, :] - self.path_loss(distance)

    @staticmethod
    def heat_map(rx_power: np.ndarray) -> np.ndarray:
        """Strongest received power at every grid point (dBm)."""
        return rx_power.max(axis=2)

    def sinr(self, rx_power: np.ndarray) -> np.ndarray:
        """SINR (dB) of the strongest AP at every grid point."""
        rx_mw = dbm_to_mw(rx_power)
        signal = rx_mw.max(axis=2)
        interference = rx_mw.sum(axis=2) - signal
        noise = dbm_to_mw(np.float64(self.config.noise_dbm))
        return mw_to_dbm(signal) - mw_to_dbm(interference + noise)

    def tpc_metric(self, heat_map: np.ndarray, sinr: np.ndarray) -> float:
        """
        Score a coverage / SINR field pair (lower is better).

        Returns:
            Fraction of interfered points, or inf if coverage is insufficient
        """
        c = self.config
        total = heat_map.size
        uncovered = np.count_nonzero(heat_map <= c.rx_threshold_dbm) / total
        if uncovered > 1.0 - c.coverage_threshold:
            return math.inf
        return float(np.count_nonzero(sinr <= c.sinr_threshold_db) / total)

    def evaluate(
        self,
        sample_space: int,
        ap_loc_x: Sequence[float],
        ap_loc_y: Sequence[float],
        tx_powers: Sequence[float],
    ) -> float:
        """Compute the metric of one tx power combination."""
        rx = self.rx_power(sample_space, ap_loc_x, ap_loc_y, tx_powers)
        return self.tpc_metric(self.heat_map(rx), self.sinr(rx))
