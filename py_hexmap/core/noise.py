"""
Value noise for temperature jitter.

Each channel is an independent smooth field in [0, 1]: random lattices at a
few octaves, bilinearly sampled at every cell and summed with decreasing
weight. Fields are returned flattened in cell index order.
"""

from typing import List

import numpy as np

NOISE_CHANNELS = 4


def _sample_lattice(lattice: np.ndarray, width: int, height: int) -> np.ndarray:
    lattice_height, lattice_width = lattice.shape
    x = np.linspace(0.0, lattice_width - 1, width)
    z = np.linspace(0.0, lattice_height - 1, height)
    x0 = np.floor(x).astype(int)
    z0 = np.floor(z).astype(int)
    x1 = np.minimum(x0 + 1, lattice_width - 1)
    z1 = np.minimum(z0 + 1, lattice_height - 1)
    tx = (x - x0)[None, :]
    tz = (z - z0)[:, None]

    south = lattice[z0[:, None], x0[None, :]] * (1 - tx) + lattice[z0[:, None], x1[None, :]] * tx
    north = lattice[z1[:, None], x0[None, :]] * (1 - tx) + lattice[z1[:, None], x1[None, :]] * tx
    return south * (1 - tz) + north * tz


def value_noise(
    width: int,
    height: int,
    seed: int,
    cell_scale: float = 8.0,
    octaves: int = 3,
    persistence: float = 0.5,
) -> np.ndarray:
    """
    Smooth noise of shape ``(height, width)``.

    Args:
        width: Cells per row
        height: Rows
        seed: Seed for the lattice values
        cell_scale: Cells per lattice step at the first octave
        octaves: Number of lattices summed, each twice as fine as the last
        persistence: Weight factor from one octave to the next

    Returns:
        Float array with values in [0, 1]
    """
    rng = np.random.RandomState(seed)
    field = np.zeros((height, width), dtype=np.float64)
    weight = 1.0
    total_weight = 0.0
    frequency = 1.0 / cell_scale
    for _ in range(octaves):
        lattice = rng.rand(max(2, int(height * frequency) + 2), max(2, int(width * frequency) + 2))
        field += _sample_lattice(lattice, width, height) * weight
        total_weight += weight
        weight *= persistence
        frequency *= 2.0
    return field / total_weight


def noise_channels(width: int, height: int, seed: int) -> List[np.ndarray]:
    """Independent noise fields, one per channel, each flattened to cell index order."""
    return [
        value_noise(width, height, (seed + channel) & 0xFFFFFFFF).ravel()
        for channel in range(NOISE_CHANNELS)
    ]
