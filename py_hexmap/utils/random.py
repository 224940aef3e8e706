"""
Random number generation utilities.

All generation randomness goes through an AleaPRNG instance created here.
Python's random and NumPy's global random state are never used, so results
depend only on the seed.
"""

import time
from typing import Optional

from ..core.alea_prng import AleaPRNG

MAX_SEED = 2**31 - 1


def new_seed() -> int:
    """
    Produce a fresh positive 31-bit seed from the clock.

    The low bits of the wall clock are mixed with the high resolution
    performance counter so two calls in quick succession still differ.
    """
    seed = time.time_ns() & 0xFFFFFFFF
    seed ^= time.perf_counter_ns() & 0xFFFFFFFF
    return seed & MAX_SEED


def resolve_seed(seed: Optional[int], use_fixed_seed: bool) -> int:
    """Return the seed to generate with: the fixed one, or a new one."""
    if use_fixed_seed and seed is not None:
        return seed & MAX_SEED
    return new_seed()


def create_prng(seed: int) -> AleaPRNG:
    """
    Create the generator used for one generation run.

    Args:
        seed: Integer seed

    Returns:
        AleaPRNG instance
    """
    return AleaPRNG(str(seed))
