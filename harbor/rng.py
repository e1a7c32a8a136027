"""
Deterministic RNG utilities for harbor simulation.

Uses SHA256 hashing to derive stable seeds from hierarchical components
(traffic_seed, entity family, entity index). All randomness uses
numpy.random.Generator(PCG64) for reproducible cross-session results.
"""

import hashlib
import numpy as np
from typing import Any


def make_seed(*components: Any) -> int:
    """
    Generate deterministic 64-bit seed from hierarchical components.

    Args:
        *components: Seed components (traffic_seed, "ships", ship_index, etc.)

    Returns:
        64-bit integer seed for numpy RNG

    Example:
        ship_seed = make_seed(traffic_seed, "ships", index)
    """
    # Join all components with colon separator
    hash_input = ":".join(str(c) for c in components)

    # SHA256 hash and extract 64-bit integer
    hash_bytes = hashlib.sha256(hash_input.encode('utf-8')).digest()
    return int.from_bytes(hash_bytes[:8], byteorder='big')


def make_rng(seed: int) -> np.random.Generator:
    """PCG64 generator for a seed from make_seed()"""
    return np.random.Generator(np.random.PCG64(seed))


def choose(rng: np.random.Generator, options: list):
    """Pick one element of options (any type, no numpy scalar leaks)"""
    return options[int(rng.integers(0, len(options)))]
