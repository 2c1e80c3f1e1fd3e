from __future__ import annotations

import os

from fixture_db.errors import RandomnessUnavailable

MIN_ID_BYTES = 8


def generate_id(n_bytes: int = MIN_ID_BYTES) -> str:
    """Return ``n_bytes`` of OS randomness as a lowercase hex string (16 chars by default)."""
    if n_bytes < MIN_ID_BYTES:
        raise ValueError(f"n_bytes must be >= {MIN_ID_BYTES}")
    try:
        buf = os.urandom(n_bytes)
    except (NotImplementedError, OSError) as e:
        raise RandomnessUnavailable(str(e), operation="generate_id") from e
    return buf.hex()
