"""Seed coercion shared by the HTTP API and the CLI."""
import hashlib
import random

SQLITE_MAX_INT = 9223372036854775807


def coerce_seed(payload_seed):
    """Convert provided seed (int or str) into a bounded 64-bit int.

    None or a blank string picks a random seed; digit strings are read as
    integers and anything else is hashed. Raises ValueError for other types.
    """
    if payload_seed is None:
        return random.randint(1, 1_000_000)
    if isinstance(payload_seed, bool):
        raise ValueError("seed must be an integer or string")
    if isinstance(payload_seed, int):
        return payload_seed % SQLITE_MAX_INT
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return random.randint(1, 1_000_000)
        if s.isdigit():
            return int(s) % SQLITE_MAX_INT
        h = hashlib.sha256(s.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big") % SQLITE_MAX_INT
    raise ValueError("seed must be an integer or string")


__all__ = ["coerce_seed", "SQLITE_MAX_INT"]
