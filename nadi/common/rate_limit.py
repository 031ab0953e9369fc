"""Rate limiting configuration using slowapi.

Each application gets its own Limiter so its counters and configured
limits travel with that app; main.py wires it in and hands it to the
routers that need per-endpoint limits.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address


def create_limiter() -> Limiter:
    """A Limiter keyed by client address, with its own in-memory storage."""
    return Limiter(key_func=get_remote_address)
