"""Query layer — keyed cache, invalidation and presentation adapters."""

from nadi.query import keys
from nadi.query.cache import QueryCache, QuerySnapshot, QueryStatus
from nadi.query.mutation import MutationObserver, MutationStatus
from nadi.query.observer import QueryObserver

__all__ = [
    "MutationObserver",
    "MutationStatus",
    "QueryCache",
    "QueryObserver",
    "QuerySnapshot",
    "QueryStatus",
    "keys",
]
