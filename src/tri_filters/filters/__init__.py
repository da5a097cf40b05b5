"""Three-valued filters and the algebra to combine them."""

from .base import TernaryFilter, as_filter
from .factories import (
    accepts_all,
    accepts_none,
    chain,
    from_mapping,
    from_predicate,
    from_predicates,
    supports_none,
)
from .tri import Tri

__all__ = [
    "Tri",
    "TernaryFilter",
    "as_filter",
    "accepts_all",
    "accepts_none",
    "supports_none",
    "from_predicate",
    "from_predicates",
    "from_mapping",
    "chain",
]
