"""Apply ternary filters to collections and streams.

Eager operations evaluate every element before returning, so an unsupported
element fails the whole call and nothing is produced. The lazy
:func:`apply_to_iterable` fails only when the unsupported element is pulled;
elements yielded before that point stay with the consumer.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Iterator, Mapping, TypeVar

from ..config import get_config
from ..exceptions import InvalidArgument, UnsupportedElement

if TYPE_CHECKING:
    from .base import TernaryFilter

E = TypeVar("E")
K = TypeVar("K")
V = TypeVar("V")

LOGGER = logging.getLogger(__name__)


def _require(data: Any, operation: str) -> None:
    if data is None:
        raise InvalidArgument(f"{operation} requires a collection, got None")


def _decide(filt: "TernaryFilter[Any]", element: Any, position: int | None = None) -> bool:
    decided = filt.evaluate(element).to_bool()
    if decided is None:
        LOGGER.debug("Filter %s does not support %r", filt.description, element)
        raise UnsupportedElement(element, filt.description, position)
    return decided


def _log_kept(kept: list[Any], seen: int, operation: str, filt: "TernaryFilter[Any]") -> None:
    LOGGER.debug("%s kept %d of %d elements with %s", operation, len(kept), seen, filt.description)
    if get_config().log_kept_elements:
        for element in kept:
            LOGGER.debug("  kept %r", element)


def apply_to_sequence(filt: "TernaryFilter[E]", elements: Iterable[E]) -> list[E]:
    """Return the accepted ``elements`` in their original order."""

    _require(elements, "apply_to_sequence")
    kept: list[E] = []
    seen = 0
    for element in elements:
        seen += 1
        if _decide(filt, element):
            kept.append(element)
    _log_kept(kept, seen, "apply_to_sequence", filt)
    return kept


def apply_to_mapping_keys(filt: "TernaryFilter[K]", mapping: Mapping[K, V]) -> dict[K, V]:
    """Return the entries of ``mapping`` whose key is accepted."""

    _require(mapping, "apply_to_mapping_keys")
    kept = {key: value for key, value in mapping.items() if _decide(filt, key)}
    _log_kept(list(kept), len(mapping), "apply_to_mapping_keys", filt)
    return kept


def apply_to_mapping_values(filt: "TernaryFilter[V]", mapping: Mapping[K, V]) -> dict[K, V]:
    """Return the entries of ``mapping`` whose value is accepted."""

    _require(mapping, "apply_to_mapping_values")
    kept = {key: value for key, value in mapping.items() if _decide(filt, value)}
    _log_kept(list(kept.values()), len(mapping), "apply_to_mapping_values", filt)
    return kept


def apply_to_iterable(filt: "TernaryFilter[E]", elements: Iterable[E]) -> Iterator[E]:
    """Lazily yield the accepted ``elements``.

    The source is consumed on demand, one element per pull, and each element
    is evaluated exactly once. The first unsupported element raises
    :class:`~tri_filters.exceptions.UnsupportedElement` from ``next()`` and
    ends the iteration.
    """

    _require(elements, "apply_to_iterable")
    source = iter(elements)

    def _filtered() -> Iterator[E]:
        for position, element in enumerate(source):
            if _decide(filt, element, position):
                yield element

    return _filtered()


__all__ = [
    "apply_to_sequence",
    "apply_to_mapping_keys",
    "apply_to_mapping_values",
    "apply_to_iterable",
]
