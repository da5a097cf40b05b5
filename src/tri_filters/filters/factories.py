"""Constructors for ternary filters."""

from __future__ import annotations

from typing import Any, Callable, Mapping, TypeVar

from ..exceptions import InvalidArgument
from .base import TernaryFilter, as_filter, describe_callable
from .tri import Tri

E = TypeVar("E")

Predicate = Callable[[Any], object]


def _require_callable(func: Any, what: str) -> None:
    if func is None:
        raise InvalidArgument(f"No {what} provided")
    if not callable(func):
        raise InvalidArgument(f"The {what} must be callable, got {func!r}")


def _constant(result: Tri, name: str) -> TernaryFilter[Any]:
    def _filter(_: Any) -> Tri:
        return result

    return TernaryFilter(_filter, f"{name}()")


def accepts_all() -> TernaryFilter[Any]:
    """Return a filter accepting every element, ``None`` included."""

    return _constant(Tri.ACCEPT, "accepts_all")


def accepts_none() -> TernaryFilter[Any]:
    """Return a filter rejecting every element."""

    return _constant(Tri.REJECT, "accepts_none")


def supports_none() -> TernaryFilter[Any]:
    """Return a filter supporting no element, a blank start for layering rules."""

    return _constant(Tri.UNSUPPORTED, "supports_none")


def from_predicate(predicate: Callable[[E], object]) -> TernaryFilter[E]:
    """Wrap a two-valued ``predicate``; the resulting filter always decides."""

    _require_callable(predicate, "predicate")

    def _filter(element: E) -> Tri:
        return Tri.ACCEPT if predicate(element) else Tri.REJECT

    return TernaryFilter(_filter, f"from_predicate({describe_callable(predicate)})")


def from_predicates(
    is_supported: Callable[[E], object],
    is_accepted: Callable[[E], object],
) -> TernaryFilter[E]:
    """Build a filter from a support test and an acceptance test.

    ``is_supported`` runs first; when it fails the element is unsupported and
    ``is_accepted`` is not called at all. Otherwise ``is_accepted`` decides.
    """

    _require_callable(is_supported, "support predicate")
    _require_callable(is_accepted, "acceptance predicate")

    def _filter(element: E) -> Tri:
        if not is_supported(element):
            return Tri.UNSUPPORTED
        return Tri.ACCEPT if is_accepted(element) else Tri.REJECT

    description = f"from_predicates({describe_callable(is_supported)}, {describe_callable(is_accepted)})"
    return TernaryFilter(_filter, description)


def from_mapping(decisions: Mapping[E, Tri | bool | None]) -> TernaryFilter[E]:
    """Return a filter answering from a snapshot of ``decisions``.

    Values may be :class:`Tri` members or ``True`` / ``False`` / ``None``.
    Elements missing from the mapping, or unhashable ones, are unsupported.
    """

    if decisions is None:
        raise InvalidArgument("No decisions mapping provided")
    try:
        snapshot = {element: Tri.of(result) for element, result in decisions.items()}
    except (AttributeError, TypeError) as exc:
        raise InvalidArgument(f"from_mapping expects a mapping of element to result: {exc}") from exc

    def _filter(element: E) -> Tri:
        try:
            return snapshot.get(element, Tri.UNSUPPORTED)
        except TypeError:
            return Tri.UNSUPPORTED

    return TernaryFilter(_filter, f"from_mapping({len(snapshot)} entries)")


def chain(*filters: TernaryFilter[E] | Callable[[E], Tri | bool | None]) -> TernaryFilter[E]:
    """Combine ``filters`` by priority, the first decided answer winning.

    ``chain(a, b, c)`` behaves like ``a.before(b).before(c)``; without any
    filter the result supports nothing.
    """

    if not filters:
        return supports_none()
    members = [as_filter(filt, "chain") for filt in filters]
    combined = members[0]
    for filt in members[1:]:
        combined = combined.before(filt)
    return combined


__all__ = [
    "accepts_all",
    "accepts_none",
    "supports_none",
    "from_predicate",
    "from_predicates",
    "from_mapping",
    "chain",
]
