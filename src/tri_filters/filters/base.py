"""Core ternary filter type and its combinators.

A :class:`TernaryFilter` maps an element to a :class:`Tri`: the element is
accepted, rejected, or not supported by the filter at all. Combinators never
mutate a filter; each returns a new filter that delegates to the one it was
built from, so partial rules can be layered and gaps filled by later stages.

Filters hold no mutable state and may be evaluated from several threads at
once, as long as the elements and any captured element sets are themselves
safe to read concurrently.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Hashable, Iterable, Iterator, Mapping, TypeVar

from ..exceptions import InvalidArgument, UnsupportedElement
from . import bulk
from .tri import Tri

E = TypeVar("E")
K = TypeVar("K")
V = TypeVar("V")

KeyFunc = Callable[[Any], Hashable]

_PREVIEW_SIZE = 5


def describe_callable(func: Callable[..., Any]) -> str:
    """Return a short human readable name for ``func``."""

    name = getattr(func, "__qualname__", None) or getattr(func, "__name__", None)
    if isinstance(name, str):
        return name
    return repr(func)


def _describe_elements(elements: Iterable[Any]) -> str:
    items = list(elements)
    preview = ", ".join(repr(item) for item in items[:_PREVIEW_SIZE])
    if len(items) > _PREVIEW_SIZE:
        preview += f", ... ({len(items)} total)"
    return "{" + preview + "}"


def _captured_set(elements: Iterable[Any] | None, key: KeyFunc | None, operation: str) -> frozenset:
    if elements is None:
        raise InvalidArgument(f"{operation} requires a collection of elements, got None")
    if key is not None and not callable(key):
        raise InvalidArgument(f"{operation} key must be callable, got {key!r}")
    try:
        if key is None:
            return frozenset(elements)
        return frozenset(key(element) for element in elements)
    except TypeError as exc:
        raise InvalidArgument(
            f"{operation} requires an iterable of hashable elements; pass key= for unhashable types"
        ) from exc


def _is_member(captured: frozenset, candidate: Any) -> bool:
    try:
        return candidate in captured
    except TypeError:
        # Unhashable inputs cannot belong to a set of hashable elements.
        return False


class TernaryFilter(Generic[E]):
    """A three-valued membership test over elements of type ``E``.

    ``func`` receives an element and returns a :class:`Tri`, or ``True`` /
    ``False`` / ``None`` which are read as accept / reject / unsupported.
    ``description`` names how the filter was built and shows up in ``repr``
    and in :class:`~tri_filters.exceptions.UnsupportedElement` messages.
    """

    __slots__ = ("_func", "_description", "_normalized")

    def __init__(self, func: Callable[[E], Tri | bool | None], description: str | None = None) -> None:
        if func is None or not callable(func):
            raise InvalidArgument(f"A filter requires a callable, got {func!r}")
        object.__setattr__(self, "_func", func)
        object.__setattr__(self, "_description", description or describe_callable(func))
        object.__setattr__(self, "_normalized", False)

    @classmethod
    def _derived(cls, func: Callable[[E], Tri], description: str) -> "TernaryFilter[E]":
        # func already returns Tri members, evaluation skips normalization.
        derived = cls(func, description)
        object.__setattr__(derived, "_normalized", True)
        return derived

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} instances are immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} instances are immutable")

    def __repr__(self) -> str:
        return f"TernaryFilter({self._description})"

    @property
    def description(self) -> str:
        return self._description

    def evaluate(self, element: E) -> Tri:
        if self._normalized:
            return self._func(element)
        return Tri.of(self._func(element))

    def _step(self) -> Callable[[E], Tri]:
        """Return the cheapest callable producing this filter's results, used by combinators."""

        if self._normalized:
            return self._func
        return self.evaluate

    __call__ = evaluate

    # -- combinators -----------------------------------------------------

    def reverse(self) -> "TernaryFilter[E]":
        """Swap accepted and rejected elements, keeping unsupported ones unsupported."""

        evaluate = self._step()

        def _reversed(element: E) -> Tri:
            return evaluate(element).reversed()

        return TernaryFilter._derived(_reversed, f"{self._description}.reverse()")

    def _force_equal(self, target: E, forced: Tri, operation: str) -> "TernaryFilter[E]":
        evaluate = self._step()

        def _forced(element: E) -> Tri:
            if element == target:
                return forced
            return evaluate(element)

        return TernaryFilter._derived(_forced, f"{self._description}.{operation}({target!r})")

    def _force_members(
        self,
        elements: Iterable[E] | None,
        forced: Tri,
        operation: str,
        single: Callable[[E], "TernaryFilter[E]"],
        key: KeyFunc | None,
    ) -> "TernaryFilter[E]":
        captured = _captured_set(elements, key, operation)
        if not captured:
            return self
        if len(captured) == 1 and key is None:
            return single(next(iter(captured)))
        evaluate = self._step()

        if key is None:

            def _forced(element: E) -> Tri:
                if _is_member(captured, element):
                    return forced
                return evaluate(element)

        else:

            def _forced(element: E) -> Tri:
                try:
                    candidate = key(element)
                except TypeError:
                    # Inputs the key cannot handle are not members.
                    return evaluate(element)
                if _is_member(captured, candidate):
                    return forced
                return evaluate(element)

        return TernaryFilter._derived(_forced, f"{self._description}.{operation}({_describe_elements(captured)})")

    def plus(self, element: E) -> "TernaryFilter[E]":
        """Accept ``element`` and rely on this filter for everything else."""

        return self._force_equal(element, Tri.ACCEPT, "plus")

    def plus_all(self, elements: Iterable[E], *, key: KeyFunc | None = None) -> "TernaryFilter[E]":
        """Accept every element of ``elements`` and rely on this filter for the others.

        Membership follows the hash/equality contract of the elements, or of
        ``key(element)`` when ``key`` is given. An empty collection returns
        this filter unchanged.
        """

        return self._force_members(elements, Tri.ACCEPT, "plus_all", self.plus, key)

    def minus(self, element: E) -> "TernaryFilter[E]":
        """Reject ``element`` and rely on this filter for everything else."""

        return self._force_equal(element, Tri.REJECT, "minus")

    def minus_all(self, elements: Iterable[E], *, key: KeyFunc | None = None) -> "TernaryFilter[E]":
        return self._force_members(elements, Tri.REJECT, "minus_all", self.minus, key)

    def ignore(self, element: E) -> "TernaryFilter[E]":
        """Stop supporting ``element`` and rely on this filter for everything else."""

        return self._force_equal(element, Tri.UNSUPPORTED, "ignore")

    def ignore_all(self, elements: Iterable[E], *, key: KeyFunc | None = None) -> "TernaryFilter[E]":
        return self._force_members(elements, Tri.UNSUPPORTED, "ignore_all", self.ignore, key)

    def _default_unsupported(self, default: Tri, operation: str) -> "TernaryFilter[E]":
        evaluate = self._step()

        def _defaulted(element: E) -> Tri:
            result = evaluate(element)
            if result.is_decided:
                return result
            return default

        return TernaryFilter._derived(_defaulted, f"{self._description}.{operation}()")

    def plus_not_supported(self) -> "TernaryFilter[E]":
        """Accept every element this filter does not support yet."""

        return self._default_unsupported(Tri.ACCEPT, "plus_not_supported")

    def minus_not_supported(self) -> "TernaryFilter[E]":
        """Reject every element this filter does not support yet."""

        return self._default_unsupported(Tri.REJECT, "minus_not_supported")

    def before(self, other: "TernaryFilter[E] | Callable[[E], Tri | bool | None]") -> "TernaryFilter[E]":
        """Use this filter first and fall back to ``other`` for unsupported elements."""

        fallback = as_filter(other, "before")
        return _prioritized(self, fallback, f"{self._description}.before({fallback._description})")

    def after(self, other: "TernaryFilter[E] | Callable[[E], Tri | bool | None]") -> "TernaryFilter[E]":
        """Use ``other`` first and fall back to this filter for unsupported elements."""

        preferred = as_filter(other, "after")
        return _prioritized(preferred, self, f"{self._description}.after({preferred._description})")

    # -- strict boundary ---------------------------------------------------

    def to_predicate(self) -> Callable[[E], bool]:
        """Return a two-valued test raising ``UnsupportedElement`` where this filter cannot decide."""

        evaluate = self._step()
        description = self._description

        def _predicate(element: E) -> bool:
            decided = evaluate(element).to_bool()
            if decided is None:
                raise UnsupportedElement(element, description)
            return decided

        return _predicate

    def apply_to_sequence(self, elements: Iterable[E]) -> list[E]:
        return bulk.apply_to_sequence(self, elements)

    def apply_to_mapping_keys(self, mapping: Mapping[K, V]) -> dict[K, V]:
        return bulk.apply_to_mapping_keys(self, mapping)

    def apply_to_mapping_values(self, mapping: Mapping[K, V]) -> dict[K, V]:
        return bulk.apply_to_mapping_values(self, mapping)

    def apply_to_iterable(self, elements: Iterable[E]) -> Iterator[E]:
        return bulk.apply_to_iterable(self, elements)


def as_filter(candidate: Any, operation: str = "filter") -> TernaryFilter[Any]:
    """Return ``candidate`` as a :class:`TernaryFilter`, wrapping plain callables."""

    if isinstance(candidate, TernaryFilter):
        return candidate
    if candidate is None or not callable(candidate):
        raise InvalidArgument(f"{operation} requires a filter or callable, got {candidate!r}")
    return TernaryFilter(candidate)


def _prioritized(first: TernaryFilter[E], second: TernaryFilter[E], description: str) -> TernaryFilter[E]:
    evaluate_first = first._step()
    evaluate_second = second._step()

    def _first_decided(element: E) -> Tri:
        result = evaluate_first(element)
        if result.is_decided:
            return result
        return evaluate_second(element)

    return TernaryFilter._derived(_first_decided, description)


__all__ = ["TernaryFilter", "as_filter", "describe_callable"]
