"""Three-valued filter results."""

from __future__ import annotations

from enum import Enum


class Tri(Enum):
    """Result of evaluating a ternary filter.

    A flat enumeration: results are not ordered and are never merged, a chain
    of filters simply consults the next one when the current answer is
    ``UNSUPPORTED``.
    """

    ACCEPT = "accept"
    REJECT = "reject"
    UNSUPPORTED = "unsupported"

    @classmethod
    def of(cls, value: "Tri | bool | None") -> "Tri":
        """Normalize ``value``, reading ``None`` as unsupported."""

        if isinstance(value, cls):
            return value
        if value is None:
            return cls.UNSUPPORTED
        if isinstance(value, bool):
            return cls.ACCEPT if value else cls.REJECT
        raise TypeError(f"Cannot interpret {value!r} as a filter result")

    @property
    def is_decided(self) -> bool:
        return self is not Tri.UNSUPPORTED

    def to_bool(self) -> bool | None:
        if self is Tri.UNSUPPORTED:
            return None
        return self is Tri.ACCEPT

    def reversed(self) -> "Tri":
        """Swap ``ACCEPT`` and ``REJECT``; ``UNSUPPORTED`` stays as is."""

        if self is Tri.ACCEPT:
            return Tri.REJECT
        if self is Tri.REJECT:
            return Tri.ACCEPT
        return self


__all__ = ["Tri"]
