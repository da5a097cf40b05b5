"""Errors raised by ternary filters."""

from __future__ import annotations

from typing import Any


class TriFilterError(Exception):
    """Base class for every error raised by tri-filters."""


class InvalidArgument(TriFilterError, ValueError):
    """A factory, combinator or bulk operation received an absent or invalid argument."""


class UnsupportedElement(TriFilterError, LookupError):
    """A decided answer was demanded for an element the filter does not support.

    ``element`` is the offending element, ``description`` the chain of the
    filter that could not decide (when known) and ``position`` the index of the
    element in a lazily filtered stream (``None`` for other operations).
    """

    def __init__(self, element: Any, description: str | None = None, position: int | None = None) -> None:
        self.element = element
        self.description = description
        self.position = position
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        from .config import get_config

        message = f"Element {self.element!r} is not supported"
        if self.position is not None:
            message += f" (stream position {self.position})"
        if self.description:
            message += f" by filter {_truncate(self.description, get_config().description_limit)}"
        return message

    def __reduce__(self):
        return (type(self), (self.element, self.description, self.position))


def _truncate(text: str, limit: int) -> str:
    if limit <= 0 or len(text) <= limit:
        return text
    if limit <= 3:
        return text[:limit]
    return text[: limit - 3] + "..."


__all__ = ["TriFilterError", "InvalidArgument", "UnsupportedElement"]
