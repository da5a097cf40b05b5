"""Configuration helpers for tri-filters."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping

from .exceptions import InvalidArgument

LOGGER = logging.getLogger(__name__)

ENV_PREFIX = "TRI_FILTERS_"

DEFAULTS: Mapping[str, Any] = {
    "description_limit": 200,
    "log_kept_elements": False,
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass(slots=True)
class FilterConfig:
    """Simple configuration container for diagnostics of filters."""

    raw: Mapping[str, Any]

    @property
    def description_limit(self) -> int:
        """Maximum length of a filter description in error messages, ``<= 0`` for no limit."""

        return _as_int("description_limit", self.raw.get("description_limit", DEFAULTS["description_limit"]))

    @property
    def log_kept_elements(self) -> bool:
        return _as_bool("log_kept_elements", self.raw.get("log_kept_elements", DEFAULTS["log_kept_elements"]))


def _as_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidArgument(f"Configuration value {name} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidArgument(f"Configuration value {name} must be an integer, got {value!r}") from exc


def _as_bool(name: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise InvalidArgument(f"Configuration value {name} must be a boolean, got {value!r}")


def _from_environ(environ: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for name in DEFAULTS:
        env_name = f"{ENV_PREFIX}{name.upper()}"
        if env_name in environ:
            values[name] = environ[env_name]
    return values


def load_config(
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> FilterConfig:
    """Load configuration from defaults, the environment and ``overrides``.

    Environment variables are named after the option with the
    ``TRI_FILTERS_`` prefix, e.g. ``TRI_FILTERS_DESCRIPTION_LIMIT``. Explicit
    ``overrides`` win over the environment. Values are validated eagerly so a
    bad setting fails here rather than while reporting another error.
    """

    if environ is None:
        environ = os.environ
    if overrides is None:
        overrides = {}
    unknown = sorted(set(overrides) - set(DEFAULTS))
    if unknown:
        raise InvalidArgument(f"Unknown configuration keys: {', '.join(unknown)}")
    raw: MutableMapping[str, Any] = dict(DEFAULTS)
    raw.update(_from_environ(environ))
    raw.update(overrides)
    return _validated(FilterConfig(raw=raw))


def _validated(config: FilterConfig) -> FilterConfig:
    # Touch every property so invalid values surface now.
    config.description_limit
    config.log_kept_elements
    return config


_active: FilterConfig | None = None


def get_config() -> FilterConfig:
    """Return the active configuration, loading it from the environment on first use.

    This runs while errors are reported and elements filtered, so an invalid
    environment falls back to the defaults with a warning instead of raising.
    """

    global _active
    if _active is None:
        try:
            _active = load_config()
        except InvalidArgument as exc:
            LOGGER.warning("Ignoring invalid tri-filters environment configuration: %s", exc)
            _active = load_config(environ={})
    return _active


def set_config(config: FilterConfig | None) -> None:
    """Replace the active configuration; ``None`` reloads it lazily from the environment."""

    global _active
    if config is not None and not isinstance(config, FilterConfig):
        raise InvalidArgument(f"Expected a FilterConfig, got {type(config).__name__}")
    _active = config if config is None else _validated(config)


__all__ = ["FilterConfig", "load_config", "get_config", "set_config"]
