from __future__ import annotations

import pickle

import pytest

from tri_filters.config import FilterConfig, get_config, load_config, set_config
from tri_filters.exceptions import InvalidArgument, TriFilterError, UnsupportedElement
from tri_filters.filters import accepts_none, supports_none


@pytest.fixture(autouse=True)
def _reset_config():
    set_config(None)
    yield
    set_config(None)


def test_load_config_defaults() -> None:
    config = load_config(environ={})
    assert config.description_limit == 200
    assert config.log_kept_elements is False


def test_load_config_reads_environment() -> None:
    config = load_config(
        environ={"TRI_FILTERS_DESCRIPTION_LIMIT": "40", "TRI_FILTERS_LOG_KEPT_ELEMENTS": "yes"}
    )
    assert config.description_limit == 40
    assert config.log_kept_elements is True


def test_overrides_win_over_environment() -> None:
    config = load_config({"description_limit": 10}, environ={"TRI_FILTERS_DESCRIPTION_LIMIT": "40"})
    assert config.description_limit == 10


@pytest.mark.parametrize(
    "overrides",
    [{"description_limit": "many"}, {"description_limit": True}, {"log_kept_elements": "perhaps"}, {"unknown": 1}],
)
def test_invalid_configuration_is_rejected(overrides) -> None:
    with pytest.raises(InvalidArgument):
        load_config(overrides, environ={})


def test_get_config_loads_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRI_FILTERS_DESCRIPTION_LIMIT", "0")
    assert get_config().description_limit == 0


def test_set_config_requires_a_config() -> None:
    with pytest.raises(InvalidArgument):
        set_config({"description_limit": 3})  # type: ignore[arg-type]


def test_unsupported_element_message_truncates_description() -> None:
    set_config(FilterConfig(raw={"description_limit": 12}))
    error = UnsupportedElement(7, "supports_none().plus(1).plus(2)")
    assert str(error) == "Element 7 is not supported by filter supports_..."
    assert error.description == "supports_none().plus(1).plus(2)"


def test_unsupported_element_message_without_limit() -> None:
    set_config(FilterConfig(raw={"description_limit": 0}))
    description = "supports_none()" + ".plus(1)" * 100
    assert description in str(UnsupportedElement(7, description))


def test_exception_hierarchy() -> None:
    assert issubclass(InvalidArgument, ValueError)
    assert issubclass(UnsupportedElement, LookupError)
    assert issubclass(InvalidArgument, TriFilterError)
    assert issubclass(UnsupportedElement, TriFilterError)


def test_unsupported_element_survives_pickling() -> None:
    error = pickle.loads(pickle.dumps(UnsupportedElement("x", "supports_none()", 3)))
    assert (error.element, error.description, error.position) == ("x", "supports_none()", 3)


def test_set_config_validates_raw_values() -> None:
    with pytest.raises(InvalidArgument):
        set_config(FilterConfig(raw={"description_limit": "abc"}))


def test_invalid_description_limit_in_environment_keeps_unsupported_error(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    monkeypatch.setenv("TRI_FILTERS_DESCRIPTION_LIMIT", "abc")
    predicate = supports_none().to_predicate()
    with caplog.at_level("WARNING", logger="tri_filters.config"):
        with pytest.raises(UnsupportedElement):
            predicate(1)
    assert "Ignoring invalid tri-filters environment configuration" in caplog.text
    assert get_config().description_limit == 200


def test_invalid_log_flag_in_environment_does_not_break_filtering(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRI_FILTERS_LOG_KEPT_ELEMENTS", "maybe")
    assert accepts_none().plus(2).apply_to_sequence([1, 2, 3]) == [2]
    assert get_config().log_kept_elements is False
