"""Tests for mapsketch.utils.logging module."""

from __future__ import annotations

from structlog.contextvars import (
    bind_contextvars,
    get_contextvars,
    merge_contextvars,
    unbind_contextvars,
)

from mapsketch.utils.logging import (
    clear_correlation_context,
    configure_logging,
    get_logger,
    set_correlation_context,
)


def _merged() -> dict[str, object]:
    """Return what the contextvars processor adds to an empty event."""
    return dict(merge_contextvars(None, "info", {}))  # type: ignore[arg-type]


def test_configure_logging_default_settings_do_not_error() -> None:
    configure_logging()


def test_configure_logging_json_does_not_error() -> None:
    configure_logging(level="INFO", log_format="json")


def test_get_logger_returns_logger_proxy() -> None:
    configure_logging(level="DEBUG", log_format="console")
    logger = get_logger("test.module")
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")


def test_correlation_ids_are_bound() -> None:
    set_correlation_context(session_id="abc123", mode="polygon")
    assert _merged() == {"session_id": "abc123", "mode": "polygon"}


def test_correlation_ids_omitted_when_unset() -> None:
    clear_correlation_context()
    assert _merged() == {}


def test_partial_update_keeps_other_ids() -> None:
    set_correlation_context(session_id="abc123", mode="circle")
    set_correlation_context(mode="rectangle")
    assert _merged() == {"session_id": "abc123", "mode": "rectangle"}


def test_clear_leaves_unrelated_context() -> None:
    set_correlation_context(session_id="abc123", mode="circle")
    bind_contextvars(request="r1")
    clear_correlation_context()
    assert get_contextvars() == {"request": "r1"}
    unbind_contextvars("request")


def test_machine_sets_session_context() -> None:
    from mapsketch.drawing.machine import DrawingStateMachine  # noqa: PLC0415
    from mapsketch.geometry.primitives import LngLat  # noqa: PLC0415
    from mapsketch.store.features import FeatureStore, FeatureType  # noqa: PLC0415

    machine = DrawingStateMachine(FeatureStore())
    machine.select_mode(FeatureType.POLYGON)
    machine.click(LngLat(lng=0, lat=0))
    assert machine.session is not None
    assert _merged() == {"session_id": machine.session.session_id, "mode": "polygon"}

    machine.cancel()
    assert _merged() == {"mode": "polygon"}
