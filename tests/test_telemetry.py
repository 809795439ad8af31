import pytest

from stream_engine.runtime import telemetry


def test_get_logger_is_cached() -> None:
    assert telemetry.get_logger("streams") is telemetry.get_logger("streams")


def test_configure_rejects_config_and_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="quiet")


def test_unknown_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose")


def test_span_reraises_errors() -> None:
    with pytest.raises(KeyError):
        with telemetry.span("test::span", metadata={"requested": 3}):
            raise KeyError("boom")


def test_record_event_rejects_unknown_level() -> None:
    with pytest.raises(ValueError):
        telemetry.record_event("test.event", level="shout")
