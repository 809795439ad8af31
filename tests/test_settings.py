import pytest

from stream_engine.runtime import settings
from stream_engine.runtime.settings import StreamSettings


def test_defaults_without_environment() -> None:
    loaded = StreamSettings.from_env({})

    assert loaded.default_high_water_mark == 16384
    assert loaded.default_overflow == "advisory"
    assert loaded.contents_chunk_size == 1_000_000


def test_environment_overrides() -> None:
    loaded = StreamSettings.from_env(
        {
            "STREAM_ENGINE_HWM": "512",
            "STREAM_ENGINE_OVERFLOW": "REJECT",
            "STREAM_ENGINE_CHUNK_SIZE": "64",
        }
    )

    assert loaded == StreamSettings(512, "reject", 64)


@pytest.mark.parametrize(
    "environ",
    [
        {"STREAM_ENGINE_HWM": "lots"},
        {"STREAM_ENGINE_HWM": "0"},
        {"STREAM_ENGINE_CHUNK_SIZE": "-1"},
        {"STREAM_ENGINE_OVERFLOW": "block"},
    ],
)
def test_invalid_environment_values(environ) -> None:
    with pytest.raises(ValueError):
        StreamSettings.from_env(environ)


def test_get_settings_reads_process_environment(monkeypatch) -> None:
    monkeypatch.setenv("STREAM_ENGINE_HWM", "2048")

    assert settings.get_settings().default_high_water_mark == 2048


def test_configure_and_reset(monkeypatch) -> None:
    monkeypatch.delenv("STREAM_ENGINE_HWM", raising=False)

    configured = settings.configure(default_high_water_mark=10)

    assert settings.get_settings() is configured
    assert configured.default_high_water_mark == 10

    settings.reset()
    assert settings.get_settings().default_high_water_mark == 16384
