"""Environment-driven defaults for stream construction."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

ENV_PREFIX = "STREAM_ENGINE_"

DEFAULT_HIGH_WATER_MARK = 16384
DEFAULT_OVERFLOW = "advisory"
DEFAULT_CONTENTS_CHUNK_SIZE = 1_000_000

_OVERFLOW_CHOICES = frozenset({"advisory", "reject"})


def _positive_int(name: str, raw: Any) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@dataclass(frozen=True, slots=True)
class StreamSettings:
    """Defaults applied when a stream is built without explicit values."""

    default_high_water_mark: int = DEFAULT_HIGH_WATER_MARK
    default_overflow: str = DEFAULT_OVERFLOW
    contents_chunk_size: int = DEFAULT_CONTENTS_CHUNK_SIZE

    def __post_init__(self) -> None:
        _positive_int("default_high_water_mark", self.default_high_water_mark)
        _positive_int("contents_chunk_size", self.contents_chunk_size)
        if self.default_overflow not in _OVERFLOW_CHOICES:
            raise ValueError(
                f"default_overflow must be one of {sorted(_OVERFLOW_CHOICES)}, "
                f"got {self.default_overflow!r}"
            )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "StreamSettings":
        env = os.environ if environ is None else environ

        def lookup(name: str, default: Any) -> Any:
            return env.get(f"{ENV_PREFIX}{name}", default)

        return cls(
            default_high_water_mark=_positive_int(
                "HWM", lookup("HWM", DEFAULT_HIGH_WATER_MARK)
            ),
            default_overflow=str(lookup("OVERFLOW", DEFAULT_OVERFLOW)).lower(),
            contents_chunk_size=_positive_int(
                "CHUNK_SIZE", lookup("CHUNK_SIZE", DEFAULT_CONTENTS_CHUNK_SIZE)
            ),
        )


_ACTIVE: Optional[StreamSettings] = None


def get_settings() -> StreamSettings:
    global _ACTIVE
    if _ACTIVE is None:
        _ACTIVE = StreamSettings.from_env()
    return _ACTIVE


def configure(settings: Optional[StreamSettings] = None, **overrides: Any) -> StreamSettings:
    """Install ``settings`` (or the current ones) with ``overrides`` applied."""

    global _ACTIVE
    base = settings or get_settings()
    _ACTIVE = replace(base, **overrides) if overrides else base
    return _ACTIVE


def reset() -> None:
    """Forget configured settings; the next lookup re-reads the environment."""

    global _ACTIVE
    _ACTIVE = None


__all__ = [
    "DEFAULT_CONTENTS_CHUNK_SIZE",
    "DEFAULT_HIGH_WATER_MARK",
    "DEFAULT_OVERFLOW",
    "StreamSettings",
    "configure",
    "get_settings",
    "reset",
]
