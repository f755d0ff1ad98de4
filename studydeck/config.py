from __future__ import annotations

import os
from dataclasses import dataclass, field


def _env(name: str, default: str | None = None) -> str | None:
    val = os.environ.get(name)
    if val is None or val.strip() == "":
        return default
    return val


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"Invalid config: {name} must be a number, got {raw!r}.") from None


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"Invalid config: {name} must be an integer, got {raw!r}.") from None


@dataclass(frozen=True)
class SpeechSettings:
    rate: float = 0.9
    pitch: float = 1.0
    volume: float = 1.0
    language: str = "en-US"
    # Recognition is single-shot: one answer per arm.
    continuous: bool = False
    interim_results: bool = False
    max_alternatives: int = 1
    queue_gap: float = 0.5


@dataclass(frozen=True)
class SessionTimings:
    """Delays (seconds) between turns so spoken instructions land before the next action."""

    intro_delay: float = 2.0
    listen_delay: float = 0.5
    advance_delay: float = 1.5
    navigation_delay: float = 1.0
    restart_delay: float = 1.0


@dataclass(frozen=True)
class Settings:
    speech: SpeechSettings = field(default_factory=SpeechSettings)
    timings: SessionTimings = field(default_factory=SessionTimings)
    cache_ttl_seconds: int = 60 * 60
    cache_maxsize: int = 1_000
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8080


def load_settings() -> Settings:
    speech = SpeechSettings(
        rate=_env_float("STUDYDECK_SPEECH_RATE", 0.9),
        pitch=_env_float("STUDYDECK_SPEECH_PITCH", 1.0),
        volume=_env_float("STUDYDECK_SPEECH_VOLUME", 1.0),
        language=_env("STUDYDECK_SPEECH_LANGUAGE", "en-US") or "en-US",
        queue_gap=_env_float("STUDYDECK_QUEUE_GAP", 0.5),
    )
    timings = SessionTimings(
        intro_delay=_env_float("STUDYDECK_INTRO_DELAY", 2.0),
        listen_delay=_env_float("STUDYDECK_LISTEN_DELAY", 0.5),
        advance_delay=_env_float("STUDYDECK_ADVANCE_DELAY", 1.5),
        navigation_delay=_env_float("STUDYDECK_NAVIGATION_DELAY", 1.0),
        restart_delay=_env_float("STUDYDECK_RESTART_DELAY", 1.0),
    )
    return Settings(
        speech=speech,
        timings=timings,
        cache_ttl_seconds=_env_int("STUDYDECK_CACHE_TTL", 60 * 60),
        cache_maxsize=_env_int("STUDYDECK_CACHE_SIZE", 1_000),
        log_level=(_env("LOG_LEVEL", "INFO") or "INFO").upper(),
        host=_env("HOST", "0.0.0.0") or "0.0.0.0",
        port=_env_int("PORT", 8080),
    )
