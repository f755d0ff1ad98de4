"""Speech I/O adapters.

The host environment supplies two callback-driven devices (a synthesizer and
a recognizer). ``SpeechOutput`` and ``SpeechInput`` wrap them so that at most
one utterance is in flight and at most one recognition run is active.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional, Protocol
from uuid import uuid4

from studydeck.config import SpeechSettings
from studydeck.logging import get_logger
from studydeck.phrases import RECOGNITION_ERRORS
from studydeck.schemas import SpeechFeedback

logger = get_logger(__name__)


def _noop(*_args: Any) -> None:
    return None


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Timers on the running event loop."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)


@dataclass
class Utterance:
    text: str
    rate: float = 0.9
    pitch: float = 1.0
    volume: float = 1.0
    language: str = "en-US"
    id: str = field(default_factory=lambda: uuid4().hex[:8])
    on_start: Callable[[], None] = field(default=_noop, repr=False)
    on_end: Callable[[], None] = field(default=_noop, repr=False)
    on_error: Callable[[str], None] = field(default=_noop, repr=False)


class SpeechSynthesizer(Protocol):
    def speak(self, utterance: Utterance) -> None: ...

    def cancel(self) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...


class SpeechRecognizer(Protocol):
    language: str
    continuous: bool
    interim_results: bool
    max_alternatives: int

    on_start: Optional[Callable[[], None]]
    on_result: Optional[Callable[[str, float, bool], None]]
    on_error: Optional[Callable[[str], None]]
    on_end: Optional[Callable[[], None]]

    def start(self) -> None: ...

    def stop(self) -> None: ...


DoneCallback = Callable[[bool], None]


class SpeechOutput:
    """Serial utterance queue.

    An immediate utterance cancels whatever is in flight and clears the queue.
    A non-immediate one waits until the current utterance has finished.
    """

    def __init__(
        self,
        synthesizer: SpeechSynthesizer | None,
        scheduler: Scheduler,
        config: SpeechSettings | None = None,
    ) -> None:
        self.synthesizer = synthesizer
        self.scheduler = scheduler
        self.config = config or SpeechSettings()
        self.is_speaking = False
        self._current: Utterance | None = None
        self._current_done: DoneCallback | None = None
        self._queue: list[tuple[str, DoneCallback | None]] = []
        self._gap: TimerHandle | None = None
        self._speaking_listener: Callable[[bool], None] = _noop

    def set_speaking_listener(self, listener: Callable[[bool], None]) -> None:
        self._speaking_listener = listener

    def set_config(self, **changes: Any) -> None:
        self.config = replace(self.config, **changes)
        logger.debug("Speech config updated: %s", self.config)

    def is_supported(self) -> bool:
        return self.synthesizer is not None

    def is_busy(self) -> bool:
        return self._current is not None or self._gap is not None or bool(self._queue)

    @property
    def queue_length(self) -> int:
        return len(self._queue)

    def speak(self, text: str, immediate: bool = False, on_done: DoneCallback | None = None) -> SpeechFeedback:
        if self.synthesizer is None:
            return SpeechFeedback(success=False, error="Speech synthesis not supported")

        if immediate:
            self.stop()
        elif self.is_busy():
            self._queue.append((text, on_done))
            return SpeechFeedback(success=True, message="Text queued for speech")

        return self._dispatch(text, on_done)

    def _dispatch(self, text: str, on_done: DoneCallback | None) -> SpeechFeedback:
        synthesizer = self.synthesizer
        if synthesizer is None:
            raise RuntimeError("SpeechOutput has no synthesizer")
        cfg = self.config
        utterance = Utterance(
            text=text,
            rate=cfg.rate,
            pitch=cfg.pitch,
            volume=cfg.volume,
            language=cfg.language,
        )
        utterance.on_start = lambda: self._handle_start(utterance)
        utterance.on_end = lambda: self._handle_finish(utterance, None)
        utterance.on_error = lambda error: self._handle_finish(utterance, error or "unknown")

        self._current = utterance
        self._current_done = on_done
        try:
            synthesizer.speak(utterance)
        except Exception:
            logger.exception("Speech synthesis failed to start")
            self._handle_finish(utterance, "synthesis-failed")
            return SpeechFeedback(success=False, error="Failed to process text for speech")
        return SpeechFeedback(success=True, message="Speech started")

    def _handle_start(self, utterance: Utterance) -> None:
        if utterance is not self._current:
            return
        logger.debug("Started speaking: %s", utterance.text[:50])
        self._set_speaking(True)

    def _handle_finish(self, utterance: Utterance, error: str | None) -> None:
        if utterance is not self._current:
            return
        if error:
            logger.warning("Speech synthesis error: %s", error)
        else:
            logger.debug("Finished speaking")
        done = self._current_done
        self._current = None
        self._current_done = None
        self._set_speaking(False)
        self._schedule_next()
        if done is not None:
            done(error is None)

    def _schedule_next(self) -> None:
        if self._queue and self._gap is None:
            self._gap = self.scheduler.call_later(self.config.queue_gap, self._dispatch_next)

    def _dispatch_next(self) -> None:
        self._gap = None
        if self._current is not None or not self._queue:
            return
        text, on_done = self._queue.pop(0)
        self._dispatch(text, on_done)

    def _set_speaking(self, speaking: bool) -> None:
        if self.is_speaking == speaking:
            return
        self.is_speaking = speaking
        self._speaking_listener(speaking)

    def stop(self) -> None:
        """Cancel the in-flight utterance and drop the queue; no completion callbacks fire."""
        self._queue.clear()
        if self._gap is not None:
            self._gap.cancel()
            self._gap = None
        had_current = self._current is not None
        self._current = None
        self._current_done = None
        if self.synthesizer is not None and (had_current or self.is_speaking):
            self.synthesizer.cancel()
            logger.debug("Speech stopped")
        self._set_speaking(False)

    def pause(self) -> None:
        if self.synthesizer is not None and self.is_speaking:
            self.synthesizer.pause()

    def resume(self) -> None:
        if self.synthesizer is not None:
            self.synthesizer.resume()


class SpeechInput:
    """Guards a single recognizer.

    ``start_listening`` never calls ``start()`` on a recognizer whose previous
    run has not reported ``on_end``; the start is deferred until it does. If
    listening is still wanted when a run ends without a result, it restarts.
    """

    def __init__(
        self,
        recognizer: SpeechRecognizer | None,
        scheduler: Scheduler,
        config: SpeechSettings | None = None,
        restart_delay: float = 1.0,
    ) -> None:
        self.recognizer = recognizer
        self.scheduler = scheduler
        self.config = config or SpeechSettings()
        self.restart_delay = restart_delay
        self.is_listening = False
        self._active = False
        self._wanted = False
        self._restart: TimerHandle | None = None
        self._on_transcript: Callable[[str, float], None] = _noop
        self._on_error: Callable[[str, str], None] = _noop
        self._on_listening_changed: Callable[[bool], None] = _noop

        if recognizer is not None:
            recognizer.language = self.config.language
            recognizer.continuous = self.config.continuous
            recognizer.interim_results = self.config.interim_results
            recognizer.max_alternatives = self.config.max_alternatives
            recognizer.on_start = self._handle_start
            recognizer.on_result = self._handle_result
            recognizer.on_error = self._handle_error
            recognizer.on_end = self._handle_end

    def set_handlers(
        self,
        *,
        on_transcript: Callable[[str, float], None] | None = None,
        on_error: Callable[[str, str], None] | None = None,
        on_listening_changed: Callable[[bool], None] | None = None,
    ) -> None:
        if on_transcript is not None:
            self._on_transcript = on_transcript
        if on_error is not None:
            self._on_error = on_error
        if on_listening_changed is not None:
            self._on_listening_changed = on_listening_changed

    def is_supported(self) -> bool:
        return self.recognizer is not None

    def start_listening(self) -> SpeechFeedback:
        if self.recognizer is None:
            return SpeechFeedback(success=False, error="Speech recognition not supported")
        self._wanted = True
        if self._active:
            return SpeechFeedback(success=True, message="Listening will resume when the current run ends")
        return self._start()

    def _start(self) -> SpeechFeedback:
        recognizer = self.recognizer
        if recognizer is None:
            raise RuntimeError("SpeechInput has no recognizer")
        try:
            recognizer.start()
        except Exception:
            logger.exception("Error starting speech recognition")
            self._wanted = False
            return SpeechFeedback(success=False, error="Failed to start speech recognition")
        self._active = True
        return SpeechFeedback(success=True, message="Listening started")

    def stop_listening(self) -> None:
        self._wanted = False
        if self._restart is not None:
            self._restart.cancel()
            self._restart = None
        if self._active and self.recognizer is not None:
            self.recognizer.stop()
        self._set_listening(False)

    def _handle_start(self) -> None:
        if not self._wanted:
            # stopped before the device caught up
            return
        logger.debug("Speech recognition started")
        self._set_listening(True)

    def _handle_result(self, transcript: str, confidence: float, is_final: bool) -> None:
        if not is_final or not self._wanted:
            return
        text = (transcript or "").lower().strip()
        logger.info("Recognized: %r (confidence %.2f)", text, confidence or 0.0)
        self._on_transcript(text, confidence)

    def _handle_error(self, code: str) -> None:
        if code == "aborted":
            logger.debug("Speech recognition aborted")
            return
        logger.warning("Speech recognition error: %s", code)
        was_wanted = self._wanted
        self._wanted = False
        self._set_listening(False)
        if was_wanted:
            message = RECOGNITION_ERRORS.get(code, f"Speech recognition error: {code}")
            self._on_error(message, code)

    def _handle_end(self) -> None:
        logger.debug("Speech recognition ended")
        self._active = False
        self._set_listening(False)
        if self._wanted and self._restart is None:
            self._restart = self.scheduler.call_later(self.restart_delay, self._restart_if_wanted)

    def _restart_if_wanted(self) -> None:
        self._restart = None
        if self._wanted and not self._active:
            self._start()

    def _set_listening(self, listening: bool) -> None:
        if self.is_listening == listening:
            return
        self.is_listening = listening
        self._on_listening_changed(listening)
