"""Audio devices that live on the client.

The controller runs server-side, but speech synthesis and recognition happen
in the user's browser. These relay devices turn controller calls into
commands the client polls from an outbox, and turn the client's reported
device callbacks back into the ``Utterance`` / recognizer callbacks the
controller expects.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Optional

from studydeck.logging import get_logger
from studydeck.speech import Utterance

logger = get_logger(__name__)


class EventOutbox:
    def __init__(self, *, maxlen: int = 500) -> None:
        self._events: deque[dict[str, Any]] = deque(maxlen=maxlen)
        self._seq = 0

    def push(self, event_type: str, **payload: Any) -> dict[str, Any]:
        self._seq += 1
        event = {"seq": self._seq, "type": event_type, **payload}
        self._events.append(event)
        return event

    def drain(self) -> list[dict[str, Any]]:
        events = list(self._events)
        self._events.clear()
        return events

    def __len__(self) -> int:
        return len(self._events)


class RelaySynthesizer:
    def __init__(self, outbox: EventOutbox) -> None:
        self.outbox = outbox
        self._pending: dict[str, Utterance] = {}

    def speak(self, utterance: Utterance) -> None:
        self._pending[utterance.id] = utterance
        self.outbox.push(
            "speak",
            utteranceId=utterance.id,
            text=utterance.text,
            rate=utterance.rate,
            pitch=utterance.pitch,
            volume=utterance.volume,
            language=utterance.language,
        )

    def cancel(self) -> None:
        self._pending.clear()
        self.outbox.push("cancel")

    def pause(self) -> None:
        self.outbox.push("pause")

    def resume(self) -> None:
        self.outbox.push("resume")

    def deliver(self, utterance_id: str, event: str, error: str | None = None) -> bool:
        """Apply a client-reported utterance callback. Unknown ids are ignored."""
        utterance = self._pending.get(utterance_id)
        if utterance is None:
            logger.debug("Ignoring %s for unknown utterance %s", event, utterance_id)
            return False
        if event == "start":
            utterance.on_start()
        elif event == "end":
            self._pending.pop(utterance_id, None)
            utterance.on_end()
        elif event == "error":
            self._pending.pop(utterance_id, None)
            utterance.on_error(error or "unknown")
        else:
            raise ValueError(f"unknown synthesis event: {event}")
        return True


class RelayRecognizer:
    """Recognizer whose runs are performed by the client.

    ``stop()`` is authoritative on the server: the run ends immediately and a
    late ``end`` from the client for that run is ignored.
    """

    def __init__(self, outbox: EventOutbox) -> None:
        self.outbox = outbox
        self.language = "en-US"
        self.continuous = False
        self.interim_results = False
        self.max_alternatives = 1
        self.on_start: Optional[Callable[[], None]] = None
        self.on_result: Optional[Callable[[str, float, bool], None]] = None
        self.on_error: Optional[Callable[[str], None]] = None
        self.on_end: Optional[Callable[[], None]] = None
        self._run = 0
        self._running = False

    @property
    def run_id(self) -> int:
        return self._run

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            raise RuntimeError("recognition has already started")
        self._run += 1
        self._running = True
        self.outbox.push(
            "listen",
            runId=self._run,
            language=self.language,
            continuous=self.continuous,
            interimResults=self.interim_results,
            maxAlternatives=self.max_alternatives,
        )

    def stop(self) -> None:
        if not self._running:
            return
        self.outbox.push("stopListening", runId=self._run)
        self._finish()

    def _finish(self) -> None:
        self._running = False
        if self.on_end is not None:
            self.on_end()

    def deliver(
        self,
        run_id: int,
        event: str,
        *,
        transcript: str = "",
        confidence: float = 0.0,
        is_final: bool = True,
        error: str | None = None,
    ) -> bool:
        if run_id != self._run or not self._running:
            logger.debug("Ignoring %s for stale recognition run %s", event, run_id)
            return False
        if event == "start":
            if self.on_start is not None:
                self.on_start()
        elif event == "result":
            if self.on_result is not None:
                self.on_result(transcript, confidence, is_final)
        elif event == "error":
            if self.on_error is not None:
                self.on_error(error or "unknown")
        elif event == "end":
            self._finish()
        else:
            raise ValueError(f"unknown recognition event: {event}")
        return True
