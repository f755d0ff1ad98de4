from __future__ import annotations

import itertools
from typing import Callable

import pytest

from studydeck.config import Settings
from studydeck.session import VoiceSessionController
from studydeck.speech import Utterance


class ManualTimer:
    def __init__(self, when: float, seq: int, callback: Callable[[], None]) -> None:
        self.when = when
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic stand-in for the event loop's call_later."""

    def __init__(self) -> None:
        self.now = 0.0
        self._timers: list[ManualTimer] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now + delay, next(self._seq), callback)
        self._timers.append(timer)
        return timer

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [t for t in self._timers if not t.cancelled and t.when <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.when, t.seq))
            self._timers.remove(timer)
            self.now = max(self.now, timer.when)
            timer.callback()
        self._timers = [t for t in self._timers if not t.cancelled]
        self.now = target


class FakeSynthesizer:
    def __init__(self) -> None:
        self.spoken: list[Utterance] = []
        self.cancelled = 0
        self.paused = 0
        self.resumed = 0

    def speak(self, utterance: Utterance) -> None:
        self.spoken.append(utterance)

    def cancel(self) -> None:
        self.cancelled += 1

    def pause(self) -> None:
        self.paused += 1

    def resume(self) -> None:
        self.resumed += 1

    @property
    def texts(self) -> list[str]:
        return [u.text for u in self.spoken]

    @property
    def last(self) -> Utterance:
        return self.spoken[-1]

    def finish(self, utterance: Utterance | None = None) -> Utterance:
        utterance = utterance or self.last
        utterance.on_start()
        utterance.on_end()
        return utterance


class FakeRecognizer:
    def __init__(self, *, end_on_stop: bool = True) -> None:
        self.language = ""
        self.continuous = True
        self.interim_results = True
        self.max_alternatives = 0
        self.on_start = None
        self.on_result = None
        self.on_error = None
        self.on_end = None
        self.end_on_stop = end_on_stop
        self.running = False
        self.starts = 0
        self.stops = 0

    def start(self) -> None:
        if self.running:
            raise RuntimeError("recognition has already started")
        self.running = True
        self.starts += 1

    def stop(self) -> None:
        self.stops += 1
        if self.end_on_stop:
            self.fire_end()

    def fire_start(self) -> None:
        self.on_start()

    def fire_result(self, transcript: str, confidence: float = 0.9, is_final: bool = True) -> None:
        self.on_result(transcript, confidence, is_final)

    def fire_error(self, code: str) -> None:
        self.on_error(code)

    def fire_end(self) -> None:
        if self.running:
            self.running = False
            self.on_end()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def synth() -> FakeSynthesizer:
    return FakeSynthesizer()


@pytest.fixture
def recognizer() -> FakeRecognizer:
    return FakeRecognizer()


@pytest.fixture
def controller(synth, recognizer, scheduler) -> VoiceSessionController:
    return VoiceSessionController(
        synth,
        recognizer,
        scheduler=scheduler,
        settings=Settings(),
        clock=lambda: scheduler.now,
    )
