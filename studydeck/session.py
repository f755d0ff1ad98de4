"""Voice session controller.

Owns one ``VoiceSession`` and drives the listen -> speak -> grade -> advance
loop over it. Everything is callback driven: the controller never blocks, it
reacts to utterance completion, recognition results and timers.

Callbacks scheduled for a session carry that session's epoch; once the
session is stopped or replaced the epoch moves on and late callbacks are
dropped instead of mutating a dead session.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from studydeck import phrases
from studydeck.commands import COMMAND_HELP, match_command
from studydeck.config import Settings, load_settings
from studydeck.grader import validate_answer
from studydeck.logging import get_logger
from studydeck.schemas import SessionPhase, VoiceFlashcard, VoiceResponse, VoiceSessionSnapshot
from studydeck.speech import (
    AsyncioScheduler,
    Scheduler,
    SpeechInput,
    SpeechOutput,
    SpeechRecognizer,
    SpeechSynthesizer,
    TimerHandle,
)
from studydeck.voice_deck import generate_voice_flashcards

logger = get_logger(__name__)

StateChangeHandler = Callable[[VoiceSessionSnapshot], None]
AnswerReceivedHandler = Callable[[str, str, bool], None]
ErrorHandler = Callable[[str], None]


@dataclass
class VoiceSession:
    flashcards: list[VoiceFlashcard]
    current_index: int = 0
    is_listening: bool = False
    is_speaking: bool = False
    user_answers: dict[str, str] = field(default_factory=dict)
    session_start_time: float = field(default_factory=time.time)
    # awaiting_question | grading | awaiting_continue; audio state overrides it in snapshots
    turn: SessionPhase = SessionPhase.awaiting_question

    @property
    def current_card(self) -> VoiceFlashcard:
        return self.flashcards[self.current_index]

    @property
    def is_last(self) -> bool:
        return self.current_index >= len(self.flashcards) - 1

    def phase(self) -> SessionPhase:
        if self.is_speaking:
            return SessionPhase.speaking
        if self.is_listening:
            return SessionPhase.listening
        return self.turn

    def to_snapshot(self, phase: SessionPhase | None = None) -> VoiceSessionSnapshot:
        return VoiceSessionSnapshot(
            flashcards=list(self.flashcards),
            currentIndex=self.current_index,
            isListening=self.is_listening,
            isSpeaking=self.is_speaking,
            userAnswers=dict(self.user_answers),
            sessionStartTime=self.session_start_time,
            phase=phase or self.phase(),
        )


def _no_session() -> VoiceResponse:
    return VoiceResponse(success=False, message="No active session", error="No active session")


class VoiceSessionController:
    def __init__(
        self,
        synthesizer: SpeechSynthesizer | None,
        recognizer: SpeechRecognizer | None,
        *,
        scheduler: Scheduler | None = None,
        settings: Settings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings or load_settings()
        self.scheduler = scheduler or AsyncioScheduler()
        self.output = SpeechOutput(synthesizer, self.scheduler, self.settings.speech)
        self.input = SpeechInput(
            recognizer,
            self.scheduler,
            self.settings.speech,
            restart_delay=self.settings.timings.restart_delay,
        )
        self.output.set_speaking_listener(self._on_speaking_changed)
        self.input.set_handlers(
            on_transcript=self._on_transcript,
            on_error=self._on_recognition_error,
            on_listening_changed=self._on_listening_changed,
        )
        self._clock = clock
        self._session: VoiceSession | None = None
        self._epoch = 0
        self._timers: list[TimerHandle] = []
        self._resume: Optional[Callable[[], VoiceResponse]] = None
        self._on_state_change: StateChangeHandler | None = None
        self._on_answer_received: AnswerReceivedHandler | None = None
        self._on_error: ErrorHandler | None = None

    # Observers ----------------------------------------------------------
    def set_state_change_handler(self, handler: StateChangeHandler) -> None:
        self._on_state_change = handler

    def set_answer_received_handler(self, handler: AnswerReceivedHandler) -> None:
        self._on_answer_received = handler

    def set_error_handler(self, handler: ErrorHandler) -> None:
        self._on_error = handler

    @property
    def current_session(self) -> VoiceSessionSnapshot | None:
        if self._session is None:
            return None
        return self._session.to_snapshot()

    @property
    def phase(self) -> SessionPhase:
        if self._session is None:
            return SessionPhase.idle
        return self._session.phase()

    def is_supported(self) -> bool:
        return self.output.is_supported() and self.input.is_supported()

    def _notify(self, snapshot: VoiceSessionSnapshot | None = None) -> None:
        if self._on_state_change is None:
            return
        if snapshot is None:
            if self._session is None:
                return
            snapshot = self._session.to_snapshot()
        self._on_state_change(snapshot)

    # Scheduling helpers -------------------------------------------------
    def _guarded(self, action: Callable[[], object]) -> Callable[[], None]:
        epoch = self._epoch

        def run() -> None:
            if self._session is None or epoch != self._epoch:
                return
            action()

        return run

    def _schedule(self, delay: float, action: Callable[[], object]) -> None:
        self._timers.append(self.scheduler.call_later(delay, self._guarded(action)))

    def _cancel_timers(self) -> None:
        timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()

    def _say(self, text: str, *, immediate: bool = False, then: Callable[[], object] | None = None) -> None:
        # Never speak over an armed microphone.
        self.input.stop_listening()
        guarded_then = self._guarded(then) if then is not None else None

        def on_done(ok: bool) -> None:
            if guarded_then is not None:
                guarded_then()

        feedback = self.output.speak(text, immediate=immediate, on_done=on_done)
        if not feedback.success:
            logger.warning("Could not speak %r: %s", text[:40], feedback.error)

    def _listen_later(self) -> None:
        self._schedule(self.settings.timings.listen_delay, self._start_listening)

    # Session lifecycle --------------------------------------------------
    def start_session(self, content: str) -> VoiceResponse:
        if not self.is_supported():
            self.output.speak(phrases.UNSUPPORTED, immediate=True)
            return VoiceResponse(success=False, message=phrases.UNSUPPORTED, error="Voice features not supported")

        if self._session is not None:
            self.stop()

        flashcards = generate_voice_flashcards(content)
        self._epoch += 1
        self._session = VoiceSession(flashcards=flashcards, session_start_time=self._clock())
        self._resume = None
        logger.info("Voice session started with %d flashcards", len(flashcards))
        self._notify()

        self._say(phrases.INTRO, immediate=True)
        self._schedule(self.settings.timings.intro_delay, self.ask_current_question)
        return VoiceResponse(
            success=True,
            message="Session started",
            data={"flashcardCount": len(flashcards)},
        )

    def ask_current_question(self) -> VoiceResponse:
        session = self._session
        if session is None:
            return _no_session()
        card = session.current_card
        session.turn = SessionPhase.awaiting_question
        self._resume = None
        self._notify()
        question = card.question.rstrip(" ?.!:")
        self._say(phrases.QUESTION.format(question=question), then=self._listen_later)
        return VoiceResponse(success=True, message="Asking question", data={"flashcardId": card.id})

    def _start_listening(self) -> None:
        session = self._session
        if session is None or self.output.is_busy():
            return
        result = self.input.start_listening()
        if not result.success:
            self._on_recognition_error(result.error or "Speech recognition unavailable", "start-failed")

    def end_session(self) -> VoiceResponse:
        session = self._session
        if session is None:
            return _no_session()
        elapsed = max(0.0, self._clock() - session.session_start_time)
        minutes = int(elapsed // 60)
        count = len(session.flashcards)
        message = phrases.SESSION_ENDED.format(count=count, minutes=minutes)

        self._teardown()
        logger.info("Voice session ended after %d minutes", minutes)
        self.output.speak(message, immediate=True)
        return VoiceResponse(
            success=True,
            message="Session ended",
            data={"flashcardCount": count, "minutes": minutes},
        )

    def stop(self) -> None:
        """Cancel speech and recognition and drop the session, synchronously."""
        self.output.stop()
        self._teardown()

    def _teardown(self) -> None:
        session = self._session
        self._cancel_timers()
        self._resume = None
        self.input.stop_listening()
        if session is None:
            return
        session.is_listening = False
        session.is_speaking = False
        final = session.to_snapshot(phase=SessionPhase.idle)
        self._session = None
        self._epoch += 1
        self._notify(final)

    # Navigation ---------------------------------------------------------
    def next_flashcard(self) -> VoiceResponse:
        session = self._session
        if session is None:
            return _no_session()
        if session.is_last:
            return self.end_session()
        self._move(session, +1, phrases.MOVING_NEXT)
        return VoiceResponse(success=True, message="Moved to next flashcard", data={"currentIndex": session.current_index})

    def previous_flashcard(self) -> VoiceResponse:
        session = self._session
        if session is None:
            return _no_session()
        if session.current_index == 0:
            self._cancel_timers()
            self._say(phrases.FIRST_CARD, immediate=True, then=self._listen_later)
            return VoiceResponse(success=False, message="Already at the first flashcard", data={"currentIndex": 0})
        self._move(session, -1, phrases.MOVING_PREVIOUS)
        return VoiceResponse(success=True, message="Moved to previous flashcard", data={"currentIndex": session.current_index})

    def _move(self, session: VoiceSession, step: int, announcement: str) -> None:
        self._cancel_timers()
        self._resume = None
        session.current_index = max(0, min(session.current_index + step, len(session.flashcards) - 1))
        session.turn = SessionPhase.awaiting_question
        self._notify()
        self._say(announcement, immediate=True)
        self._schedule(self.settings.timings.navigation_delay, self.ask_current_question)

    def continue_session(self) -> VoiceResponse:
        """Resume after a pause (wrong answer or recognition error)."""
        if self._session is None:
            return _no_session()
        action = self._resume or self.ask_current_question
        self._resume = None
        self._cancel_timers()
        return action()

    def speak_help(self) -> VoiceResponse:
        if self._session is None:
            return _no_session()
        text = "Available commands: " + ". ".join(f"{name} to {what}" for name, what in COMMAND_HELP.items()) + "."
        self._say(text, immediate=True, then=self._listen_later)
        return VoiceResponse(success=True, message="Speaking help")

    def speak_progress(self) -> VoiceResponse:
        session = self._session
        if session is None:
            return _no_session()
        current, total = session.current_index + 1, len(session.flashcards)
        self._say(phrases.PROGRESS.format(current=current, total=total), immediate=True, then=self._listen_later)
        return VoiceResponse(success=True, message="Speaking progress", data={"current": current, "total": total})

    def pause_speech(self) -> VoiceResponse:
        if self._session is None:
            return _no_session()
        self.output.pause()
        return VoiceResponse(success=True, message="Speech paused")

    def resume_speech(self) -> VoiceResponse:
        if self._session is None:
            return _no_session()
        self.output.resume()
        return VoiceResponse(success=True, message="Speech resumed")

    # Voice input --------------------------------------------------------
    def process_voice_input(self, transcript: str) -> VoiceResponse:
        session = self._session
        if session is None:
            return _no_session()
        text = (transcript or "").lower().strip()
        if not text:
            self._report_error(phrases.NOTHING_HEARD)
            self._say(phrases.NOTHING_HEARD, immediate=True, then=self._listen_later)
            return VoiceResponse(success=False, message=phrases.NOTHING_HEARD, error="Empty transcript")

        command = match_command(text)
        if command is not None:
            logger.info("Voice command: %s", command)
            return self._run_command(command)
        return self._process_answer(session, text)

    def _run_command(self, command: str) -> VoiceResponse:
        actions: dict[str, Callable[[], VoiceResponse]] = {
            "next": self.next_flashcard,
            "previous": self.previous_flashcard,
            "repeat": self.ask_current_question,
            "stop": self.end_session,
            "help": self.speak_help,
            "progress": self.speak_progress,
        }
        return actions[command]()

    def _process_answer(self, session: VoiceSession, answer: str) -> VoiceResponse:
        card = session.current_card
        session.user_answers[card.id] = answer
        correct = validate_answer(answer, card.answer)
        logger.info("Answer for %s: %r (%s)", card.id, answer, "correct" if correct else "incorrect")
        if self._on_answer_received is not None:
            self._on_answer_received(card.id, answer, correct)

        if correct:
            session.turn = SessionPhase.grading
            self._notify()
            self._say(
                phrases.CORRECT,
                immediate=True,
                then=lambda: self._schedule(self.settings.timings.advance_delay, self.next_flashcard),
            )
        else:
            session.turn = SessionPhase.awaiting_continue
            self._resume = self.next_flashcard
            self._notify()
            self._say(phrases.INCORRECT.format(answer=card.answer), immediate=True)
        return VoiceResponse(
            success=True,
            message="Answer received",
            data={"flashcardId": card.id, "answer": answer, "isCorrect": correct},
        )

    # Device callbacks ---------------------------------------------------
    def _on_transcript(self, transcript: str, confidence: float) -> None:
        session = self._session
        if session is None:
            return
        self.input.stop_listening()
        session.turn = SessionPhase.grading
        self._notify()
        self.process_voice_input(transcript)

    def _on_recognition_error(self, message: str, code: str) -> None:
        session = self._session
        if session is None:
            return
        session.is_listening = False
        session.turn = SessionPhase.awaiting_continue
        self._resume = self.ask_current_question
        self._notify()
        self._report_error(message)
        self._say(f"{message} {phrases.PAUSED_AFTER_ERROR}", immediate=True)

    def _on_listening_changed(self, listening: bool) -> None:
        session = self._session
        if session is None:
            return
        if listening and session.is_speaking:
            self.input.stop_listening()
            return
        session.is_listening = listening
        self._notify()

    def _on_speaking_changed(self, speaking: bool) -> None:
        session = self._session
        if session is None:
            return
        if speaking and session.is_listening:
            self.input.stop_listening()
        session.is_speaking = speaking
        self._notify()

    def _report_error(self, message: str) -> None:
        if self._on_error is not None:
            self._on_error(message)
