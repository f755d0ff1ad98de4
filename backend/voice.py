from __future__ import annotations

from dataclasses import dataclass, field

from backend.relay import EventOutbox, RelayRecognizer, RelaySynthesizer
from backend.schemas import AnswerEvent
from studydeck.config import Settings
from studydeck.schemas import VoiceSessionSnapshot
from studydeck.session import VoiceSessionController
from studydeck.speech import Scheduler


@dataclass
class VoiceHub:
    """The service's single voice session and the relay devices it talks through."""

    outbox: EventOutbox
    synthesizer: RelaySynthesizer
    recognizer: RelayRecognizer
    controller: VoiceSessionController
    answers: list[AnswerEvent] = field(default_factory=list)
    last_snapshot: VoiceSessionSnapshot | None = None

    @classmethod
    def create(cls, settings: Settings, *, scheduler: Scheduler | None = None) -> "VoiceHub":
        outbox = EventOutbox()
        synthesizer = RelaySynthesizer(outbox)
        recognizer = RelayRecognizer(outbox)
        controller = VoiceSessionController(synthesizer, recognizer, scheduler=scheduler, settings=settings)
        hub = cls(outbox=outbox, synthesizer=synthesizer, recognizer=recognizer, controller=controller)
        controller.set_state_change_handler(hub._on_state)
        controller.set_answer_received_handler(hub._on_answer)
        controller.set_error_handler(hub._on_error)
        return hub

    def _on_state(self, snapshot: VoiceSessionSnapshot) -> None:
        self.last_snapshot = snapshot

    def _on_answer(self, question_id: str, user_answer: str, is_correct: bool) -> None:
        self.answers.append(AnswerEvent(questionId=question_id, userAnswer=user_answer, isCorrect=is_correct))

    def _on_error(self, message: str) -> None:
        self.outbox.push("error", message=message)
