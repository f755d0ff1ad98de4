import pytest

from backend.relay import EventOutbox, RelayRecognizer, RelaySynthesizer
from backend.schemas import AnswerEvent
from backend.voice import VoiceHub
from studydeck import phrases
from studydeck.config import Settings
from studydeck.schemas import SessionPhase
from studydeck.speech import Utterance

from samples import DATABASE_TEXT


def test_outbox_sequence_and_drain():
    outbox = EventOutbox()
    outbox.push("speak", text="hi")
    outbox.push("cancel")
    assert len(outbox) == 2
    assert outbox.drain() == [{"seq": 1, "type": "speak", "text": "hi"}, {"seq": 2, "type": "cancel"}]
    assert outbox.drain() == []
    assert outbox.push("pause")["seq"] == 3


def test_synthesizer_delivers_callbacks_once():
    outbox = EventOutbox()
    synthesizer = RelaySynthesizer(outbox)
    calls = []
    utterance = Utterance(text="hello", on_start=lambda: calls.append("start"), on_end=lambda: calls.append("end"))
    synthesizer.speak(utterance)
    event = outbox.drain()[0]
    assert event["utteranceId"] == utterance.id
    assert event["text"] == "hello"

    assert synthesizer.deliver(utterance.id, "start")
    assert synthesizer.deliver(utterance.id, "end")
    assert not synthesizer.deliver(utterance.id, "end")
    assert calls == ["start", "end"]


def test_cancel_forgets_pending_utterances():
    outbox = EventOutbox()
    synthesizer = RelaySynthesizer(outbox)
    utterance = Utterance(text="hello")
    synthesizer.speak(utterance)
    synthesizer.cancel()
    assert not synthesizer.deliver(utterance.id, "end")
    assert outbox.drain()[-1]["type"] == "cancel"


def test_unknown_synthesis_event():
    synthesizer = RelaySynthesizer(EventOutbox())
    utterance = Utterance(text="hello")
    synthesizer.speak(utterance)
    with pytest.raises(ValueError):
        synthesizer.deliver(utterance.id, "boundary")


def test_recognizer_runs():
    outbox = EventOutbox()
    recognizer = RelayRecognizer(outbox)
    ended = []
    recognizer.on_end = lambda: ended.append(True)

    recognizer.start()
    assert recognizer.running
    with pytest.raises(RuntimeError):
        recognizer.start()

    recognizer.stop()
    assert ended == [True]
    assert not recognizer.deliver(1, "end")
    assert [e["type"] for e in outbox.drain()] == ["listen", "stopListening"]

    recognizer.start()
    assert recognizer.run_id == 2
    assert not recognizer.deliver(1, "start")


def test_hub_runs_a_turn_through_the_relay(scheduler):
    hub = VoiceHub.create(Settings(), scheduler=scheduler)
    hub.controller.start_session(DATABASE_TEXT)

    intro = hub.outbox.drain()[-1]
    assert intro["type"] == "speak"
    assert intro["text"] == phrases.INTRO
    hub.synthesizer.deliver(intro["utteranceId"], "start")
    hub.synthesizer.deliver(intro["utteranceId"], "end")

    scheduler.advance(2.0)
    question = hub.outbox.drain()[-1]
    assert question["text"].startswith("Question: What is the main topic")
    hub.synthesizer.deliver(question["utteranceId"], "start")
    hub.synthesizer.deliver(question["utteranceId"], "end")

    scheduler.advance(0.5)
    listen = hub.outbox.drain()[-1]
    assert listen["type"] == "listen"
    assert hub.recognizer.deliver(listen["runId"], "start")
    assert hub.last_snapshot.isListening

    assert hub.recognizer.deliver(listen["runId"], "result", transcript="Database", confidence=0.8)
    assert hub.answers == [AnswerEvent(questionId="summary-1", userAnswer="database", isCorrect=True)]
    assert not hub.recognizer.deliver(listen["runId"], "end")

    types = [e["type"] for e in hub.outbox.drain()]
    assert types == ["stopListening", "speak"]


def test_hub_publishes_errors(scheduler):
    hub = VoiceHub.create(Settings(), scheduler=scheduler)
    hub.controller.start_session(DATABASE_TEXT)
    hub.controller.process_voice_input("")
    assert any(e["type"] == "error" and e["message"] == phrases.NOTHING_HEARD for e in hub.outbox.drain())


def test_hub_keeps_final_snapshot(scheduler):
    hub = VoiceHub.create(Settings(), scheduler=scheduler)
    hub.controller.start_session(DATABASE_TEXT)
    hub.controller.next_flashcard()
    hub.controller.stop()
    assert hub.last_snapshot.phase == SessionPhase.idle
    assert hub.last_snapshot.currentIndex == 1
