from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse, StreamingResponse

from backend.export import build_docx, export_deck
from backend.schemas import (
    AnalyzeRequest,
    AnswersResponse,
    DeviceEvent,
    DeviceEventResponse,
    ExportFormat,
    SummarizeRequest,
    SynthesisEvent,
    VoiceEventsResponse,
    VoiceStartRequest,
    VoiceStateResponse,
    VoiceTranscriptRequest,
)
from backend.voice import VoiceHub
from studydeck.config import load_settings
from studydeck.logging import get_logger, setup_logging
from studydeck.memory import DeckStore
from studydeck.schemas import ProcessedText, SummarizationResult, VoiceResponse
from studydeck.summarizer import summarize_text
from studydeck.text_processor import process_extracted_text

settings = load_settings()
setup_logging(settings.log_level)
logger = get_logger(__name__)

app = FastAPI(title="Study Deck API", version="0.3.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

decks = DeckStore(maxsize=settings.cache_maxsize, ttl_seconds=settings.cache_ttl_seconds)
voice = VoiceHub.create(settings)


def _stored_deck(url: str) -> SummarizationResult:
    result = decks.get(url)
    if result is None:
        raise HTTPException(status_code=404, detail="No flashcards generated for that URL yet.")
    return result


@app.get("/")
def root() -> dict:
    return {
        "ok": True,
        "service": "study-deck",
        "endpoints": [
            "/health",
            "/summarize",
            "/analyze",
            "/flashcards",
            "/flashcards/export",
            "/flashcards/download.docx",
            "/voice/start",
            "/voice/transcript",
            "/voice/next",
            "/voice/previous",
            "/voice/repeat",
            "/voice/continue",
            "/voice/help",
            "/voice/pause",
            "/voice/resume",
            "/voice/stop",
            "/voice/state",
            "/voice/events",
            "/voice/device",
            "/voice/answers",
        ],
        "docs": "/docs",
    }


@app.get("/health")
def health() -> dict:
    return {"ok": True}


@app.post("/summarize", response_model=SummarizationResult)
def summarize(req: SummarizeRequest) -> SummarizationResult:
    result = summarize_text(req.cleanedText)
    logger.info(
        "Summarized %s: %d flashcards (fallback=%s)", req.url, len(result.flashcards), result.isFallback
    )
    return decks.put(req.url, result)


@app.post("/analyze", response_model=ProcessedText)
def analyze(req: AnalyzeRequest) -> ProcessedText:
    return process_extracted_text(req.cleanedText)


@app.get("/flashcards", response_model=SummarizationResult)
def flashcards(url: str) -> SummarizationResult:
    return _stored_deck(url)


@app.get("/flashcards/export", response_class=PlainTextResponse)
def flashcards_export(url: str, format: ExportFormat = ExportFormat.txt) -> PlainTextResponse:
    content = export_deck(_stored_deck(url), format, url)
    media_type = "application/json" if format == ExportFormat.json else "text/plain"
    if format == ExportFormat.md:
        media_type = "text/markdown"
    headers = {"Content-Disposition": f'attachment; filename="study-deck.{format.value}"'}
    return PlainTextResponse(content, media_type=media_type, headers=headers)


@app.get("/flashcards/download.docx")
def flashcards_download_docx(url: str) -> StreamingResponse:
    bio = build_docx(_stored_deck(url), url)
    headers = {"Content-Disposition": 'attachment; filename="study-deck.docx"'}
    return StreamingResponse(
        bio,
        media_type="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        headers=headers,
    )


# Voice session -----------------------------------------------------------
# Handlers are async so controller timers land on the server's event loop.


@app.post("/voice/start", response_model=VoiceResponse)
async def voice_start(req: VoiceStartRequest) -> VoiceResponse:
    voice.answers.clear()
    return voice.controller.start_session(req.content)


@app.post("/voice/transcript", response_model=VoiceResponse)
async def voice_transcript(req: VoiceTranscriptRequest) -> VoiceResponse:
    return voice.controller.process_voice_input(req.transcript)


@app.post("/voice/next", response_model=VoiceResponse)
async def voice_next() -> VoiceResponse:
    return voice.controller.next_flashcard()


@app.post("/voice/previous", response_model=VoiceResponse)
async def voice_previous() -> VoiceResponse:
    return voice.controller.previous_flashcard()


@app.post("/voice/repeat", response_model=VoiceResponse)
async def voice_repeat() -> VoiceResponse:
    return voice.controller.ask_current_question()


@app.post("/voice/continue", response_model=VoiceResponse)
async def voice_continue() -> VoiceResponse:
    return voice.controller.continue_session()


@app.post("/voice/help", response_model=VoiceResponse)
async def voice_help() -> VoiceResponse:
    return voice.controller.speak_help()


@app.post("/voice/pause", response_model=VoiceResponse)
async def voice_pause() -> VoiceResponse:
    return voice.controller.pause_speech()


@app.post("/voice/resume", response_model=VoiceResponse)
async def voice_resume() -> VoiceResponse:
    return voice.controller.resume_speech()


@app.post("/voice/stop", response_model=VoiceResponse)
async def voice_stop() -> VoiceResponse:
    had_session = voice.controller.current_session is not None
    voice.controller.stop()
    return VoiceResponse(success=had_session, message="Session stopped" if had_session else "No active session")


@app.get("/voice/state", response_model=VoiceStateResponse)
async def voice_state() -> VoiceStateResponse:
    session = voice.controller.current_session
    return VoiceStateResponse(
        active=session is not None,
        supported=voice.controller.is_supported(),
        # after a session ends this is its final idle snapshot
        session=session or voice.last_snapshot,
    )


@app.get("/voice/events", response_model=VoiceEventsResponse)
async def voice_events() -> VoiceEventsResponse:
    return VoiceEventsResponse(events=voice.outbox.drain())


@app.post("/voice/device", response_model=DeviceEventResponse)
async def voice_device(req: DeviceEvent) -> DeviceEventResponse:
    if isinstance(req, SynthesisEvent):
        accepted = voice.synthesizer.deliver(req.utteranceId, req.event, req.error)
    else:
        accepted = voice.recognizer.deliver(
            req.runId,
            req.event,
            transcript=req.transcript,
            confidence=req.confidence,
            is_final=req.isFinal,
            error=req.error,
        )
    return DeviceEventResponse(accepted=accepted)


@app.get("/voice/answers", response_model=AnswersResponse)
async def voice_answers() -> AnswersResponse:
    return AnswersResponse(answers=list(voice.answers))
