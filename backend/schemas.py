from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, Field

from studydeck.schemas import VoiceSessionSnapshot


class SummarizeRequest(BaseModel):
    url: str = Field(..., min_length=1)
    cleanedText: str = Field("", description="Main content already extracted from the page")


class AnalyzeRequest(BaseModel):
    cleanedText: str = Field("", description="Main content already extracted from the page")


class ExportFormat(str, Enum):
    txt = "txt"
    json = "json"
    md = "md"


class VoiceStartRequest(BaseModel):
    content: str = Field("", description="Page text to build the voice deck from")


class VoiceTranscriptRequest(BaseModel):
    transcript: str = Field("", description="Recognized speech, for clients that recognize locally")


class SynthesisEvent(BaseModel):
    device: Literal["synthesis"]
    event: Literal["start", "end", "error"]
    utteranceId: str = Field(..., min_length=1)
    error: str | None = None


class RecognitionEvent(BaseModel):
    device: Literal["recognition"]
    event: Literal["start", "result", "error", "end"]
    runId: int
    transcript: str = ""
    confidence: float = 0.0
    isFinal: bool = True
    error: str | None = None


class DeviceEventResponse(BaseModel):
    accepted: bool


class VoiceEventsResponse(BaseModel):
    events: list[dict[str, Any]]


class VoiceStateResponse(BaseModel):
    active: bool
    supported: bool
    session: VoiceSessionSnapshot | None = None


class AnswerEvent(BaseModel):
    questionId: str
    userAnswer: str
    isCorrect: bool


class AnswersResponse(BaseModel):
    answers: list[AnswerEvent]


# The literal ``device`` field tells the two apart.
DeviceEvent = Union[SynthesisEvent, RecognitionEvent]
