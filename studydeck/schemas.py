from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Difficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class CardType(str, Enum):
    definition = "definition"
    concept = "concept"
    fact = "fact"
    process = "process"


class VoiceCardType(str, Enum):
    summary = "summary"
    question = "question"
    interactive = "interactive"


class SessionPhase(str, Enum):
    idle = "idle"
    awaiting_question = "awaiting_question"
    speaking = "speaking"
    listening = "listening"
    grading = "grading"
    awaiting_continue = "awaiting_continue"


class Summary(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    keyPoints: list[str]
    topics: list[str] = Field(..., max_length=3)
    difficulty: Difficulty
    confidence: float = Field(..., ge=0.0, le=1.0)


class Flashcard(BaseModel):
    id: str
    question: str
    answer: str
    type: CardType
    difficulty: Difficulty
    tags: list[str]
    readingTime: str = Field(..., description="Screen-reader estimate, e.g. '3 sec'")


class SummarizationResult(BaseModel):
    summary: Summary
    flashcards: list[Flashcard] = Field(..., min_length=1)
    generatedAt: int = Field(..., description="Epoch milliseconds")
    isFallback: bool = False


class VoiceFlashcard(BaseModel):
    id: str
    question: str
    answer: str = Field(..., description="Single gradable word")
    summary: str
    type: VoiceCardType
    difficulty: Difficulty
    keywords: list[str]


class VoiceSessionSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    flashcards: list[VoiceFlashcard]
    currentIndex: int
    isListening: bool
    isSpeaking: bool
    userAnswers: dict[str, str]
    sessionStartTime: float
    phase: SessionPhase


class VoiceResponse(BaseModel):
    success: bool
    message: str
    data: dict[str, Any] | None = None
    error: str | None = None


class SpeechFeedback(BaseModel):
    success: bool
    message: str | None = None
    error: str | None = None


class ProcessedText(BaseModel):
    originalText: str
    wordCount: int
    characterCount: int
    estimatedReadingTime: int = Field(..., description="Minutes at 200 words per minute")
    summary: str
    keywords: list[str]
    language: str
    hasCode: bool
    hasLinks: bool
    processedAt: int
