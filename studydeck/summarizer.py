"""Offline summarizer and flashcard generator.

Everything here is deterministic and total: any string, including the empty
one, produces a ``SummarizationResult`` with at least one flashcard.
"""

from __future__ import annotations

import re
import time

from studydeck.classifier import (
    assess_difficulty,
    calculate_confidence,
    identify_topics,
    technical_terms_in,
)
from studydeck.lexical import extract_sentences, extract_words
from studydeck.logging import get_logger
from studydeck.rules import (
    FALLBACK_FLASHCARDS,
    LONG_DEFINITIONS,
    SHORT_DEFINITIONS,
    SIMPLIFY_RULES,
    TECHNICAL_TERMS,
)
from studydeck.schemas import CardType, Difficulty, Flashcard, SummarizationResult, Summary

logger = get_logger(__name__)

NO_CONTENT_SUMMARY = "No content available for summarization."
MIN_CONFIDENCE = 0.3
MAX_FLASHCARDS = 12
MAX_QA_CARDS = 5
MAX_REVISION_CARDS = 3

_PRONOUN_FILLER = re.compile(r"\b(this|that|these|those|it|they|them)\b", re.IGNORECASE)
_COPULA_ARTICLE = re.compile(r"\b(is|are|was|were)\s+(a|an|the)\s+", re.IGNORECASE)
_DEMONSTRATIVES = re.compile(r"\b(this|that|these|those)\b", re.IGNORECASE)
_DEFINITIONAL = r"\b(is|are|was|were|means|refers to|describes|defines)\b"
_DEFINITIONAL_SUBJECT = re.compile(r"^(.*?)" + _DEFINITIONAL, re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def _squash(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


def summarize_text(text: str) -> SummarizationResult:
    text = text or ""
    sentences = extract_sentences(text)
    topics = identify_topics(text)
    difficulty = assess_difficulty(text)

    summary = Summary(
        text=generate_summary_text(sentences),
        keyPoints=extract_key_points(sentences),
        topics=topics,
        difficulty=difficulty,
        confidence=calculate_confidence(text),
    )

    flashcards = generate_flashcards(text, topics, difficulty)
    is_fallback = False
    if not flashcards or summary.confidence < MIN_CONFIDENCE:
        logger.info(
            "Using fallback flashcards (generated=%d, confidence=%.2f)",
            len(flashcards),
            summary.confidence,
        )
        flashcards = list(FALLBACK_FLASHCARDS)
        is_fallback = True

    return SummarizationResult(
        summary=summary,
        flashcards=flashcards,
        generatedAt=int(time.time() * 1000),
        isFallback=is_fallback,
    )


def generate_summary_text(sentences: list[str]) -> str:
    if not sentences:
        return NO_CONTENT_SUMMARY

    picked = [s for s in sentences if 20 < len(s) < 120][:3]
    concise = [_squash(_COPULA_ARTICLE.sub("is ", _PRONOUN_FILLER.sub("", s))) for s in picked]
    concise = [s for s in concise if s]
    if not concise:
        return sentences[0]

    summary = ". ".join(concise)
    if not summary.endswith("."):
        summary += "."
    return _truncate(summary, 200)


def extract_key_points(sentences: list[str]) -> list[str]:
    picked = [s for s in sentences if 20 < len(s) < 100][:4]
    return [_squash(_DEMONSTRATIVES.sub("", s))[:80] for s in picked]


def generate_flashcards(text: str, topics: list[str], difficulty: Difficulty) -> list[Flashcard]:
    cards = generate_qa_cards(text, topics, difficulty)
    cards.extend(generate_revision_cards(text, topics, difficulty))
    return cards[:MAX_FLASHCARDS]


def generate_qa_cards(text: str, topics: list[str], difficulty: Difficulty) -> list[Flashcard]:
    cards: list[Flashcard] = []
    for idx, sentence in enumerate(extract_sentences(text)[:4]):
        answer = simplify(sentence)
        cards.append(
            Flashcard(
                id=f"qa_simple_{idx}",
                question=make_question(sentence),
                answer=answer,
                type=CardType.concept,
                difficulty=difficulty,
                tags=[*topics, "qa"],
                readingTime=estimate_reading_time(answer),
            )
        )

    terms = technical_terms_in(text)
    if terms:
        term = terms[0]
        answer = simplify(generate_definition_answer(term, text))
        cards.append(
            Flashcard(
                id=f"qa_def_{term}",
                question=f"What is {term}?",
                answer=answer,
                type=CardType.definition,
                difficulty=difficulty,
                tags=[*topics, "definition", "qa"],
                readingTime=estimate_reading_time(answer),
            )
        )
    return cards[:MAX_QA_CARDS]


def generate_revision_cards(text: str, topics: list[str], difficulty: Difficulty) -> list[Flashcard]:
    cards: list[Flashcard] = []
    for idx, sentence in enumerate(extract_sentences(text)[4:7]):
        answer = simplify(sentence)
        cards.append(
            Flashcard(
                id=f"rev_simple_{idx}",
                question=make_question(sentence),
                answer=answer,
                type=CardType.fact,
                difficulty=difficulty,
                tags=[*topics, "revision"],
                readingTime=estimate_reading_time(answer),
            )
        )

    keyword = next((w for w in extract_words(text) if w in TECHNICAL_TERMS), None)
    if keyword:
        answer = simplify(generate_short_definition(keyword))
        cards.append(
            Flashcard(
                id=f"rev_keyword_{keyword}",
                question=f"Define: {keyword}",
                answer=answer,
                type=CardType.definition,
                difficulty=difficulty,
                tags=[*topics, "keyword", "revision"],
                readingTime=estimate_reading_time(answer),
            )
        )
    return cards[:MAX_REVISION_CARDS]


def generate_short_definition(term: str) -> str:
    return SHORT_DEFINITIONS.get(term.lower(), f"{term}: technical concept")


def generate_definition_answer(term: str, context: str) -> str:
    """Prefer a sentence from the text mentioning the term, then the lookup table."""
    needle = term.lower()
    for sentence in extract_sentences(context):
        if needle in sentence.lower():
            return sentence
    return LONG_DEFINITIONS.get(needle, f"{term} is a technical concept used in software development.")


def make_question(sentence: str) -> str:
    """Turn a statement into a short question. Best effort; always returns something."""
    match = _DEFINITIONAL_SUBJECT.match(sentence)
    if match and match.group(1).strip():
        return f"What is {match.group(1).strip()}?"

    first_word = sentence.split(" ")[0]
    if first_word and len(first_word) < 15:
        return f"What about {first_word}?"
    return "What is this about?"


def simplify(sentence: str) -> str:
    result = sentence
    for pattern, replacement in SIMPLIFY_RULES:
        result = pattern.sub(replacement, result)
    return _truncate(_squash(result), 120)


def estimate_reading_time(text: str) -> str:
    # 3 words per second for screen readers
    words = len(_WHITESPACE.split(text))
    seconds = max(1, int(words / 3 + 0.5))
    return f"{seconds} sec"


def format_summary(summary: Summary) -> str:
    points = "\n".join(f"• {p}" for p in summary.keyPoints)
    return (
        f"Summary: {summary.text}\n\n"
        f"Key Points:\n{points}\n\n"
        f"Topics: {', '.join(summary.topics)}\n"
        f"Difficulty: {summary.difficulty.value}\n"
        f"Confidence: {round(summary.confidence * 100)}%"
    )


def format_flashcards(flashcards: list[Flashcard]) -> str:
    return "\n".join(
        f"Card {idx} ({card.type.value}):\n"
        f"Q: {card.question}\n"
        f"A: {card.answer}\n"
        f"Tags: {', '.join(card.tags)}\n"
        f"Reading Time: {card.readingTime}\n"
        for idx, card in enumerate(flashcards, start=1)
    )


def notes_from_summary(summary: Summary) -> list[str]:
    """Short review notes (1-8) drawn from a summary."""
    notes: list[str] = []
    if summary.text:
        notes.append(summary.text)
    notes.extend(p for p in summary.keyPoints if 10 < len(p) < 200)

    if len(notes) < 3:
        for sentence in extract_sentences(summary.text)[:5]:
            simplified = simplify(sentence)
            if 20 < len(simplified) < 150 and simplified not in notes:
                notes.append(simplified)

    if not notes:
        notes = [
            "This page contains information that can help with learning.",
            "The content has been extracted and summarized for easy reading.",
            "Use these notes to review and remember key points.",
        ]
    return notes[:8]
