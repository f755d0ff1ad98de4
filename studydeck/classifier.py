"""Topic, difficulty and confidence scoring against fixed vocabularies."""

from __future__ import annotations

from studydeck.lexical import extract_sentences, extract_words
from studydeck.rules import PROGRAMMING_CONCEPTS, TECHNICAL_TERMS, TOPIC_INDICATORS
from studydeck.schemas import Difficulty

MAX_TOPICS = 3
DEFAULT_TOPIC = "General"


def technical_terms_in(text: str) -> list[str]:
    """Technical terms occurring anywhere in the text, in vocabulary order."""
    lowered = (text or "").lower()
    return [term for term in TECHNICAL_TERMS if term in lowered]


def identify_topics(text: str) -> list[str]:
    lowered = (text or "").lower()
    topics: list[str] = []

    if technical_terms_in(lowered):
        topics.append("Programming")
    if any(concept.lower() in lowered for concept in PROGRAMMING_CONCEPTS):
        topics.append("Software Development")

    for label, indicators in TOPIC_INDICATORS:
        if any(indicator in lowered for indicator in indicators) and label not in topics:
            topics.append(label)

    if not topics:
        topics.append(DEFAULT_TOPIC)
    return topics[:MAX_TOPICS]


def average_word_length(text: str) -> float:
    words = extract_words(text)
    if not words:
        return 0.0
    return sum(len(w) for w in words) / len(words)


def difficulty_score(text: str) -> int:
    avg_len = average_word_length(text)
    sentence_count = len(extract_sentences(text))
    term_count = len(technical_terms_in(text))

    score = 0
    score += 2 if avg_len > 8 else 1 if avg_len > 6 else 0
    score += 2 if sentence_count > 15 else 1 if sentence_count > 10 else 0
    score += 2 if term_count > 5 else 1 if term_count > 2 else 0
    return score


def assess_difficulty(text: str) -> Difficulty:
    score = difficulty_score(text)
    if score >= 5:
        return Difficulty.hard
    if score >= 2:
        return Difficulty.medium
    return Difficulty.easy


def calculate_confidence(text: str) -> float:
    """Heuristic confidence in [0.5, 1.0]; longer structured technical text scores higher."""
    text = text or ""
    confidence = 0.5
    if len(extract_words(text)) > 100:
        confidence += 0.2
    if len(extract_sentences(text)) > 5:
        confidence += 0.1
    if technical_terms_in(text):
        confidence += 0.1
    if "function" in text or "class" in text or "method" in text:
        confidence += 0.1
    return round(min(confidence, 1.0), 2)
