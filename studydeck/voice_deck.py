"""Voice deck generation.

Voice answers are graded as a single spoken word, so this pipeline builds its
own deck from the raw content instead of reusing the detailed flashcards:
every answer is one lowercase token and every question is templated so that
token is what completes it.
"""

from __future__ import annotations

import re

from studydeck.lexical import extract_keywords, extract_sentences, extract_words
from studydeck.rules import SHORT_DEFINITIONS, TECHNICAL_TERMS
from studydeck.schemas import Difficulty, VoiceCardType, VoiceFlashcard

DEFAULT_ANSWER = "topic"
SUMMARY_QUESTION = "What is the main topic of this page?"
EMPTY_SUMMARY = "No content available."
MAX_SHORT_QUESTIONS = 6

# Cycled per sentence: (template, difficulty)
QUESTION_TEMPLATES: tuple[tuple[str, Difficulty], ...] = (
    ("Fill in the blank: {masked}", Difficulty.easy),
    ("Which word completes this statement: {masked}", Difficulty.medium),
    ("Name the missing term: {masked}", Difficulty.hard),
)


def extract_one_word_answer(text: str, exclude: tuple[str, ...] = ()) -> str:
    """Pick the single most gradable word: a technical term first, then the top keyword."""
    words = [w for w in extract_words(text) if w not in exclude]
    for word in words:
        if word in TECHNICAL_TERMS:
            return word
    for word in extract_keywords(" ".join(words), max_keywords=1):
        return word
    return DEFAULT_ANSWER


def _mask(sentence: str, word: str) -> str | None:
    masked, count = re.subn(rf"\b{re.escape(word)}\b", "blank", sentence, flags=re.IGNORECASE)
    return masked if count else None


def _content_summary(content: str) -> str:
    sentences = [s for s in extract_sentences(content) if len(s) > 20][:3]
    if not sentences:
        return EMPTY_SUMMARY
    return ". ".join(sentences) + "."


def generate_short_questions(content: str) -> list[VoiceFlashcard]:
    cards: list[VoiceFlashcard] = []
    sentences = [s for s in extract_sentences(content) if len(s) > 30]
    for sentence in sentences:
        if len(cards) >= MAX_SHORT_QUESTIONS:
            break
        answer = extract_one_word_answer(sentence)
        masked = _mask(sentence, answer)
        if masked is None:
            continue
        template, difficulty = QUESTION_TEMPLATES[len(cards) % len(QUESTION_TEMPLATES)]
        cards.append(
            VoiceFlashcard(
                id=f"question-{len(cards) + 1}",
                question=template.format(masked=masked),
                answer=answer,
                summary=sentence,
                type=VoiceCardType.interactive,
                difficulty=difficulty,
                keywords=extract_keywords(sentence, max_keywords=3),
            )
        )
    return cards


def _definition_card(content: str) -> VoiceFlashcard | None:
    term = next((w for w in extract_words(content) if w in SHORT_DEFINITIONS), None)
    if term is None:
        return None
    definition = SHORT_DEFINITIONS[term]
    return VoiceFlashcard(
        id="definition-1",
        question=f"Which term means: {definition.lower()}?",
        answer=term,
        summary=f"{term}: {definition}",
        type=VoiceCardType.question,
        difficulty=Difficulty.medium,
        keywords=[term],
    )


def generate_voice_flashcards(content: str) -> list[VoiceFlashcard]:
    """Summary card first (always present), then fill-in questions, then one definition card."""
    content = content or ""
    summary = _content_summary(content)
    cards = [
        VoiceFlashcard(
            id="summary-1",
            question=SUMMARY_QUESTION,
            answer=extract_one_word_answer(content),
            summary=summary,
            type=VoiceCardType.summary,
            difficulty=Difficulty.easy,
            keywords=extract_keywords(content, max_keywords=5),
        )
    ]
    cards.extend(generate_short_questions(content))
    definition = _definition_card(content)
    if definition is not None:
        cards.append(definition)
    return cards
