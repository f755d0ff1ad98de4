"""Statistics for extracted page text."""

from __future__ import annotations

import math
import re
import time

from studydeck.lexical import SENTENCE_SPLIT, extract_keywords
from studydeck.schemas import ProcessedText

WORDS_PER_MINUTE = 200

_ENGLISH = frozenset({"the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by"})
_SPANISH = frozenset({"el", "la", "de", "que", "y", "a", "en", "un", "es", "se", "no", "te"})

_CODE_PATTERNS = tuple(
    re.compile(p)
    for p in (
        r"function\s+\w+\s*\(",
        r"const\s+\w+\s*=",
        r"let\s+\w+\s*=",
        r"var\s+\w+\s*=",
        r"if\s*\(",
        r"for\s*\(",
        r"while\s*\(",
        r"class\s+\w+",
        r"import\s+",
        r"export\s+",
        r"console\.log",
        r"return\s+",
        r"=>\s*",
        r"\{[\s\S]*\}",
    )
)
_URL = re.compile(r"https?://\S+")


def clean_text(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def count_words(text: str) -> int:
    return len(text.split())


def short_summary(text: str, max_length: int = 200) -> str:
    summary = ""
    for sentence in (s for s in SENTENCE_SPLIT.split(text) if s.strip()):
        if len(summary + sentence) > max_length:
            break
        summary += sentence + ". "
    summary = summary.strip()
    if summary:
        return summary
    return text[:max_length] + "..." if text else ""


def detect_language(text: str) -> str:
    words = text.lower().split()
    english = sum(1 for w in words if w in _ENGLISH)
    spanish = sum(1 for w in words if w in _SPANISH)
    if english > spanish:
        return "en"
    if spanish > english:
        return "es"
    return "unknown"


def detect_code_blocks(text: str) -> bool:
    return any(p.search(text) for p in _CODE_PATTERNS)


def detect_links(text: str) -> bool:
    return bool(_URL.search(text))


def process_extracted_text(text: str) -> ProcessedText:
    cleaned = clean_text(text)
    word_count = count_words(cleaned)
    return ProcessedText(
        originalText=text,
        wordCount=word_count,
        characterCount=len(cleaned),
        estimatedReadingTime=math.ceil(word_count / WORDS_PER_MINUTE),
        summary=short_summary(cleaned),
        keywords=extract_keywords(cleaned),
        language=detect_language(cleaned),
        hasCode=detect_code_blocks(text),
        hasLinks=detect_links(text),
        processedAt=int(time.time() * 1000),
    )


def format_reading_time(minutes: int) -> str:
    if minutes < 1:
        return "Less than 1 minute"
    if minutes == 1:
        return "1 minute"
    return f"{minutes} minutes"


def format_word_count(count: int) -> str:
    if count == 1:
        return "1 word"
    return f"{count:,} words"
