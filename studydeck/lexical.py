from __future__ import annotations

import re
from collections import Counter

from studydeck.rules import STOP_WORDS

SENTENCE_SPLIT = re.compile(r"[.!?]+")
_PUNCTUATION = re.compile(r"[^\w\s]")


def extract_sentences(text: str, *, limit: int = 20) -> list[str]:
    """Split on terminal punctuation; keep trimmed sentences of 11-199 characters."""
    sentences: list[str] = []
    for raw in SENTENCE_SPLIT.split(text or ""):
        s = raw.strip()
        if 10 < len(s) < 200:
            sentences.append(s)
        if len(sentences) >= limit:
            break
    return sentences


def extract_words(text: str) -> list[str]:
    cleaned = _PUNCTUATION.sub("", (text or "").lower())
    return [w for w in cleaned.split() if len(w) > 3 and w not in STOP_WORDS]


def extract_keywords(text: str, max_keywords: int = 10) -> list[str]:
    # Counter keeps first-seen order, and most_common() sorts stably.
    counts = Counter(extract_words(text))
    return [word for word, _ in counts.most_common(max_keywords)]
