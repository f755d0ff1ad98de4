"""Fuzzy one-word answer validation.

Deliberately permissive: a spoken answer is accepted on exact match, on
substring containment in either direction, or when any pair of words shares
a containment or prefix/suffix relation. Checks run in that order and the
first success wins.
"""

from __future__ import annotations

import re

_WORD_SPLIT = re.compile(r"[^\w]+")


def normalize_answer(text: str) -> str:
    return (text or "").lower().strip()


def _words(text: str) -> list[str]:
    return [w for w in _WORD_SPLIT.split(text) if w]


def words_similar(a: str, b: str) -> bool:
    if a in b or b in a:
        return True
    return a.startswith(b) or b.startswith(a) or a.endswith(b) or b.endswith(a)


def validate_answer(user_answer: str, correct_answer: str) -> bool:
    user = normalize_answer(user_answer)
    correct = normalize_answer(correct_answer)
    if not user or not correct:
        return False

    if user == correct:
        return True
    if user in correct or correct in user:
        return True

    correct_words = _words(correct)
    return any(words_similar(u, c) for u in _words(user) for c in correct_words)
