import pytest

from studydeck.rules import FALLBACK_FLASHCARDS
from studydeck.schemas import CardType
from studydeck.summarizer import (
    NO_CONTENT_SUMMARY,
    estimate_reading_time,
    format_flashcards,
    format_summary,
    generate_summary_text,
    make_question,
    notes_from_summary,
    simplify,
    summarize_text,
)

from samples import API_TEXT, LONG_TEXT


@pytest.mark.parametrize("text", ["", "   ", "!!!", "short.", "no punctuation at all but plenty of words", LONG_TEXT])
def test_always_returns_a_usable_deck(text):
    result = summarize_text(text)
    assert len(result.flashcards) >= 1
    assert 1 <= len(result.summary.topics) <= 3
    assert 0.0 <= result.summary.confidence <= 1.0
    assert len(result.flashcards) <= 12


def test_empty_text_uses_fallback_deck():
    result = summarize_text("")
    assert result.isFallback
    assert result.flashcards == list(FALLBACK_FLASHCARDS)
    assert [c.id for c in result.flashcards] == [f"fallback_{i}" for i in range(1, 7)]
    assert result.summary.text == NO_CONTENT_SUMMARY
    assert result.summary.topics == ["General"]


def test_api_text():
    result = summarize_text(API_TEXT)
    assert not result.isFallback
    assert result.summary.confidence == 0.7
    assert result.summary.topics == ["Programming", "APIs", "Testing"]
    assert result.summary.text == (
        "APIs allow different software applications to communicate. "
        "A function is reusable block of code. Testing ensures code quality."
    )

    questions = [c.question for c in result.flashcards]
    assert questions[:3] == ["What about APIs?", "What is A function?", "What about Testing?"]

    definition = next(c for c in result.flashcards if c.id == "qa_def_api")
    assert definition.question == "What is api?"
    assert definition.answer == "APIs allow different software applications to communicate"
    assert definition.type == CardType.definition
    assert "definition" in definition.tags


def test_long_text_mixes_qa_and_revision_cards():
    ids = [c.id for c in summarize_text(LONG_TEXT).flashcards]
    assert ids == [
        "qa_simple_0",
        "qa_simple_1",
        "qa_simple_2",
        "qa_simple_3",
        "qa_def_database",
        "rev_simple_0",
        "rev_simple_1",
        "rev_simple_2",
    ]


def test_summary_text_is_bounded():
    sentences = [f"Sentence {i} carries about one hundred characters of padding text to fill space here" for i in range(5)]
    text = generate_summary_text(sentences)
    assert len(text) <= 200
    assert text.endswith("...")


def test_summary_without_mid_length_sentences_uses_first():
    assert generate_summary_text(["Tiny but ok"]) == "Tiny but ok"


@pytest.mark.parametrize(
    "sentence, question",
    [
        ("A function is a reusable block of code", "What is A function?"),
        ("Encryption refers to scrambling data", "What is Encryption?"),
        ("Testing ensures code quality", "What about Testing?"),
        ("Is this the right answer", "What about Is?"),
        ("Supercalifragilistic words here", "What is this about?"),
    ],
)
def test_make_question(sentence, question):
    assert make_question(sentence) == question


def test_simplify_rules():
    assert simplify("It utilizes caching") == "It uses caching"
    assert simplify("Utilizes caching in order to   scale") == "uses caching to scale"
    # Rules apply in order, so the shorter word is rewritten first.
    assert simplify("The result is insufficient") == "The result is inenough"


def test_simplify_truncates():
    out = simplify("word " * 40)
    assert len(out) == 120
    assert out.endswith("...")


def test_reading_time():
    assert estimate_reading_time("one two three four five six") == "2 sec"
    assert estimate_reading_time("") == "1 sec"
    assert estimate_reading_time("one two three four five six seven eight") == "3 sec"


def test_formatting():
    result = summarize_text(API_TEXT)
    summary = format_summary(result.summary)
    assert summary.startswith("Summary: APIs allow")
    assert "Confidence: 70%" in summary
    cards = format_flashcards(result.flashcards)
    assert "Card 1 (concept):" in cards
    assert "Q: What is api?" in cards


def test_notes_from_summary():
    notes = notes_from_summary(summarize_text(LONG_TEXT).summary)
    assert 1 <= len(notes) <= 8
    assert all(notes)
