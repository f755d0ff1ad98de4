from studydeck.lexical import extract_keywords, extract_sentences, extract_words


def test_sentences_are_trimmed_and_length_filtered():
    text = "Short. This sentence is long enough to keep!   Another kept sentence here?  " + "x" * 250 + "."
    assert extract_sentences(text) == ["This sentence is long enough to keep", "Another kept sentence here"]


def test_sentences_capped():
    text = " ".join(f"Sentence number {i} is here." for i in range(30))
    assert len(extract_sentences(text)) == 20
    assert len(extract_sentences(text, limit=5)) == 5


def test_sentences_of_empty_text():
    assert extract_sentences("") == []
    assert extract_sentences("...!!!???") == []


def test_words_drop_short_words_stop_words_and_punctuation():
    assert extract_words("This API, they said, returns JSON quickly!") == ["said", "returns", "json", "quickly"]


def test_keywords_by_frequency_then_first_seen():
    assert extract_keywords("zebra apple zebra mango apple kiwi") == ["zebra", "apple", "mango", "kiwi"]
    assert extract_keywords("zebra apple zebra mango apple kiwi", max_keywords=2) == ["zebra", "apple"]
    assert extract_keywords("") == []
