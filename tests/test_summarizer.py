import re

import pytest

from notes_cli.summarizer import (
    STOP_WORDS,
    clamp_sentences,
    position_bonus,
    score_sentences,
    select_sentences,
    split_sentences,
    summarize,
    tokenize,
    word_frequencies,
)

FOUR = "First sentence. Second sentence. Third sentence. Fourth sentence."

SEVEN = (
    "Volcanoes erupt molten rock from deep magma chambers. "
    "Glaciers carve valleys as ice slowly moves downhill. "
    "Coral reefs shelter thousands of marine species. "
    "Volcanoes also release ash and gas into the atmosphere. "
    "Deserts receive very little rainfall each year. "
    "Rainforests hold most of the planet's species. "
    "Magma cools into new rock after volcanoes erupt."
)


def count_sentences(summary):
    return len([s for s in re.split(r"[.!?]+", summary) if s.strip()])


@pytest.mark.parametrize(
    "requested, expected",
    [(0, 1), (-5, 1), (1, 1), (2, 2), (5, 2), (10**6, 2), (None, 2)],
)
def test_clamp_sentences(requested, expected):
    assert clamp_sentences(requested) == expected


@pytest.mark.parametrize("text", ["", "   ", "\n\t ", "... !!! ???", "?!"])
def test_empty_or_punctuation_only_gives_empty_summary(text):
    assert summarize(text) == ""


def test_split_treats_delimiter_runs_as_one():
    assert split_sentences("Wait?! Really... yes") == ["Wait", "Really", "yes"]


def test_split_collapses_whitespace():
    assert split_sentences("A\n\nline\tbreak.   Next  one") == ["A line break", "Next one"]


def test_tokenize_drops_stop_words_short_words_and_punctuation():
    assert tokenize("The cat, and a DOG: the end!") == ["cat", "dog", "end"]
    assert tokenize("it's well-known") == ["well", "known"]


def test_stop_words_are_the_fixed_set():
    assert len(STOP_WORDS) == 39
    assert {"the", "those", "might", "being"} <= STOP_WORDS
    assert "not" not in STOP_WORDS


def test_word_frequencies_count_whole_text():
    freq = word_frequencies("Cats purr. Cats sleep. Dogs bark.")
    assert freq["cats"] == 2
    assert freq["dogs"] == 1
    assert "the" not in freq


def test_position_bonus_only_for_long_inputs():
    assert position_bonus(0, 5) == 0.0
    assert position_bonus(0, 6) == 0.5
    assert position_bonus(1, 6) == 0.25
    assert position_bonus(4, 10) == pytest.approx(0.1)


def test_score_sentences_adds_frequency_and_bonus():
    sents = ["Rain fell", "Wind blew", "Snow came", "Sun rose", "Fog lifted", "Rain rain returned"]
    freq = word_frequencies(". ".join(sents))
    scored = score_sentences(sents, freq)
    assert [s.index for s in scored] == list(range(6))
    assert scored[0].score == pytest.approx(3 + 1 + 0.5)
    assert scored[5].score == pytest.approx(3 + 3 + 1 + 0.5 / 6)


def test_select_sentences_breaks_ties_by_position_and_restores_order():
    scored = score_sentences(["alpha", "beta", "beta again", "alpha"], {"alpha": 1, "beta": 2})
    assert [s.score for s in scored] == [1, 2, 2, 1]
    assert select_sentences(scored, 2) == ["beta", "beta again"]
    assert select_sentences(scored, 3) == ["alpha", "beta", "beta again"]


def test_short_input_is_returned_verbatim():
    out = summarize("First sentence. Second sentence.", 2)
    assert out == "First sentence. Second sentence."
    assert count_sentences(out) == 2
    assert out.index("First") < out.index("Second")


def test_short_input_without_terminator_gets_a_period():
    assert summarize("This is text without sentence endings") == "This is text without sentence endings."
    assert summarize("Hello!!! World???") == "Hello. World."


def test_one_sentence_requested_from_four():
    out = summarize(FOUR, 1)
    assert count_sentences(out) == 1
    assert out[:-1] in split_sentences(FOUR)
    # equal scores resolve to the earliest sentence
    assert out == "First sentence."


@pytest.mark.parametrize("n, expected", [(0, 1), (-5, 1), (2, 2), (5, 2)])
def test_requested_count_is_clamped(n, expected):
    assert count_sentences(summarize(FOUR, n)) == expected


def test_picks_highest_frequency_sentences():
    text = "Cats purr. Dogs bark loudly. Cats sleep. Birds sing. Cats eat fish."
    assert summarize(text, 1) == "Cats eat fish."
    assert summarize(text, 2) == "Cats purr. Cats eat fish."


def test_position_bonus_never_beats_higher_frequency():
    text = "Rain fell. Wind blew. Snow came. Sun rose. Fog lifted. Rain rain returned."
    assert summarize(text, 1) == "Rain rain returned."


def test_seven_sentence_default_keeps_original_order():
    out = summarize(SEVEN)
    originals = split_sentences(SEVEN)
    picked = [s.strip() for s in out[:-1].split(". ")]
    assert 1 <= len(picked) <= 2
    assert all(p in originals for p in picked)
    assert [originals.index(p) for p in picked] == sorted(originals.index(p) for p in picked)
    assert out.endswith(".")
    assert not out.endswith("..")


def test_summary_is_deterministic():
    assert summarize(SEVEN) == summarize(SEVEN)
    assert summarize(SEVEN, 1) == summarize(SEVEN, 1)


@pytest.mark.parametrize("n", [-1, 0, 1, 2, 3, 50])
def test_summary_never_exceeds_two_sentences(n):
    for text in (FOUR, SEVEN, "One. Two. Three.", "Solo"):
        out = summarize(text, n)
        assert 1 <= count_sentences(out) <= 2
        assert out.endswith(".")
