"""
Gibberish Detector Tests

Covers each heuristic check at its threshold boundary, the aggregate
verdict (first-fired reason, mean confidence, no short-circuit) and
the real-word allowlist that keeps keyboard-mashing honest.
"""

from __future__ import annotations

import pytest

from querygate.gibberish import (
    CHECKS,
    CONFIDENCE,
    ENTROPY_THRESHOLD,
    check_keyboard_mashing,
    check_number_sequence,
    check_pattern_repetition,
    check_randomness,
    check_repeated_characters,
    check_single_character_sequence,
    check_symbol_ratio,
    detect,
    is_single_row_word,
    shannon_entropy,
)

GOOD_QUERY = (
    "Create a modern responsive dashboard with a sidebar navigation, "
    "user profile section, and data visualization charts"
)


# ============================================================
# INDIVIDUAL CHECKS
# ============================================================

class TestRepeatedCharacters:

    def test_five_in_a_row_fires(self):
        result = check_repeated_characters("aaaaa")
        assert result.is_gibberish is True
        assert result.reason == "repeated_characters"
        assert result.confidence == CONFIDENCE["repeated_characters"]
        assert "aaaaa" in result.description

    def test_four_in_a_row_is_clean(self):
        assert check_repeated_characters("aaaa").is_gibberish is False

    def test_repeated_punctuation_fires(self):
        assert check_repeated_characters("hello!!!!!").is_gibberish is True


class TestSymbolRatio:

    def test_above_threshold_fires(self):
        # 6 of 8 characters are symbols
        result = check_symbol_ratio("#$%^&*ab")
        assert result.is_gibberish is True
        assert result.reason == "excessive_symbols"

    def test_exactly_threshold_is_clean(self):
        # 7 of 10: strictly-greater comparison
        assert check_symbol_ratio("#$%^&*!abc").is_gibberish is False

    def test_spaces_are_not_symbols(self):
        assert check_symbol_ratio("a     b").is_gibberish is False


class TestPatternRepetition:

    def test_chunk_repeated_three_times_fires(self):
        result = check_pattern_repetition("abcabcabc")
        assert result.is_gibberish is True
        assert '"abc"' in result.description

    def test_chunk_repeated_twice_is_clean(self):
        assert check_pattern_repetition("abcabc").is_gibberish is False

    def test_laughter_fires(self):
        assert check_pattern_repetition("hahahaha").is_gibberish is True

    def test_scattered_repeats_in_prose_are_clean(self):
        assert check_pattern_repetition(GOOD_QUERY.lower()).is_gibberish is False


class TestRandomness:

    def test_entropy_of_empty_is_zero(self):
        assert shannon_entropy("") == 0.0

    def test_entropy_of_single_symbol_is_zero(self):
        assert shannon_entropy("aaaa") == 0.0

    def test_entropy_known_values(self):
        assert shannon_entropy("ab") == pytest.approx(1.0)
        assert shannon_entropy("abcd") == pytest.approx(2.0)

    def test_entropy_ignores_spaces(self):
        assert shannon_entropy("a b") == pytest.approx(1.0)

    def test_high_entropy_fires(self):
        # 26 distinct characters -> log2(26) ~ 4.70 bits
        result = check_randomness("a1b2c3d4e5f6g7h8i9j0klmnop")
        assert result.is_gibberish is True
        assert result.reason == "high_randomness"

    def test_short_text_never_fires(self):
        assert check_randomness("abcdefghij").is_gibberish is False

    def test_exactly_threshold_does_not_fire(self):
        # 8 chars at p=1/16 and 16 chars at p=1/32: 8*0.25 + 16*0.15625 = 4.5 bits
        text = "abcdefgh" * 2 + "ijklmnopqrstuvwx"
        assert shannon_entropy(text) == ENTROPY_THRESHOLD
        assert check_randomness(text).is_gibberish is False


class TestKeyboardMashing:

    @pytest.mark.parametrize("text", ["qwerty", "asdfgh", "zxcvbn", "xx asdfg xx"])
    def test_single_row_runs_fire(self, text):
        assert check_keyboard_mashing(text).is_gibberish is True

    @pytest.mark.parametrize("word", ["pretty", "property", "query", "retro", "report", "typewriter"])
    def test_real_single_row_words_are_clean(self, word):
        assert check_keyboard_mashing(word).is_gibberish is False

    @pytest.mark.parametrize("word", [
        "reporting", "powerful", "requirements", "properties", "rewrite",
        "rewriting", "writers", "quietly", "repeated",
    ])
    def test_inflected_single_row_words_are_clean(self, word):
        assert is_single_row_word(word) is True
        assert check_keyboard_mashing(word).is_gibberish is False

    def test_inflection_does_not_mask_mashing(self):
        assert is_single_row_word("qwertyuiop") is False
        assert check_keyboard_mashing("reporting qwertyuiop").is_gibberish is True

    def test_four_letter_run_is_clean(self):
        assert check_keyboard_mashing("asdf").is_gibberish is False

    def test_description_names_the_row(self):
        result = check_keyboard_mashing("qwertyuiop")
        assert "top row" in result.description


class TestNumberSequence:

    def test_six_digits_fires(self):
        assert check_number_sequence("123456").is_gibberish is True

    def test_five_digits_is_clean(self):
        assert check_number_sequence("12345").is_gibberish is False

    def test_digits_with_spaces_fire(self):
        assert check_number_sequence("123 456 789").is_gibberish is True

    def test_mixed_text_is_clean(self):
        assert check_number_sequence("page 123456").is_gibberish is False


class TestSingleCharacterSequence:

    def test_three_single_letters_fire(self):
        assert check_single_character_sequence("a b c").is_gibberish is True

    def test_longer_run_fires(self):
        assert check_single_character_sequence("a b c d e").is_gibberish is True

    def test_two_single_letters_are_clean(self):
        assert check_single_character_sequence("a b").is_gibberish is False

    def test_words_after_article_are_clean(self):
        assert check_single_character_sequence("a big button").is_gibberish is False


# ============================================================
# AGGREGATE
# ============================================================

class TestDetect:

    @pytest.mark.parametrize("query", ["", "   ", "\n\t"])
    def test_empty_input(self, query):
        result = detect(query)
        assert result.is_gibberish is True
        assert result.confidence == 1.0
        assert result.reason == "empty_input"
        assert result.details == []

    def test_good_query_is_valid(self):
        result = detect(GOOD_QUERY)
        assert result.is_gibberish is False
        assert result.confidence == 0.0
        assert result.reason == "valid"
        assert result.details == []

    def test_repeated_letters(self):
        result = detect("aaaaaaaaaa")
        assert result.is_gibberish is True
        assert result.reason == "repeated_characters"

    def test_confidence_is_mean_of_fired_checks(self):
        result = detect("aaaaaaaaaa")
        # also matches pattern repetition ("aa" x5)
        assert len(result.details) >= 2
        expected = sum(c.confidence for c in result.details) / len(result.details)
        assert result.confidence == pytest.approx(expected)

    def test_all_checks_run(self):
        result = detect("12345 67890 11111")
        reasons = [c.reason for c in result.details]
        assert "number_sequence" in reasons
        assert "repeated_characters" in reasons
        assert result.reason == "repeated_characters"

    def test_keyboard_mash_query(self):
        result = detect("asdfgh asdfgh asdfgh jkl")
        assert result.is_gibberish is True
        assert "keyboard_mashing" in [c.reason for c in result.details]

    def test_case_insensitive(self):
        assert detect("QWERTY").reason == "keyboard_mashing"

    def test_reason_follows_check_order(self):
        result = detect("aaaaaaaaaa")
        order = [fn.__name__ for fn in CHECKS]
        assert order[0] == "check_repeated_characters"
        assert result.reason == result.details[0].reason

    def test_strongest_reason(self):
        result = detect("abababab x")
        assert result.strongest_reason == "pattern_repetition"

    def test_strongest_reason_falls_back_to_reason(self):
        assert detect("").strongest_reason == "empty_input"

    def test_to_dict_shape(self):
        data = detect("aaaaaa").to_dict()
        assert set(data) == {"is_gibberish", "confidence", "reason", "details"}
        assert data["details"][0]["reason"] == "repeated_characters"
