"""Tests for text normalisation."""

import pytest

from marking.normalizer import (
    canonical_text,
    normalize,
    tokens,
    unsubscript,
)


class TestNormalize:
    """Token-set normalisation."""

    def test_lower_cases_and_splits(self):
        assert normalize("Kill Bacteria") == frozenset({"kill", "bacteria"})

    def test_order_insensitive(self):
        assert normalize("Kill Bacteria") == normalize("bacteria kill")

    def test_strips_periods_commas_semicolons(self):
        assert normalize("kill, bacteria; quickly.") == frozenset({"kill", "bacteria", "quickly"})

    def test_punctuation_splits_words(self):
        assert normalize("heat;light") == frozenset({"heat", "light"})

    def test_collapses_whitespace(self):
        assert normalize("  kill \t\n  bacteria  ") == frozenset({"kill", "bacteria"})

    @pytest.mark.parametrize("text", ["", "   ", "\n\t", None, ".,;"])
    def test_empty_input_gives_empty_set(self, text):
        assert normalize(text) == frozenset()

    def test_subscript_equivalence(self):
        assert normalize("CO₂") == normalize("CO2") == frozenset({"co2"})

    def test_multi_digit_subscripts(self):
        assert normalize("C₆H₁₂O₆") == normalize("c6h12o6")

    def test_keeps_decimal_point(self):
        assert normalize("3.5 m") == frozenset({"3.5", "m"})

    def test_keeps_thousands_separator(self):
        assert "1,000" in normalize("about 1,000 cells")

    def test_keeps_formula_characters(self):
        assert normalize("Ca(OH)2 + H2O") == frozenset({"ca(oh)2", "+", "h2o"})

    def test_keeps_charge_signs(self):
        assert normalize("Fe3+ and Cl-") == frozenset({"fe3+", "and", "cl-"})

    def test_unicode_minus(self):
        assert normalize("−5") == normalize("-5")

    def test_deterministic(self):
        text = "The enzyme is Denatured, at 60 °C."
        assert normalize(text) == normalize(text)


class TestHelpers:
    """Ordered tokens and canonical text."""

    def test_tokens_keep_first_occurrence_order(self):
        assert tokens("Bacteria cause illness, bacteria") == ("bacteria", "cause", "illness")

    def test_canonical_text(self):
        assert canonical_text("  Kill   BACTERIA. ") == "kill bacteria"

    def test_canonical_text_none(self):
        assert canonical_text(None) == ""

    def test_unsubscript(self):
        assert unsubscript("C₆H₁₂O₆") == "C6H12O6"


class TestWrittenForms:
    """Numbers, fractions, temperatures and quotes written different ways."""

    @pytest.mark.parametrize("word, digit", [("one", "1"), ("two", "2"), ("seven", "7"), ("ten", "10")])
    def test_number_words_become_digits(self, word, digit):
        assert normalize(f"{word} electrons") == frozenset({digit, "electrons"})

    def test_number_words_match_digits(self):
        assert normalize("Two Electrons") == normalize("2 electrons")

    def test_number_word_inside_longer_word_kept(self):
        assert normalize("someone often") == frozenset({"someone", "often"})

    def test_unicode_fraction(self):
        assert normalize("½ the dose") == normalize("0.5 the dose") == frozenset({"0.5", "the", "dose"})

    def test_unicode_fraction_after_whole_number(self):
        assert canonical_text("1½ hours") == "1 0.5 hours"

    def test_written_fraction_becomes_decimal(self):
        assert normalize("3/4") == normalize("¾") == frozenset({"0.75"})
        assert normalize("4 / 2") == frozenset({"2"})

    def test_zero_denominator_kept(self):
        assert normalize("1/0") == frozenset({"1/0"})

    @pytest.mark.parametrize("text, token", [("37°C", "37degc"), ("98.6 °F", "degf")])
    def test_degrees(self, text, token):
        assert token in normalize(text)

    def test_degrees_match_written_unit(self):
        assert normalize("at 37°C") == normalize("at 37degc")

    def test_strips_straight_and_curly_quotes(self):
        assert normalize('"osmosis"') == normalize("“osmosis”") == frozenset({"osmosis"})
        assert normalize("the cell's ‘wall’") == frozenset({"the", "cells", "wall"})
