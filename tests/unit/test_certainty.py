"""Unit tests for the CBM engine: adjust_fraction, summaries, levels."""

import pytest

from qbehaviour.engines.cbm import (
    CertaintyLevel,
    adjust_fraction,
    certainty_label,
    default_certainty,
    summary_with_certainty,
)


class TestAdjustFraction:
    """Tests for the certainty score table."""

    def test_right_answer_scaled_by_certainty(self):
        """Full marks become 1, 2, 3 for LOW, MED, HIGH."""
        assert adjust_fraction(1.0, CertaintyLevel.LOW) == 1.0
        assert adjust_fraction(1.0, CertaintyLevel.MED) == 2.0
        assert adjust_fraction(1.0, CertaintyLevel.HIGH) == 3.0

    def test_partial_answer_scaled(self):
        """Partial credit is multiplied, not replaced."""
        assert adjust_fraction(0.8, CertaintyLevel.HIGH) == pytest.approx(2.4)
        assert adjust_fraction(0.5, CertaintyLevel.MED) == pytest.approx(1.0)

    def test_wrong_answer_penalty(self):
        """Zero scores 0, -2, -6 for LOW, MED, HIGH."""
        assert adjust_fraction(0.0, CertaintyLevel.LOW) == 0.0
        assert adjust_fraction(0.0, CertaintyLevel.MED) == -2.0
        assert adjust_fraction(0.0, CertaintyLevel.HIGH) == -6.0

    def test_negative_fraction_counts_as_wrong(self):
        """Negative fractions get the wrong-answer score."""
        assert adjust_fraction(-1.0, CertaintyLevel.HIGH) == -6.0

    def test_tiny_fraction_counts_as_wrong(self):
        """Rounding noise just above zero is still wrong."""
        assert adjust_fraction(0.00000001, CertaintyLevel.MED) == -2.0

    def test_accepts_numeric_strings(self):
        """Certainty straight from form data is parsed."""
        assert adjust_fraction(1.0, "2") == 2.0

    @pytest.mark.parametrize("certainty", list(CertaintyLevel))
    @pytest.mark.parametrize("fraction", [-1.0, -0.3, 0.0, 0.1, 0.5, 0.99, 1.0])
    def test_output_within_certainty_bounds(self, fraction, certainty):
        """Any fraction in [-1, 1] maps inside [adjust(-1, c), adjust(1, c)]."""
        adjusted = adjust_fraction(fraction, certainty)
        assert adjust_fraction(-1.0, certainty) <= adjusted <= adjust_fraction(1.0, certainty)
        assert adjusted == adjust_fraction(fraction, certainty)

    def test_higher_certainty_never_softens_penalty(self):
        """Wrong-answer scores are non-increasing as certainty rises."""
        scores = [adjust_fraction(0.0, c) for c in sorted(CertaintyLevel)]
        assert scores == sorted(scores, reverse=True)


class TestCertaintyLevel:
    """Tests for level parsing and defaults."""

    def test_default_is_low(self):
        assert default_certainty() == CertaintyLevel.LOW

    def test_ordering(self):
        assert CertaintyLevel.LOW < CertaintyLevel.MED < CertaintyLevel.HIGH

    def test_parse(self):
        assert CertaintyLevel.parse(3) is CertaintyLevel.HIGH
        assert CertaintyLevel.parse("1") is CertaintyLevel.LOW
        assert CertaintyLevel.parse(CertaintyLevel.MED) is CertaintyLevel.MED

    @pytest.mark.parametrize("value", [0, 4, "high", None, ""])
    def test_parse_rejects_unknown(self, value):
        with pytest.raises(ValueError):
            CertaintyLevel.parse(value)

    def test_labels(self):
        assert certainty_label(CertaintyLevel.LOW) == "C=1 (Unsure: <67%)"
        assert certainty_label(CertaintyLevel.HIGH) == "C=3 (Quite sure: >80%)"


class TestSummaryWithCertainty:
    """Tests for summary annotation."""

    def test_appends_short_label(self):
        assert summary_with_certainty("Files: a.py", CertaintyLevel.MED) == "Files: a.py [C=2]"

    def test_no_certainty_leaves_summary(self):
        assert summary_with_certainty("Files: a.py", None) == "Files: a.py"
        assert summary_with_certainty(None, None) is None

    def test_empty_summary(self):
        assert summary_with_certainty(None, CertaintyLevel.HIGH) == "[C=3]"
