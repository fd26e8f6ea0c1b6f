"""
Tests for the edge weight codec
"""

import pytest

from prereq_graph.core import parse_weight, format_weight, DEFAULT_WEIGHT


class TestParseWeight:
    """Tests for parse_weight"""

    @pytest.mark.parametrize("label,expected", [
        ("C7", 7),
        ("C1", 1),
        ("C12", 12),
        ("3", 3),
        (" C4 ", 4),
    ])
    def test_prefixed_and_plain_integers(self, label, expected):
        assert parse_weight(label) == expected

    @pytest.mark.parametrize("label", ["garbage", "", "C", "Cx", "   "])
    def test_unparsable_labels_default_to_one(self, label):
        assert parse_weight(label) == DEFAULT_WEIGHT == 1

    def test_missing_label_defaults_to_one(self):
        assert parse_weight(None) == 1

    def test_zero_weight_becomes_one(self):
        """A zero weight would make an edge free; it counts as 1"""
        assert parse_weight("C0") == 1
        assert parse_weight("0") == 1

    def test_trailing_text_is_ignored(self):
        assert parse_weight("C3 credits") == 3

    def test_negative_weight_is_kept(self):
        assert parse_weight("C-2") == -2

    def test_custom_prefix(self):
        assert parse_weight("W5", prefix="W") == 5
        assert parse_weight("C5", prefix="W") == 1


class TestFormatWeight:
    """Tests for format_weight"""

    def test_formats_with_prefix(self):
        assert format_weight(3) == "C3"

    def test_parse_reads_formatted_label(self):
        assert parse_weight(format_weight(9)) == 9
