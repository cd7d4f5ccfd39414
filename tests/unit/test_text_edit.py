"""
Unit tests for text ranges and edits
"""

import pytest

from field_reorder.core.text_edit import (
    Replacement,
    TextEdit,
    TextEditBuilder,
    TextRange,
)


class TestTextRange:
    """Test text range helpers"""

    def test_length_and_str(self):
        """Test range length and display"""
        text_range = TextRange(3, 8)

        assert len(text_range) == 5
        assert str(text_range) == "3..8"

    def test_invalid_range(self):
        """Test start after end is rejected"""
        with pytest.raises(ValueError):
            TextRange(5, 2)

    def test_contains_is_inclusive(self):
        """Test both ends count as inside"""
        text_range = TextRange(3, 8)

        assert text_range.contains(3)
        assert text_range.contains(8)
        assert not text_range.contains(9)

    def test_intersects_and_cover(self):
        """Test overlap detection and covering range"""
        left = TextRange(0, 5)
        right = TextRange(5, 9)

        assert not left.intersects(right)
        assert left.intersects(TextRange(4, 6))
        assert left.cover(right) == TextRange(0, 9)
        assert left.cover(right).contains_range(right)


class TestTextEdit:
    """Test applying edits"""

    def test_apply_replacements(self):
        """Test replacements are applied against the original offsets"""
        edit = TextEdit(
            (
                Replacement(TextRange(0, 3), "foo"),
                Replacement(TextRange(4, 7), "bar"),
            )
        )

        assert edit.apply("bar foo!") == "foo bar!"
        assert len(edit) == 2
        assert not edit.is_empty

    def test_empty_edit(self):
        """Test an empty edit leaves text unchanged"""
        edit = TextEdit()

        assert edit.is_empty
        assert edit.apply("unchanged") == "unchanged"

    def test_apply_out_of_bounds(self):
        """Test a replacement past the end of text is rejected"""
        edit = TextEdit((Replacement(TextRange(2, 20), "x"),))

        with pytest.raises(ValueError):
            edit.apply("short")


class TestTextEditBuilder:
    """Test building edits"""

    def test_finish_sorts_replacements(self):
        """Test replacements are ordered by position"""
        builder = TextEditBuilder()
        builder.replace(TextRange(6, 9), "C")
        builder.delete(TextRange(0, 1))
        builder.insert(3, "B")

        edit = builder.finish()

        assert [r.range.start for r in edit] == [0, 3, 6]
        assert edit.apply("abcdefghi") == "bcBdefC"

    def test_insert_at_same_offset_keeps_call_order(self):
        """Test insertions at one offset are applied in call order"""
        builder = TextEditBuilder()
        builder.insert(1, "x")
        builder.insert(1, "y")

        assert builder.finish().apply("ab") == "axyb"

    def test_overlap_rejected(self):
        """Test overlapping replacements raise ValueError"""
        builder = TextEditBuilder()
        builder.replace(TextRange(0, 4), "a")
        builder.replace(TextRange(2, 6), "b")

        with pytest.raises(ValueError, match="Overlapping"):
            builder.finish()

    def test_adjacent_replacements_allowed(self):
        """Test replacements touching at one offset do not overlap"""
        builder = TextEditBuilder()
        builder.replace(TextRange(0, 2), "X")
        builder.replace(TextRange(2, 4), "Y")

        assert builder.finish().apply("abcd") == "XY"
