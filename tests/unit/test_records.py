#!/usr/bin/env python3
"""Tests for record fields and argument pairing."""

from focuslog.for_logger.records import BAD_KEY, Field, args_to_fields, field, fields


class TestArgumentPairing:
    """Pairing variadic emit arguments into fields."""

    def test_key_value_pairs(self):
        """A string followed by a value becomes a named field."""
        assert args_to_fields(("user", "ada", "count", 3)) == [Field("user", "ada"), Field("count", 3)]

    def test_trailing_string_is_bad_key(self):
        """A lone trailing string is kept under the placeholder key."""
        assert args_to_fields(("user", "ada", "orphan")) == [Field("user", "ada"), Field(BAD_KEY, "orphan")]

    def test_bare_value_is_bad_key(self):
        """Non-string values without a key are kept under the placeholder key."""
        assert args_to_fields((42, "k", "v")) == [Field(BAD_KEY, 42), Field("k", "v")]

    def test_prebuilt_fields_pass_through(self):
        """Field descriptors are used as-is and do not consume the next argument."""
        prebuilt = field("request_id", "abc")
        assert args_to_fields((prebuilt, "k", 1)) == [prebuilt, Field("k", 1)]

    def test_value_may_be_a_string(self):
        """The value of a pair can itself be a string."""
        assert args_to_fields(("a", "b", "c", "d")) == [Field("a", "b"), Field("c", "d")]

    def test_keyword_fields_follow_positional(self):
        """Keyword arguments are appended after positional fields in order."""
        result = args_to_fields(("a", 1), {"b": 2, "c": 3})
        assert result == [Field("a", 1), Field("b", 2), Field("c", 3)]

    def test_empty(self):
        """No arguments produce no fields."""
        assert args_to_fields(()) == []

    def test_fields_helper(self):
        """fields() pairs its arguments like an emit call."""
        assert fields("a", 1, 2) == [Field("a", 1), Field(BAD_KEY, 2)]
