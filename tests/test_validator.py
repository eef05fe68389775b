"""Tests for protoloop.utils.validator.validate_input."""

import pytest

from protoloop.utils.validator import validate_input


class TestValidateInput:
    def test_valid_string_returns_stripped(self):
        assert validate_input("Build a counter") == "Build a counter"

    def test_leading_trailing_whitespace_stripped(self):
        assert validate_input("  some component  ") == "some component"

    def test_empty_string_raises(self):
        with pytest.raises(ValueError):
            validate_input("")

    def test_whitespace_only_raises(self):
        with pytest.raises(ValueError):
            validate_input("   ")

    def test_none_raises(self):
        with pytest.raises(ValueError):
            validate_input(None)

    def test_non_string_list_raises(self):
        with pytest.raises(ValueError):
            validate_input(["counter"])
