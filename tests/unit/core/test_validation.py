"""Tests for argument validation helpers."""

import pytest

from gridkernel.core.validation import is_blank, optional_text, require_text, truncate
from gridkernel.exceptions import ContextValidationError


@pytest.mark.unit
class TestValidation:
    @pytest.mark.parametrize("value, expected", [
        (None, True), ("", True), ("  \t", True), ("x", False), (" x ", False),
    ])
    def test_is_blank(self, value, expected):
        assert is_blank(value) is expected

    def test_require_text(self):
        assert require_text("value", "field") == "value"

    @pytest.mark.parametrize("value", [None, "", "   ", 5])
    def test_require_text_rejects(self, value):
        with pytest.raises(ContextValidationError) as exc_info:
            require_text(value, "field")

        assert exc_info.value.field == "field"
        assert isinstance(exc_info.value, ValueError)

    def test_optional_text(self):
        assert optional_text("  ") is None
        assert optional_text(None) is None
        assert optional_text("t") == "t"

    @pytest.mark.parametrize("value, expected", [
        (None, None), ("abc", "abc"), ("abcdef", "abcd"),
    ])
    def test_truncate(self, value, expected):
        assert truncate(value, 4) == expected
