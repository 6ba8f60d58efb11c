"""Tests for input sanitization utilities."""
import pytest

from rangevote.core.sanitization import (
    sanitize_text,
    sanitize_name,
    sanitize_description,
    sanitize_search_term,
    validate_image_link,
    validate_token_format,
    validate_id_format,
    MAX_BALLOT_NAME_LENGTH,
    MAX_TOKEN_LENGTH,
)
from rangevote.core.utils import new_id


class TestSanitizeText:
    """Tests for sanitize_text function."""

    def test_sanitize_basic_text(self):
        assert sanitize_text("Hello World") == "Hello World"

    def test_sanitize_with_html_tags(self):
        """Test that HTML tags are stripped."""
        result = sanitize_text("<script>alert('xss')</script>")
        assert result == "alert('xss')"

    def test_sanitize_preserves_quotes_and_ampersands(self):
        assert sanitize_text('A & "B"') == 'A & "B"'

    def test_sanitize_normalizes_whitespace(self):
        assert sanitize_text("  Hello    World  ") == "Hello World"

    def test_sanitize_with_max_length(self):
        with pytest.raises(ValueError, match="exceeds maximum length"):
            sanitize_text("a" * 11, max_length=10)

    def test_sanitize_rejects_leftover_angle_brackets(self):
        with pytest.raises(ValueError):
            sanitize_text("1 < 2")


class TestNamesAndDescriptions:

    def test_name_required(self):
        with pytest.raises(ValueError, match="Ballot name cannot be empty"):
            sanitize_name("<b></b>", MAX_BALLOT_NAME_LENGTH, "Ballot name")

    def test_name_sanitized(self):
        assert sanitize_name("  <i>Best</i> Fruit ", MAX_BALLOT_NAME_LENGTH) == "Best Fruit"

    def test_blank_description_becomes_none(self):
        assert sanitize_description("   ") is None
        assert sanitize_description(None) is None

    def test_blank_search_term_becomes_none(self):
        assert sanitize_search_term("  ") is None
        assert sanitize_search_term(" pizza ") == "pizza"


class TestValidateImageLink:

    def test_accepts_https(self):
        assert validate_image_link(" https://example.com/a.png ") == "https://example.com/a.png"

    @pytest.mark.parametrize("link", ["javascript:alert(1)", "ftp://example.com/a.png", "data:image/png;base64,AAAA"])
    def test_rejects_other_schemes(self, link):
        with pytest.raises(ValueError):
            validate_image_link(link)

    def test_blank_is_none(self):
        assert validate_image_link("") is None


class TestValidateTokenFormat:

    def test_valid_token(self):
        assert validate_token_format("abc_DEF-123") == "abc_DEF-123"

    def test_too_long(self):
        with pytest.raises(ValueError):
            validate_token_format("a" * (MAX_TOKEN_LENGTH + 1))

    @pytest.mark.parametrize("token", ["", "   ", "abc+def", "abc/def", "abc=", "a b"])
    def test_invalid_tokens(self, token):
        with pytest.raises(ValueError):
            validate_token_format(token)


class TestValidateIdFormat:

    def test_valid_uuid(self):
        value = new_id()
        assert validate_id_format(value) == value

    @pytest.mark.parametrize("value", ["", "123", "not-a-uuid", None])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            validate_id_format(value)
