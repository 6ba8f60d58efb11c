"""Input sanitization utilities."""
import re
from typing import Optional

from rangevote.core.utils import is_valid_id


# Maximum length constraints for security
MAX_BALLOT_NAME_LENGTH = 200
MAX_CANDIDATE_NAME_LENGTH = 200
MAX_ORGANIZATION_NAME_LENGTH = 255
MAX_DESCRIPTION_LENGTH = 5000
MAX_SEARCH_TERM_LENGTH = 100
MAX_TOKEN_LENGTH = 100        # Share tokens are 43 chars of URL-safe base64
MAX_URL_LENGTH = 500


def sanitize_text(text: str, max_length: Optional[int] = None, strip_html: bool = True) -> str:
    """
    Sanitize text input to prevent XSS attacks.

    Strips HTML tags and normalizes whitespace. Output is not HTML-escaped;
    escaping is the renderer's job.

    Raises:
        ValueError: If text exceeds max_length or contains dangerous patterns
    """
    if not isinstance(text, str):
        raise ValueError("Input must be a string")

    sanitized = text.strip()

    # Enforce maximum length before processing to prevent length-based attacks
    if max_length and len(sanitized) > max_length:
        raise ValueError(f"Input exceeds maximum length of {max_length} characters")

    if strip_html:
        sanitized = re.sub(r'<[^>]*>', '', sanitized)

    # Reject inputs that still contain HTML-like patterns after stripping
    if '<' in sanitized or '>' in sanitized:
        raise ValueError("Input contains invalid HTML-like patterns")

    sanitized = re.sub(r'\s+', ' ', sanitized)

    return sanitized


def sanitize_name(name: str, max_length: int, label: str = "Name") -> str:
    """Sanitize a required display name (ballot, candidate, organization)."""
    sanitized = sanitize_text(name, max_length=max_length)

    if not sanitized:
        raise ValueError(f"{label} cannot be empty")

    return sanitized


def sanitize_description(description: Optional[str]) -> Optional[str]:
    """Sanitize an optional free-text description; blank becomes ``None``."""
    if description is None:
        return None
    sanitized = sanitize_text(description, max_length=MAX_DESCRIPTION_LENGTH)
    return sanitized or None


def sanitize_search_term(term: Optional[str]) -> Optional[str]:
    """Normalize a marketplace search term; blank becomes ``None``."""
    if term is None:
        return None
    sanitized = sanitize_text(term, max_length=MAX_SEARCH_TERM_LENGTH)
    return sanitized or None


def validate_image_link(link: Optional[str]) -> Optional[str]:
    """Accept only http(s) URLs for candidate images."""
    if link is None:
        return None

    link = link.strip()
    if not link:
        return None

    if len(link) > MAX_URL_LENGTH:
        raise ValueError(f"Image link exceeds maximum length of {MAX_URL_LENGTH} characters")

    if not re.match(r'^https?://[^\s<>"]+$', link):
        raise ValueError("Image link must be an http(s) URL")

    return link


def validate_token_format(token: str) -> str:
    """
    Validate share token format before processing.

    Tokens should be URL-safe base64 strings.
    This prevents malformed tokens from causing unnecessary database queries.

    Raises:
        ValueError: If token format is invalid
    """
    if not isinstance(token, str):
        raise ValueError("Token must be a string")

    token = token.strip()

    if not token:
        raise ValueError("Token cannot be empty")

    if len(token) > MAX_TOKEN_LENGTH:
        raise ValueError(f"Token exceeds maximum length of {MAX_TOKEN_LENGTH} characters")

    # URL-safe base64 uses: A-Z, a-z, 0-9, -, _
    if not re.match(r'^[A-Za-z0-9_-]+$', token):
        raise ValueError("Token format is invalid (must be URL-safe base64)")

    return token


def validate_id_format(value: str, label: str = "Identifier") -> str:
    """Reject identifiers that are not canonical UUID strings."""
    if not isinstance(value, str) or not is_valid_id(value.strip()):
        raise ValueError(f"{label} is not a valid identifier")
    return value.strip()
