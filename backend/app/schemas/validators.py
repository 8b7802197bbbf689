"""Reusable Pydantic validators for input validation.

Each raises ValueError with a user-facing message; the API returns the
first violated rule's message.

- Email / phone / URL format
- String trimming with a length cap
- Positive quantities
- Date ordering (e.g. expected birth after breeding)
"""

import re
from datetime import date

# Regex patterns
EMAIL_REGEX = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
PHONE_REGEX = re.compile(r"^\+?\d{7,15}$")  # E.164 or local format with leading 0
URL_REGEX = re.compile(
    r"^https?://"  # http:// or https://
    r"(?:(?:[A-Z0-9](?:[A-Z0-9-]{0,61}[A-Z0-9])?\.)+[A-Z]{2,6}\.?|"  # domain
    r"localhost|"  # localhost
    r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})"  # IP
    r"(?::\d+)?"  # optional port
    r"(?:/?|[/?]\S+)$",
    re.IGNORECASE,
)


def sanitize_string(value: str, max_length: int = 1000) -> str:
    """Trim whitespace and enforce a maximum length.

    Raises:
        ValueError: If empty after trimming or too long
    """
    if not isinstance(value, str):
        raise ValueError("Must be a string")

    value = value.strip()
    if not value:
        raise ValueError("Value is required")

    if len(value) > max_length:
        raise ValueError(f"String too long (max {max_length} characters)")

    return value


def validate_email(value: str | None) -> str | None:
    """Validate email address; returns it lowercased.

    Raises:
        ValueError: If email is invalid
    """
    if value is None or value == "":
        return None

    value = value.strip().lower()

    if len(value) > 254:  # RFC 5321
        raise ValueError("Email address too long")

    if not EMAIL_REGEX.match(value):
        raise ValueError("Invalid email address format")

    return value


def validate_phone(value: str | None) -> str | None:
    """Validate phone number (E.164 or local digits).

    Raises:
        ValueError: If phone number is invalid
    """
    if value is None or value == "":
        return None

    value = value.replace(" ", "").replace("-", "")

    if not PHONE_REGEX.match(value):
        raise ValueError("Invalid phone number format (use +2348012345678 or 08012345678)")

    return value


def validate_url(value: str | None) -> str | None:
    """Validate an http(s) URL.

    Raises:
        ValueError: If URL is invalid
    """
    if value is None or value == "":
        return None

    value = value.strip()

    if not URL_REGEX.match(value):
        raise ValueError("Invalid URL format")

    return value


def validate_positive(value: float | None, label: str = "Quantity") -> float | None:
    """Reject zero and negative numbers (None passes)."""
    if value is not None and value <= 0:
        raise ValueError(f"{label} must be greater than 0")
    return value


def validate_date_order(
    earlier: date | None,
    later: date | None,
    message: str,
    allow_equal: bool = False,
) -> None:
    """Raise `message` when both dates are set and `later` isn't after `earlier`."""
    if earlier is None or later is None:
        return
    if later < earlier or (later == earlier and not allow_equal):
        raise ValueError(message)
