"""
utils/validation_utils.py

Purpose: Input validation

- Email format and normalization
- Password strength
- Plan price and duration strings
- Input sanitization
"""

import re
from typing import Optional


EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)+$")


def normalize_email(email: Optional[str]) -> str:
    """Trims and lower-cases an email address."""
    if not email:
        return ""
    return email.strip().lower()


def validate_email(email: Optional[str]) -> bool:
    """
    Validates email format.

    Args:
        email: Email address

    Returns:
        True if the address looks deliverable, False otherwise
    """
    if not email:
        return False

    email = email.strip()
    if len(email) > 254 or ".." in email:
        return False

    return bool(EMAIL_PATTERN.match(email))


def validate_password(password: Optional[str], min_length: int = 6) -> bool:
    """
    Checks a password against the minimum strength the auth store accepts.
    """
    if not password:
        return False
    return len(password) >= min_length and not password.isspace()


def validate_price(price: Optional[str]) -> bool:
    """Plan prices are stored as strings holding a non-negative number."""
    if price is None:
        return False
    try:
        return float(price.strip()) >= 0
    except ValueError:
        return False


def validate_duration_days(days: Optional[str]) -> bool:
    """Plan durations are stored as strings holding a positive whole number of days."""
    if days is None:
        return False
    days = days.strip()
    return days.isdigit() and int(days) > 0


def sanitize_input(text: str, max_length: int = 1000) -> str:
    """
    Sanitizes free-text input before it is stored.

    Args:
        text: Input text
        max_length: Maximum allowed length

    Returns:
        Sanitized text
    """
    if not text:
        return ""

    text = text[:max_length]

    # Remove characters that would break rendered HTML
    text = re.sub(r"[<>{}\[\]]", "", text)

    # Normalize whitespace
    text = " ".join(text.split())

    return text.strip()
