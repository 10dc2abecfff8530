"""
utils/validation_utils.py

Purpose: Input validation

- Email and phone format checks
- Password length limits (bcrypt input cap)
- Input sanitization and regex escaping for substring filters
"""

import re
from typing import Optional


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

# bcrypt ignores (or rejects) input beyond 72 bytes
MAX_PASSWORD_BYTES = 72


def normalize_email(email: str) -> str:
    """
    Trims and lowercases an email address.
    """
    return email.strip().lower()


def validate_email(email: str) -> bool:
    """
    Validates basic email shape: local part, @, dotted domain.

    Args:
        email: Email address

    Returns:
        True if the address looks deliverable
    """
    if not email:
        return False

    return bool(re.match(EMAIL_PATTERN, email.strip()))


def validate_phone_number(phone: str) -> bool:
    """
    Validates a loosely formatted phone number.
    Accepts digits with optional +, spaces, dashes, dots and parentheses.

    Args:
        phone: Phone number string

    Returns:
        True if the number has between 7 and 15 digits
    """
    if not phone:
        return False

    if not re.match(r"^\+?[\d\s\-\.\(\)]+$", phone.strip()):
        return False

    digits = re.sub(r"\D", "", phone)
    return 7 <= len(digits) <= 15


def validate_password(password: str) -> bool:
    """
    Checks a plaintext password is non-empty and fits bcrypt's input limit.
    """
    if not password:
        return False

    return len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES


MAX_TEXT_LENGTH = 200


def sanitize_input(text: Optional[str]) -> Optional[str]:
    """
    Strips whitespace and control characters.
    Returns None for empty input.
    """
    if text is None:
        return None

    text = re.sub(r"[\x00-\x1f\x7f]", "", text).strip()
    if not text:
        return None

    return text


def substring_pattern(text: str) -> dict:
    """
    Builds a case-insensitive substring match for a MongoDB query.
    User input is escaped so it is matched literally.
    """
    return {"$regex": re.escape(text), "$options": "i"}
