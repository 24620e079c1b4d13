import re
from typing import List

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")
SPECIAL_CHARACTERS = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_phone(phone: str) -> str:
    return re.sub(r"\s", "", phone)


def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email or ""))


def validate_phone(phone: str) -> bool:
    return bool(PHONE_PATTERN.match(normalize_phone(phone or "")))


def validate_password(password: str) -> List[str]:
    """Return every unmet password rule; empty list means the password is acceptable."""
    errors = []

    if len(password) < 8:
        errors.append("Password must be at least 8 characters long")

    if not re.search(r"[A-Z]", password):
        errors.append("Password must contain at least one uppercase letter")

    if not re.search(r"[a-z]", password):
        errors.append("Password must contain at least one lowercase letter")

    if not re.search(r"\d", password):
        errors.append("Password must contain at least one number")

    if not SPECIAL_CHARACTERS.search(password):
        errors.append("Password must contain at least one special character")

    return errors
