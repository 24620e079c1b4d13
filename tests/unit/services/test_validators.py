from src.app.services.validators import (
    normalize_email,
    normalize_phone,
    validate_email,
    validate_password,
    validate_phone,
)


def test_short_password_reports_every_missing_rule():
    errors = validate_password("short")

    assert "Password must be at least 8 characters long" in errors
    assert "Password must contain at least one uppercase letter" in errors
    assert "Password must contain at least one number" in errors
    assert "Password must contain at least one special character" in errors
    # "short" has lowercase letters
    assert "Password must contain at least one lowercase letter" not in errors


def test_minimal_valid_password_passes():
    assert validate_password("Aa1!aaaa") == []


def test_password_rules_individually():
    assert validate_password("aa1!aaaa") == ["Password must contain at least one uppercase letter"]
    assert validate_password("AA1!AAAA") == ["Password must contain at least one lowercase letter"]
    assert validate_password("Aab!aaaa") == ["Password must contain at least one number"]
    assert validate_password("Aa1aaaaa") == ["Password must contain at least one special character"]


def test_validate_email():
    assert validate_email("a@b.com")
    assert not validate_email("a@b")
    assert not validate_email("a b@c.com")
    assert not validate_email("")


def test_validate_phone_ignores_whitespace():
    assert validate_phone("+1 415 555 0100")
    assert validate_phone("14155550100")
    assert not validate_phone("+0123")
    assert not validate_phone("phone")
    assert not validate_phone("+1234567890123456")


def test_normalizers():
    assert normalize_email("  A@B.Com ") == "a@b.com"
    assert normalize_phone("+1 415 555 0100") == "+14155550100"
