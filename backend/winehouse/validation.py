from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from winehouse.errors import ValidationError
from winehouse.time_utils import parse_iso_date


# Maximum price: $9,999,999.99 (999,999,999 cents)
MAX_PRICE_CENTS = 999_999_999

CONTACT_NUMBER_RE = re.compile(r"^\d{11}$")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_PASSWORD_LENGTH = 6


def require_text(value: Any, field: str, *, max_length: int | None = None) -> str:
    """Strip and require a non-blank string."""
    if value is None:
        raise ValidationError(f"{field} is required")
    text = str(value).strip()
    if not text:
        raise ValidationError(f"{field} is required")
    if max_length and len(text) > max_length:
        raise ValidationError(f"{field} exceeds max length {max_length}")
    return text


def optional_text(value: Any, *, max_length: int | None = None, field: str = "value") -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if max_length and len(text) > max_length:
        raise ValidationError(f"{field} exceeds max length {max_length}")
    return text


def coerce_int(value: Any, field: str) -> int:
    """
    Strict integer coercion: rejects floats, decimals and scientific notation.
    """
    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{field} must be an integer")
        if "e" in stripped.lower():
            raise ValidationError(f"{field} must be a plain integer (scientific notation not allowed)")
        if "." in stripped:
            raise ValidationError(f"{field} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    if isinstance(value, float):
        raise ValidationError(f"{field} must be an integer, not a decimal")
    raise ValidationError(f"{field} must be an integer")


def require_positive_int(value: Any, field: str) -> int:
    number = coerce_int(value, field)
    if number <= 0:
        raise ValidationError(f"{field} must be greater than 0")
    return number


def require_price_cents(value: Any, field: str = "unit_price_cents") -> int:
    """Prices are stored as integer cents; must be > 0."""
    cents = coerce_int(value, field)
    if cents <= 0:
        raise ValidationError("Price must be greater than 0")
    if cents > MAX_PRICE_CENTS:
        raise ValidationError(f"{field} cannot exceed {MAX_PRICE_CENTS} (${MAX_PRICE_CENTS / 100:,.2f})")
    return cents


def price_to_cents(value: Any, field: str = "price") -> int:
    """
    Convert a decimal money amount ("12.50", 12.5) to integer cents.
    Rejects more than two decimal places.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError(f"Invalid {field} value")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid {field} value")
    if not amount.is_finite():
        raise ValidationError(f"Invalid {field} value")
    cents = amount * 100
    if cents != cents.to_integral_value():
        raise ValidationError(f"{field} cannot have more than two decimal places")
    return require_price_cents(int(cents), field)


def price_cents_from_payload(payload: dict) -> int:
    """Routes accept either unit_price_cents (int) or price (decimal)."""
    if payload.get("unit_price_cents") is not None:
        return require_price_cents(payload["unit_price_cents"])
    return price_to_cents(payload.get("price"))


def require_date(value: Any, field: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} is required")
    try:
        parsed = parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"{field} must be an ISO-8601 date")
    if parsed is None:
        raise ValidationError(f"{field} is required")
    return parsed


def validate_contact_number(value: Any) -> str:
    number = require_text(value, "Contact number")
    if not CONTACT_NUMBER_RE.match(number):
        raise ValidationError("Contact number must be 11 digits")
    return number


def validate_email(value: Any) -> str:
    email = require_text(value, "Email address", max_length=255)
    if not EMAIL_RE.match(email):
        raise ValidationError("Please enter a valid email address")
    return email.lower()


def validate_password(password: Any) -> str:
    if not isinstance(password, str) or not password:
        raise ValidationError("Password is required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    return password


def enforce_rules_stock(*, quantity: int, date_added: date, expiry_date: date) -> None:
    """
    Business rules for a new stock lot that are not captured by column
    metadata alone.
    """
    if quantity <= 0:
        raise ValidationError("Quantity must be greater than 0")
    if expiry_date <= date_added:
        raise ValidationError("Expiry date must be later than the added date")
