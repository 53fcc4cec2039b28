"""
Phone and e-mail identifier helpers.

The backend stores phone numbers as digits only with the country code
(e.g. 923001234567) and e-mails lower-cased. Every lookup, credential
derivation and comparison goes through these functions.
"""

import re
from typing import Optional

_NON_DIGITS = re.compile(r"\D")


def normalize_phone_digits(phone: str, country_code: str = "92", mobile_prefix: str = "3") -> str:
    """
    Normalize a phone number to digits with the country code.

    A bare 10-digit number only gets the country code when it starts with
    the local mobile prefix; other numbers are kept as dialled.

    Examples (country_code="92"):
        "+92 300 1234567" -> "923001234567"
        "00923001234567"  -> "923001234567"
        "03001234567"     -> "923001234567"
        "3001234567"      -> "923001234567"
        "2025550123"      -> "2025550123"
    """
    if not phone:
        return ""
    digits = _NON_DIGITS.sub("", phone)
    if not digits:
        return ""
    if digits.startswith("00" + country_code):
        digits = digits[2:]
    if digits.startswith(country_code):
        return digits
    if digits.startswith("0"):
        return country_code + digits[1:]
    if len(digits) == 10 and digits.startswith(mobile_prefix):
        return country_code + digits
    return digits


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def is_email(identifier: str) -> bool:
    return "@" in identifier


def mask_identifier(identifier: str) -> str:
    """Mask an identifier for log output, keeping just enough to correlate."""
    if not identifier:
        return "<none>"
    if is_email(identifier):
        local, _, domain = identifier.partition("@")
        return f"{local[:2]}***@{domain}"
    return f"***{identifier[-4:]}"


def recover_identifiers(
    email: Optional[str],
    phone: Optional[str],
    metadata: Optional[dict],
    synthetic_domain: str,
) -> tuple[Optional[str], Optional[str]]:
    """
    Recover the real (phone, email) behind a backend account.

    Bridged accounts sign in with a synthetic address under synthetic_domain
    and keep the real identifier in their user metadata.
    """
    metadata = metadata or {}
    real_phone = phone or metadata.get("phone") or None
    real_email = metadata.get("email") or None
    if not real_email and email and not email.lower().endswith("@" + synthetic_domain.lower()):
        real_email = email
    return real_phone, real_email
