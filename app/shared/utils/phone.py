# app/shared/utils/phone.py

import re

DEFAULT_COUNTRY_CODE = "256"
MIN_DIGITS = 10
MAX_DIGITS = 15

_NON_DIALABLE = re.compile(r"[^\d+]")
_NON_DIGIT = re.compile(r"\D")


def normalize_phone(raw: str, country_code: str = DEFAULT_COUNTRY_CODE) -> str:
    """
    Canonicalize a raw phone string into international form.

    Everything except digits is stripped; a ``+`` survives only as the first
    dialable character. Numbers without that leading ``+`` are treated as
    local: leading zeros are dropped and the default country code is
    prepended unless the digits already start with it.

    Args:
        raw: Phone number as typed by the caller
        country_code: Country code used for local numbers, without ``+``

    Returns:
        Number in ``+<digits>`` form
    """
    raw = raw or ""
    international = _NON_DIALABLE.sub("", raw).startswith("+")
    digits = _NON_DIGIT.sub("", raw)

    if international:
        return "+" + digits

    digits = digits.lstrip("0")
    if not digits.startswith(country_code):
        digits = country_code + digits
    return "+" + digits


def is_valid_phone(raw: str, country_code: str = DEFAULT_COUNTRY_CODE) -> bool:
    """Normalize and check the digit count lies in [10, 15]."""
    digits = sum(ch.isdigit() for ch in normalize_phone(raw, country_code))
    return MIN_DIGITS <= digits <= MAX_DIGITS
