"""
Phone number canonicalization for ResellerHub.

Customer phones are typed by hand in every imaginable format, so lookups
search for every digit-string a number could have been stored as:
with or without the 55 country code, and with or without the mobile 9
after the area code.
"""

from __future__ import annotations

import re

from apps.common.constants import (
    AREA_CODE_LENGTH,
    COUNTRY_CODE,
    LANDLINE_LOCAL_LENGTH,
    MIN_LENGTH_WITH_COUNTRY_CODE,
    MOBILE_LOCAL_LENGTH,
    MOBILE_PREFIX_DIGIT,
)
from apps.common.types import PhoneDigits

_NON_DIGITS = re.compile(r"\D")


def digits_only(raw: object) -> PhoneDigits:
    """Strip everything but digits; non-string input is stringified first"""
    if raw is None:
        return ""
    return _NON_DIGITS.sub("", str(raw))


def phone_variants(raw: object) -> list[PhoneDigits]:
    """
    📱 Build the ordered, de-duplicated list of digit variants for a phone.

    The first entry is always the digit-only form of the input (possibly
    empty when the input holds no digits). Never raises.
    """
    digits = digits_only(raw)
    variants: list[PhoneDigits] = [digits]
    if not digits:
        return variants

    def add(candidate: str) -> None:
        if candidate and candidate not in variants:
            variants.append(candidate)

    if digits.startswith(COUNTRY_CODE) and len(digits) >= MIN_LENGTH_WITH_COUNTRY_CODE:
        local = digits[len(COUNTRY_CODE):]
        add(local)
    else:
        local = digits
        add(COUNTRY_CODE + local)

    area, rest = local[:AREA_CODE_LENGTH], local[AREA_CODE_LENGTH:]
    if len(local) == MOBILE_LOCAL_LENGTH and rest.startswith(MOBILE_PREFIX_DIGIT):
        # Mobile number stored before the extra 9 was introduced
        without_nine = area + rest[1:]
        add(without_nine)
        add(COUNTRY_CODE + without_nine)
    elif len(local) == LANDLINE_LOCAL_LENGTH:
        with_nine = area + MOBILE_PREFIX_DIGIT + rest
        add(with_nine)
        add(COUNTRY_CODE + with_nine)

    return variants
