"""Validation of incoming TikTok URLs."""

from __future__ import annotations

import re
from typing import Any

from tiktokdl.errors import EmptyInputError, InvalidFormatError

__all__ = ["TIKTOK_URL_PATTERN", "validate_reference"]

TIKTOK_URL_PATTERN = re.compile(r"(tiktok\.com|vt\.tiktok\.com)/.+")


def validate_reference(reference: Any) -> str:
    """Return ``reference`` unchanged when it looks like a TikTok URL.

    Raises :class:`EmptyInputError` for missing or empty values and
    :class:`InvalidFormatError` when the value is not a TikTok link.
    """

    if not reference:
        raise EmptyInputError()
    if not isinstance(reference, str) or not TIKTOK_URL_PATTERN.search(reference):
        raise InvalidFormatError()
    return reference
