from __future__ import annotations

from typing import Optional


IMAGE_SIGNATURES = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
}

IMAGE_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/png": "png",
}

CURRENCY_SIGNS = "₹$€£"


def clean_amount(value: object) -> object:
    """
    Prepare a wire amount for Decimal validation.

    Floats go through their shortest repr so 0.1 stays 0.1; strings lose a leading
    currency sign and thousands separators, e.g. "₹1,250.50" -> "1250.50".
    Everything else is passed through unchanged.
    """
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, str):
        return value.strip().lstrip(CURRENCY_SIGNS).replace(",", "").strip()
    return value


def detect_image_type(data: bytes) -> Optional[str]:
    for signature, media_type in IMAGE_SIGNATURES.items():
        if data.startswith(signature):
            return media_type
    return None
