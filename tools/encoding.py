"""
tools/encoding.py — Decode fetched page bytes to text.

Only the direct transport needs this; the relay returns decoded text.

ORDER OF TRUST:
  1. chardet's detection, if its confidence clears min_confidence
  2. the charset the server declared (the hint)
  3. UTF-8

Decoding uses errors="replace". A page in a mislabelled or broken encoding
comes out with U+FFFD in places, never an exception.
"""

import codecs

import chardet
from loguru import logger

DEFAULT_ENCODING = "utf-8"


def decode(raw_bytes: bytes, hint: str | None = None, min_confidence: float = 0.5) -> str:
    """
    Decode raw page bytes. Never raises.

    Args:
        raw_bytes:      The response body.
        hint:           Charset from the Content-Type header, if any.
        min_confidence: chardet confidence needed to override the hint.

    Returns:
        Decoded text, possibly with replacement characters.
    """
    if not raw_bytes:
        return ""

    encoding = detect_encoding(raw_bytes, hint, min_confidence)
    return raw_bytes.decode(encoding, errors="replace")


def detect_encoding(raw_bytes: bytes, hint: str | None = None, min_confidence: float = 0.5) -> str:
    """Pick the codec name decode() will use. Always a codec Python knows."""
    detected = chardet.detect(raw_bytes)
    candidate = detected.get("encoding")
    confidence = detected.get("confidence") or 0.0

    if candidate and confidence >= min_confidence and _known(candidate):
        return candidate

    if hint and _known(hint):
        logger.debug("Low-confidence detection ({}, {:.2f}), using hint {}", candidate, confidence, hint)
        return hint

    logger.debug("Encoding detection failed ({}, {:.2f}), defaulting to {}", candidate, confidence, DEFAULT_ENCODING)
    return DEFAULT_ENCODING


def _known(encoding: str) -> bool:
    try:
        codecs.lookup(encoding)
    except LookupError:
        return False
    return True
