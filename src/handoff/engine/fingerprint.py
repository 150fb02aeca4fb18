"""Fingerprinter — normalizes failure text so identical failures compare equal.

Normalization, in order:
    1. lowercase
    2. ISO-8601-like timestamps -> ``<ts>``
    3. UUIDs and long hex identifiers -> ``<id>``
    4. digit runs longer than two characters -> ``<num>``
    5. collapse whitespace
"""

from __future__ import annotations

import re

from handoff.core.types import Fingerprint

_TIMESTAMP_RE = re.compile(
    r"\d{4}-\d{2}-\d{2}"
    r"(?:[t ]\d{2}:\d{2}(?::\d{2}(?:[.,]\d+)?)?(?:z|[+-]\d{2}:?\d{2})?)?"
    r"|\b\d{1,2}:\d{2}(?::\d{2}(?:[.,]\d+)?)?(?:z|[+-]\d{2}:?\d{2})?\b"
)
_UUID_RE = re.compile(
    r"\b[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}\b"
    r"|\b(?=[0-9a-f]*\d)(?=[0-9a-f]*[a-f])[0-9a-f]{16,}\b"
)
_NUMBER_RE = re.compile(r"\d{3,}")
_WHITESPACE_RE = re.compile(r"\s+")


def fingerprint(raw_message: str) -> Fingerprint:
    """Return the normalized signature of ``raw_message``. Pure."""
    text = raw_message.lower()
    text = _TIMESTAMP_RE.sub("<ts>", text)
    text = _UUID_RE.sub("<id>", text)
    text = _NUMBER_RE.sub("<num>", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


class Fingerprinter:
    """Default IFingerprinter."""

    def fingerprint(self, raw_message: str) -> Fingerprint:
        return fingerprint(raw_message)
