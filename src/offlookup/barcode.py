"""Barcode normalization and candidate key resolution.

Product codes reach the store from several sources, so the same product may
be stored as a 12-digit UPC-A code, a 13-digit EAN-13 code, or a 13-digit
code that lost its padding zero.  :func:`resolve` turns the raw user input
into the ordered list of keys to try, most likely first.
"""

import re
from dataclasses import dataclass, field

from offlookup.errors import ValidationError

MIN_LENGTH = 8
MAX_LENGTH = 14

_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a raw barcode."""

    raw: str
    normalized: str
    candidates: list[str] = field(default_factory=list)


def normalize_barcode(barcode: str) -> str:
    """Strip non-digits and promote 12-digit UPC-A codes to EAN-13."""
    clean = _NON_DIGITS.sub("", barcode)
    if len(clean) == 12:
        return "0" + clean
    return clean


def resolve(raw: str | None) -> Resolution:
    """Validate *raw* and return the candidate keys to look up, in order.

    The length check applies to the input as given, before non-digits are
    stripped.  Candidates are de-duplicated so each key is tried once.

    Raises:
        ValidationError: if *raw* is empty or its length is outside 8-14.
    """
    if not raw or not MIN_LENGTH <= len(raw) <= MAX_LENGTH:
        raise ValidationError(
            f"Barcode must be between {MIN_LENGTH} and {MAX_LENGTH} digits",
            error="Invalid barcode",
        )

    # Input without any digits normalizes to "" and is still looked up as is.
    normalized = normalize_barcode(raw)
    candidates = [normalized]
    if raw != normalized:
        candidates.append(raw)
    if len(raw) == 13 and raw.startswith("0"):
        candidates.append(raw[1:])

    unique = list(dict.fromkeys(candidates))
    return Resolution(raw=raw, normalized=normalized, candidates=unique)
