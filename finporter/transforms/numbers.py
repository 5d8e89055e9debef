"""
Lenient value parsing for finporter.

Brokerage exports format values for people, not programs:
- Currency symbols and thousands separators (e.g., "$100,975.73")
- Signs on either side of the symbol (e.g., "-$100975.73", "$-5", "+$0.10")
- Accounting-style negatives (e.g., "(1,234.56)")
- Placeholders for missing values ("--", "n/a", "")
- Padding from fixed-width exporters (e.g., " 180.95")

None of the parsers here raise. A value that does not parse comes back
as ``None`` and the row-level validation decides whether that matters.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

_NUMBER_RE = re.compile(
    r"^(?P<open>\()?"
    r"(?P<sign>[+-])?"
    r"[$€£¥]?"
    r"(?P<sign2>[+-])?"
    r"(?P<digits>(?:\d[\d,]*(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)"
    r"(?P<close>\))?$"
)

_TRUE_VALUES = frozenset({"true", "yes", "y", "t", "1"})
_FALSE_VALUES = frozenset({"false", "no", "n", "f", "0"})


def _parse_decimal(raw: str | None) -> Decimal | None:
    if raw is None:
        return None
    match = _NUMBER_RE.match(raw.strip().replace(" ", ""))
    if match is None:
        return None
    # Parentheses must come as a pair
    if bool(match.group("open")) != bool(match.group("close")):
        return None
    try:
        value = Decimal(match.group("digits").replace(",", ""))
    except InvalidOperation:
        return None
    if match.group("open") or "-" in (match.group("sign"), match.group("sign2")):
        value = -value
    return value


def parse_number(raw: str | None) -> float | None:
    """Parse a (possibly monetary) number.

    Args:
        raw: The cell text, or ``None`` when the column is missing.

    Returns:
        The value as a float, or ``None`` if it is blank or not numeric.
    """
    value = _parse_decimal(raw)
    return None if value is None else float(value)


def parse_percent(raw: str | None) -> float | None:
    """Parse a percentage such as ``"28.75%"`` into a fraction (0.2875).

    The trailing ``%`` is optional; the value is always divided by 100.
    Decimal arithmetic keeps ``"1.91%"`` equal to the literal ``0.0191``.
    """
    if raw is None:
        return None
    text = raw.strip()
    if text.endswith("%"):
        text = text[:-1]
    value = _parse_decimal(text)
    return None if value is None else float(value / 100)


def parse_string(raw: str | None) -> str | None:
    """Strip padding; blank means absent."""
    if raw is None:
        return None
    text = raw.strip()
    return text or None


def parse_bool(raw: str | None) -> bool | None:
    """Parse common spellings of true/false (case-insensitive)."""
    if raw is None:
        return None
    text = raw.strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    return None
