"""
Pattern matching helpers for regulation text.

Plain-English conversion, dollar amount and penalty extraction, date parsing
and implementation timeline estimation. Everything here is a pure function of
its inputs (plus an optional reference time).
"""

import logging
import math
import re
from datetime import datetime
from typing import List, Optional, Tuple

from ..models import FeedItem, RegulationType
from .keywords import LEGAL_QUALIFIERS, TERM_MAPPINGS

logger = logging.getLogger(__name__)

# Base implementation timelines in days, by regulation type
DEFAULT_TIMELINE_DAYS = {
    RegulationType.ENFORCEMENT: 30,
    RegulationType.FINAL_RULE: 180,
    RegulationType.PROPOSED_RULE: 365,
}

DAYS_PER_UNIT = {"day": 1, "week": 7, "month": 30, "year": 365}

DATE_FORMATS = ("%m/%d/%Y", "%Y-%m-%d", "%B %d, %Y", "%b %d, %Y")

# Absolute dates as they appear in feed text
DATE_PATTERN = r"\d{1,2}/\d{1,2}/\d{4}|\d{4}-\d{2}-\d{2}|[A-Za-z]+ \d{1,2}, \d{4}"

_TERM_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE), plain) for term, plain in TERM_MAPPINGS
]
_QUALIFIER_PATTERNS: List[re.Pattern] = [
    re.compile(rf"\b{re.escape(q)}\b,?\s*", re.IGNORECASE) for q in LEGAL_QUALIFIERS
]

_DOLLAR_RE = re.compile(r"\$([\d,]+(?:\.\d+)?)(?:\s*(million|billion|m|b)\b)?", re.IGNORECASE)
_MILLIONS_RE = re.compile(r"\$([\d,]+(?:\.\d+)?)\s*(million|m)\b", re.IGNORECASE)
_EXPLICIT_DATE_RE = re.compile(
    rf"(?:effective|compliance|implementation).*?({DATE_PATTERN})", re.IGNORECASE
)
_RELATIVE_RE = re.compile(r"(\d+)\s*(day|week|month|year)s?", re.IGNORECASE)

_MULTIPLIERS = {"billion": 1_000_000_000, "b": 1_000_000_000, "million": 1_000_000, "m": 1_000_000}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.floor(value + 0.5))


def to_plain_english(text: str) -> str:
    """
    Convert regulatory language to plain English.

    Args:
        text: Original regulation text.

    Returns:
        Text with legal phrases replaced, long clauses split and legal
        qualifiers removed.
    """
    if not text:
        return ""

    converted = text
    for pattern, plain in _TERM_PATTERNS:
        converted = pattern.sub(plain, converted)

    converted = simplify_sentences(converted)

    for pattern in _QUALIFIER_PATTERNS:
        converted = pattern.sub("", converted)

    return converted.strip()


def simplify_sentences(text: str) -> str:
    """Normalize sentence spacing and split ', which' / ', that' clauses."""
    text = re.sub(r"([.!?])\s*([A-Z])", r"\1 \2", text)
    text = re.sub(r",\s*which\s+", ". This ", text, flags=re.IGNORECASE)
    text = re.sub(r",\s*that\s+", ". This ", text, flags=re.IGNORECASE)
    return text


def _parse_number(raw: str) -> Optional[float]:
    try:
        return float(raw.replace(",", ""))
    except ValueError:
        return None


def extract_dollar_amounts(text: str) -> List[float]:
    """
    Find every dollar amount in the text, normalized to currency units.

    "$2.5 million" becomes 2500000.0; amounts without a suffix are taken as-is.
    """
    amounts = []
    for match in _DOLLAR_RE.finditer(text or ""):
        value = _parse_number(match.group(1))
        if value is None:
            continue
        suffix = (match.group(2) or "").lower()
        amounts.append(value * _MULTIPLIERS.get(suffix, 1))
    return amounts


def extract_amounts_in_millions(text: str) -> List[float]:
    """Dollar amounts written as '$<n> million' or '$<n>m', in millions."""
    amounts = []
    for match in _MILLIONS_RE.finditer(text or ""):
        value = _parse_number(match.group(1))
        if value is not None:
            amounts.append(value)
    return amounts


def extract_penalty(item: FeedItem) -> float:
    """
    Largest dollar amount mentioned in the item, or 0 if there is none.

    Never raises; extraction errors are logged and treated as "no penalty".
    """
    try:
        amounts = extract_dollar_amounts(item.content)
        return max(amounts) if amounts else 0.0
    except Exception as e:
        logger.warning("Penalty extraction failed for '%s': %s", item.title, e)
        return 0.0


def parse_absolute_date(text: str) -> Optional[datetime]:
    """Parse a date in one of the formats found in regulation text."""
    if not text:
        return None
    cleaned = text.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
    return None


def timeframe_to_days(amount: int, unit: str) -> int:
    """Convert '<amount> <unit>' to days (months are 30 days, years 365)."""
    unit = unit.lower().rstrip("s")
    return amount * DAYS_PER_UNIT.get(unit, 0)


def estimate_timeline(
    regulation_type: RegulationType, item: FeedItem, now: Optional[datetime] = None
) -> int:
    """
    Estimate the implementation timeline in days.

    Uses, in order: an explicit effective/compliance/implementation date in
    the future, the shortest relative timeframe mentioned ("within 90 days"),
    or the default for the regulation type.

    Args:
        regulation_type: Classified type of the item.
        item: The feed item.
        now: Reference time (defaults to the current time).

    Returns:
        Positive number of days. Never raises.
    """
    default = DEFAULT_TIMELINE_DAYS[regulation_type]
    try:
        now = now or datetime.now()
        content = item.content.lower()

        for match in _EXPLICIT_DATE_RE.finditer(content):
            target = parse_absolute_date(match.group(1))
            if target is None:
                continue
            days_until = math.ceil((target - now).total_seconds() / 86400)
            if days_until > 0:
                return days_until
            break

        timeframes = [
            timeframe_to_days(int(m.group(1)), m.group(2)) for m in _RELATIVE_RE.finditer(content)
        ]
        positive = [days for days in timeframes if days > 0]
        if positive:
            return min(positive)
    except Exception as e:
        logger.warning("Timeline estimation failed for '%s': %s", item.title, e)

    return default
