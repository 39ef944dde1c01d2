import re
import unicodedata
from typing import Any

_LEADING_NUMBER_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)")


def normalize_text(value: str | None) -> str:
    """Fold case, accents and runs of whitespace so titles compare loosely."""
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.casefold().split())


def extract_year(value: str | None) -> int | None:
    if not value:
        return None
    head = value.strip()[:4]
    return int(head) if head.isdigit() else None


def parse_float(value: Any) -> float | None:
    if value is None:
        return None
    try:
        text = str(value).strip()
        if not text or text.upper() == "N/A":
            return None
        return float(text)
    except ValueError:
        return None


def parse_leading_number(value: Any) -> float | None:
    """Return the number a rating string starts with ("7.4/10" -> 7.4, "85%" -> 85)."""
    if value is None:
        return None
    match = _LEADING_NUMBER_RE.match(str(value))
    if not match:
        return None
    return float(match.group(1))
