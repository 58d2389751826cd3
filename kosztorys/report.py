"""Report metadata preparation: titles, locations and output file names.

Export collaborators render the report; this module only prepares the strings
they put on the title page and in the file name.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from typing import Optional

from .models import DocumentMetadata

__all__ = [
    "DEFAULT_TITLE",
    "ReportMetadata",
    "clean_duplicate_text",
    "is_location_redundant",
    "prepare_report_metadata",
    "slugify",
    "report_filename",
]

DEFAULT_TITLE = "KOSZTORYS NA WYKONANIE PRAC PIELĘGNACYJNYCH DRZEWOSTANU"

_SOURCE_TITLE = re.compile(r"^(PROGRAM PRAC|INWENTARYZACJA)", re.IGNORECASE)
_SOURCE_TITLE_PREFIX = re.compile(
    r"^(PROGRAM PRAC PIELĘGNACYJNYCH|INWENTARYZACJA I PROGRAM|INWENTARYZACJA)",
    re.IGNORECASE,
)
_TRAILING_PUNCT = re.compile(r"[.,;:]$")
_LOCATION_NOISE = re.compile(r"[^a-z0-9ąęćłńóśźż\s]")
_MIN_REPEATED_SUFFIX = 5
_LOCATION_OVERLAP = 0.6

# Letters NFKD does not decompose into an ASCII base.
_TRANSLITERATE = str.maketrans({"ł": "l", "đ": "d", "ø": "o", "æ": "a", "œ": "o", "ß": "s"})
_SLUG_SEPARATORS = re.compile(r"[\s·/_,:;]+")
_SLUG_INVALID = re.compile(r"[^a-z0-9-]+")
_SLUG_DASHES = re.compile(r"-{2,}")


@dataclass(slots=True)
class ReportMetadata:
    title: str
    location: str
    details: str


def clean_duplicate_text(text: Optional[str]) -> str:
    """Remove repetition the extraction step tends to introduce into header lines."""
    if not text:
        return ""
    clean = text.strip()
    words = clean.split()

    # "ABC ABC" -> "ABC"
    if len(words) > 1 and len(words) % 2 == 0:
        middle = len(words) // 2
        first, second = " ".join(words[:middle]), " ".join(words[middle:])
        if first.lower() == second.lower():
            return first

    # "Park Miejski ul. Lipowa ul. lipowa" -> cut the repeated tail
    lowered = clean.lower()
    for cut in range(len(clean) // 2, len(clean)):
        suffix = lowered[cut:].strip()
        if len(suffix) < _MIN_REPEATED_SUFFIX:
            continue
        if lowered[:cut].strip().endswith(suffix):
            return clean[:cut].strip()

    unique: list[str] = []
    for word in words:
        current = _TRAILING_PUNCT.sub("", word).lower()
        previous = _TRAILING_PUNCT.sub("", unique[-1]).lower() if unique else None
        if previous is None or current != previous:
            unique.append(word)
    return " ".join(unique)


def _normalize_location(text: str) -> str:
    return _LOCATION_NOISE.sub("", text.lower()).strip()


def is_location_redundant(title: str, location: Optional[str]) -> bool:
    """True when the title already names the location."""
    if not location or len(location) < 3:
        return False
    title_norm = _normalize_location(title)
    location_norm = _normalize_location(location)
    if location_norm in title_norm:
        return True

    tokens = [token for token in location_norm.split() if len(token) > 2]
    if not tokens:
        return False
    matches = sum(1 for token in tokens if token in title_norm)
    return matches / len(tokens) > _LOCATION_OVERLAP


def standardize_title(title: Optional[str]) -> str:
    text = title or DEFAULT_TITLE
    if _SOURCE_TITLE.match(text):
        remainder = _SOURCE_TITLE_PREFIX.sub("", text).strip()
        text = f"{DEFAULT_TITLE} {remainder}".strip()
    return clean_duplicate_text(text)


def prepare_report_metadata(metadata: Optional[DocumentMetadata]) -> ReportMetadata:
    metadata = metadata or DocumentMetadata()
    title = standardize_title(metadata.title)
    location = clean_duplicate_text(metadata.location or "")
    if is_location_redundant(title, location):
        location = ""
    return ReportMetadata(
        title=title,
        location=location,
        details=metadata.administrative_details or "",
    )


def slugify(text: Optional[str]) -> str:
    if not text:
        return "document"
    value = str(text).lower().translate(_TRANSLITERATE)
    value = unicodedata.normalize("NFKD", value)
    value = "".join(char for char in value if not unicodedata.combining(char))
    value = value.replace("&", "-and-")
    value = _SLUG_SEPARATORS.sub("-", value)
    value = _SLUG_INVALID.sub("", value)
    value = _SLUG_DASHES.sub("-", value)
    return value.strip("-")


def report_filename(metadata: Optional[DocumentMetadata], extension: str) -> str:
    """File name for an exported report, e.g. ``Kosztorys_sopot.pdf``."""
    metadata = metadata or DocumentMetadata()
    town = (metadata.town_name or "").strip()
    source = town or metadata.location or "Dokument"
    return f"Kosztorys_{slugify(source)}.{extension.lstrip('.')}"
