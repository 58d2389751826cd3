"""Infer which columns hold the trunk circumference and the treatment codes."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from .codes import has_compartment_marker, has_crown_marker, has_maintenance_marker, is_removal_token
from .logging import get_logger
from .models import ColumnRoles, Table

logger = get_logger(__name__)

CIRCUMFERENCE_HEADER_KEYWORDS = ("obw", "cm", "wymiar", "srednica", "średnica")
TREATMENT_HEADER_KEYWORDS = ("zabieg", "czynnoś", "czynnos", "opis", "kod")

HEADER_WEIGHT = 50
TREATMENT_CODE_WEIGHT = 5
REMOVAL_CODE_WEIGHT = 2
NUMERIC_WEIGHT = 1

# Plausible trunk circumference in centimeters.
MAX_CIRCUMFERENCE = 900

_LEADING_NUMBER = re.compile(r"^(\d+)")


@dataclass(slots=True)
class ColumnScore:
    circumference: int = 0
    treatment: int = 0


def _score_header(score: ColumnScore, header: str) -> None:
    text = (header or "").lower().strip()
    if any(keyword in text for keyword in CIRCUMFERENCE_HEADER_KEYWORDS):
        score.circumference += HEADER_WEIGHT
    if any(keyword in text for keyword in TREATMENT_HEADER_KEYWORDS):
        score.treatment += HEADER_WEIGHT


def _score_cell(score: ColumnScore, cell: str) -> None:
    value = (cell or "").strip()
    if not value:
        return

    if has_compartment_marker(value) or has_crown_marker(value) or has_maintenance_marker(value):
        score.treatment += TREATMENT_CODE_WEIGHT
    elif is_removal_token(value):
        score.treatment += REMOVAL_CODE_WEIGHT

    match = _LEADING_NUMBER.match(value)
    if match and 0 <= int(match.group(1)) <= MAX_CIRCUMFERENCE:
        score.circumference += NUMERIC_WEIGHT


def score_columns(table: Table) -> List[ColumnScore]:
    """Evidence per column index, covering every index seen in headers or rows."""
    scores = [ColumnScore() for _ in range(table.column_count)]
    for index, header in enumerate(table.headers):
        _score_header(scores[index], header)
    for row in table.rows:
        for index, cell in enumerate(row):
            _score_cell(scores[index], cell)
    return scores


def _best_index(values: List[int]) -> tuple[Optional[int], int]:
    best: Optional[int] = None
    best_score = 0
    for index, value in enumerate(values):
        if value > best_score:
            best, best_score = index, value
    return best, best_score


def classify_columns(table: Table) -> ColumnRoles:
    scores = score_columns(table)
    circumference, circumference_score = _best_index([score.circumference for score in scores])
    treatment, treatment_score = _best_index([score.treatment for score in scores])

    if circumference is not None and circumference == treatment:
        if treatment_score >= circumference_score:
            circumference = None
        else:
            treatment = None

    roles = ColumnRoles(circumference=circumference, treatment=treatment)
    logger.debug(
        "columns_classified",
        title=table.title,
        circumference=roles.circumference,
        treatment=roles.treatment,
        circumference_score=circumference_score,
        treatment_score=treatment_score,
    )
    return roles
