"""Domain models for extracted tables and priced results."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional


class ExtractionFormatError(ValueError):
    """Raised when an extraction payload does not have the expected shape."""


Row = List[str]


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return _cell_text(value)


@dataclass(slots=True)
class Table:
    """A table as produced by the extraction collaborator.

    Rows are aligned with headers by position but are not guaranteed to have
    the same length.
    """

    headers: List[str] = field(default_factory=list)
    rows: List[Row] = field(default_factory=list)
    title: Optional[str] = None

    @property
    def column_count(self) -> int:
        widths = [len(self.headers)] + [len(row) for row in self.rows]
        return max(widths)

    def copy(self, **changes: Any) -> "Table":
        """Return a new table with copied lists, applying ``changes``."""
        values = {
            "headers": list(self.headers),
            "rows": [list(row) for row in self.rows],
            "title": self.title,
        }
        values.update(changes)
        return Table(**values)

    @classmethod
    def from_dict(cls, data: dict) -> "Table":
        if not isinstance(data, dict):
            raise ExtractionFormatError("table entry must be an object")
        headers = data.get("headers") or []
        rows = data.get("rows") or []
        if not isinstance(headers, list):
            raise ExtractionFormatError("'headers' must be a list")
        if not isinstance(rows, list):
            raise ExtractionFormatError("'rows' must be a list")
        parsed_rows: List[Row] = []
        for index, row in enumerate(rows):
            if not isinstance(row, list):
                raise ExtractionFormatError(f"row {index} must be a list of cells")
            parsed_rows.append([_cell_text(cell) for cell in row])
        return cls(
            headers=[_cell_text(header) for header in headers],
            rows=parsed_rows,
            title=_optional_text(data.get("title")),
        )

    def to_dict(self) -> dict:
        payload: dict = {"headers": list(self.headers), "rows": [list(row) for row in self.rows]}
        if self.title is not None:
            payload["title"] = self.title
        return payload


def cell_at(row: Row, index: Optional[int]) -> str:
    """Return the cell at ``index`` or an empty string for ragged rows."""
    if index is None or index < 0 or index >= len(row):
        return ""
    return row[index] or ""


@dataclass(slots=True)
class DocumentMetadata:
    """Document header details passed through from the extraction step."""

    title: Optional[str] = None
    location: Optional[str] = None
    town_name: Optional[str] = None
    administrative_details: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "DocumentMetadata":
        data = data or {}
        if not isinstance(data, dict):
            raise ExtractionFormatError("'metadata' must be an object")
        return cls(
            title=_optional_text(data.get("title")),
            location=_optional_text(data.get("location")),
            town_name=_optional_text(data.get("townName")),
            administrative_details=_optional_text(data.get("administrativeDetails")),
        )

    def to_dict(self) -> dict:
        payload = {
            "title": self.title,
            "location": self.location,
            "townName": self.town_name,
            "administrativeDetails": self.administrative_details,
        }
        return {key: value for key, value in payload.items() if value is not None}


@dataclass(slots=True)
class ExtractionResult:
    """Raw output of the document extraction collaborator."""

    tables: List[Table] = field(default_factory=list)
    metadata: Optional[DocumentMetadata] = None

    @classmethod
    def from_dict(cls, data: Any) -> "ExtractionResult":
        if not isinstance(data, dict):
            raise ExtractionFormatError("extraction result must be an object")
        tables = data.get("tables")
        if not isinstance(tables, list):
            raise ExtractionFormatError("extraction result must contain a 'tables' list")
        metadata = data.get("metadata")
        return cls(
            tables=[Table.from_dict(table) for table in tables],
            metadata=DocumentMetadata.from_dict(metadata) if metadata is not None else None,
        )


@dataclass(slots=True)
class ColumnRoles:
    """Resolved column indices; ``None`` marks an unresolved role."""

    circumference: Optional[int] = None
    treatment: Optional[int] = None

    @property
    def resolved(self) -> bool:
        return self.circumference is not None and self.treatment is not None


@dataclass(slots=True)
class Totals:
    total_net: Decimal = Decimal("0.00")
    total_gross: Decimal = Decimal("0.00")

    def to_dict(self) -> dict:
        return {"totalNet": str(self.total_net), "totalGross": str(self.total_gross)}


@dataclass(slots=True)
class ProcessingResult:
    """Processed tables with the aggregate totals derived from their rows."""

    tables: List[Table] = field(default_factory=list)
    totals: Totals = field(default_factory=Totals)
    metadata: Optional[DocumentMetadata] = None

    def to_dict(self) -> dict:
        payload: dict = {
            "tables": [table.to_dict() for table in self.tables],
            "totals": self.totals.to_dict(),
        }
        if self.metadata is not None:
            payload["metadata"] = self.metadata.to_dict()
        return payload
