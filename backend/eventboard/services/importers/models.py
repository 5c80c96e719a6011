"""Normalized agenda import descriptors produced by spreadsheet importers."""

# purpose: define the canonical payload bridging workbook parsing and reconciliation
# status: active

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ...schemas import AgendaImportPayload


@dataclass(slots=True)
class AgendaImportResult:
    """Plain records parsed from a workbook, in sheet row order."""

    days: list[dict[str, Any]] = field(default_factory=list)
    slots: list[dict[str, Any]] = field(default_factory=list)
    experts: list[dict[str, Any]] = field(default_factory=list)
    companies: list[dict[str, Any]] = field(default_factory=list)
    source_format: str = "xlsx"
    sheet_names: list[str] = field(default_factory=list)

    def to_payload(self) -> AgendaImportPayload:
        """Convert the parsed records into the reconciliation payload."""

        return AgendaImportPayload(
            days=list(self.days),
            slots=list(self.slots),
            experts=list(self.experts),
            companies=list(self.companies),
        )

    def summary(self) -> dict[str, int]:
        return {
            "days": len(self.days),
            "slots": len(self.slots),
            "experts": len(self.experts),
            "companies": len(self.companies),
        }
