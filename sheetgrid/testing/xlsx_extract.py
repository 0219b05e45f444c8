"""
XLSX semantic extractor for tests.

Extracts meaningful content from a workbook into plain Python structures,
so tests compare rendered content instead of bytes.

Normalization:
- Empty strings → None
- Trailing empty cells and rows trimmed

Extracted elements:
1. Sheet titles (in order)
2. Row values per sheet (trailing empty cells trimmed)
3. Merged ranges per sheet (sorted)
4. Document properties that were set
"""

from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

PROPERTY_NAMES = ("creator", "title", "subject", "description", "keywords", "category")


@dataclass
class SheetContent:
    """Extracted sheet structure."""

    title: str
    rows: list[list[Any]] = field(default_factory=list)
    merged: list[str] = field(default_factory=list)

    def row(self, number: int) -> list[Any]:
        """1-based row (missing rows → [])."""
        if 1 <= number <= len(self.rows):
            return self.rows[number - 1]
        return []

    def to_dict(self) -> dict[str, Any]:
        return {"title": self.title, "rows": self.rows, "merged": self.merged}


@dataclass
class XlsxContent:
    """Extracted workbook structure."""

    sheets: list[SheetContent] = field(default_factory=list)
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def titles(self) -> list[str]:
        return [sheet.title for sheet in self.sheets]

    def sheet(self, title: str) -> SheetContent:
        for sheet in self.sheets:
            if sheet.title == title:
                return sheet
        raise KeyError(title)

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheets": [sheet.to_dict() for sheet in self.sheets],
            "properties": self.properties,
        }


class XlsxExtractor:
    """
    Extract semantic content from a workbook.

    Usage:
        content = XlsxExtractor().extract(Path("report.xlsx"))
        assert content.sheets[0].row(1) == ["Id", "Name"]

    Accepts a file path, an in-memory stream or an openpyxl Workbook.
    """

    def extract(self, source: Path | str | BytesIO | Workbook) -> XlsxContent:
        if isinstance(source, Workbook):
            return self._extract_workbook(source)

        wb = load_workbook(source)
        try:
            return self._extract_workbook(wb)
        finally:
            wb.close()

    def _extract_workbook(self, wb: Workbook) -> XlsxContent:
        content = XlsxContent()
        for ws in wb.worksheets:
            content.sheets.append(
                SheetContent(
                    title=ws.title,
                    rows=self._extract_rows(ws),
                    merged=sorted(str(r) for r in ws.merged_cells.ranges),
                )
            )

        for name in PROPERTY_NAMES:
            value = getattr(wb.properties, name, None)
            if value:
                content.properties[name] = value
        return content

    def _extract_rows(self, ws: Worksheet) -> list[list[Any]]:
        rows: list[list[Any]] = []
        # 1행 1열부터 (앞쪽이 비어 있어도 좌표 유지)
        for row in ws.iter_rows(min_row=1, min_col=1, values_only=True):
            # Empty strings → None (same as a reloaded file)
            values = [None if value == "" else value for value in row]
            while values and values[-1] is None:
                values.pop()
            rows.append(values)

        # Trailing empty rows
        while rows and not rows[-1]:
            rows.pop()
        return rows


def extract_xlsx(source: Path | str | BytesIO | Workbook) -> dict[str, Any]:
    """Convenience function: extract and return as dictionary."""
    return XlsxExtractor().extract(source).to_dict()
