"""
문서 writer: openpyxl Workbook → 파일 포맷.

기본 제공:
- Xlsx: openpyxl 저장 그대로
- Csv:  시트 하나 (기본 인덱스 0), 선택적 BOM
- Html: Jinja2 템플릿, 시트마다 <table>, 병합 범위는 colspan/rowspan

다른 포맷(Xls, Ods, Pdf 등)은 writer_creator(workbook, writer_type)로 주입.
"""

import csv
import io
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from pathlib import Path
from typing import Any, BinaryIO

from jinja2 import Environment, select_autoescape
from openpyxl.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from sheetgrid.domain.constants import (
    BUILTIN_WRITER_TYPES,
    WRITER_CSV,
    WRITER_HTML,
    WRITER_XLSX,
)
from sheetgrid.domain.errors import ConfigurationError, ErrorCodes

logger = logging.getLogger(__name__)

WriterCreator = Callable[[Workbook, str], Any]


class DocumentWriter(ABC):
    """writer 공통 인터페이스: save(stream)."""

    writer_type: str = ""

    def __init__(self, workbook: Workbook):
        self.workbook = workbook

    @abstractmethod
    def save(self, stream: BinaryIO) -> None:
        """열린 바이너리 스트림에 문서 쓰기."""


class XlsxWriter(DocumentWriter):
    writer_type = WRITER_XLSX

    def save(self, stream: BinaryIO) -> None:
        self.workbook.save(stream)


class CsvWriter(DocumentWriter):
    """
    CSV writer.

    Args:
        sheet_index: 내보낼 시트 (기본 0)
        delimiter: 구분자
        include_bom: UTF-8 BOM 추가 (Excel에서 한글 깨짐 방지)
    """

    writer_type = WRITER_CSV

    def __init__(
        self,
        workbook: Workbook,
        sheet_index: int = 0,
        delimiter: str = ",",
        include_bom: bool = False,
        encoding: str = "utf-8",
    ):
        super().__init__(workbook)
        self.sheet_index = sheet_index
        self.delimiter = delimiter
        self.include_bom = include_bom
        self.encoding = encoding

    def save(self, stream: BinaryIO) -> None:
        ws = self.workbook.worksheets[self.sheet_index]
        encoding = "utf-8-sig" if self.include_bom else self.encoding

        text = io.TextIOWrapper(stream, encoding=encoding, newline="")
        try:
            writer = csv.writer(text, delimiter=self.delimiter)
            for row in ws.iter_rows(min_row=1, min_col=1, values_only=True):
                writer.writerow(["" if value is None else value for value in row])
            text.flush()
        finally:
            # 호출자의 스트림은 닫지 않음
            text.detach()


HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{{ title }}</title>
</head>
<body>
{% for sheet in sheets %}
<table data-sheet="{{ sheet.title }}">
{% for row in sheet.rows %}
<tr>
{%- for cell in row %}
<td{% if cell.colspan > 1 %} colspan="{{ cell.colspan }}"{% endif %}{% if cell.rowspan > 1 %} rowspan="{{ cell.rowspan }}"{% endif %}>{{ cell.value }}</td>
{%- endfor %}
</tr>
{% endfor %}
</table>
{% endfor %}
</body>
</html>
"""

_environment = Environment(autoescape=select_autoescape(default=True, default_for_string=True))


class HtmlWriter(DocumentWriter):
    """모든 시트를 <table>로 출력."""

    writer_type = WRITER_HTML

    def __init__(self, workbook: Workbook, template: str = HTML_TEMPLATE):
        super().__init__(workbook)
        self.template = _environment.from_string(template)

    def save(self, stream: BinaryIO) -> None:
        html = self.template.render(
            title=self.workbook.properties.title or "",
            sheets=[
                {"title": ws.title, "rows": _table_rows(ws)}
                for ws in self.workbook.worksheets
            ],
        )
        stream.write(html.encode("utf-8"))


def _table_rows(ws: Worksheet) -> list[list[dict[str, Any]]]:
    """병합 범위를 반영한 HTML 셀 행렬."""
    spans: dict[tuple[int, int], tuple[int, int]] = {}
    covered: set[tuple[int, int]] = set()
    for merged in ws.merged_cells.ranges:
        spans[(merged.min_row, merged.min_col)] = (
            merged.max_row - merged.min_row + 1,
            merged.max_col - merged.min_col + 1,
        )
        for row, col in merged.cells:
            if (row, col) != (merged.min_row, merged.min_col):
                covered.add((row, col))

    rows = []
    for row_index, row in enumerate(ws.iter_rows(min_row=1, min_col=1, values_only=True), start=1):
        cells = []
        for col_index, value in enumerate(row, start=1):
            if (row_index, col_index) in covered:
                continue
            rowspan, colspan = spans.get((row_index, col_index), (1, 1))
            cells.append({
                "value": "" if value is None else value,
                "rowspan": rowspan,
                "colspan": colspan,
            })
        rows.append(cells)
    return rows


# =============================================================================
# Writer lookup
# =============================================================================

WRITERS: dict[str, type[DocumentWriter]] = {
    WRITER_XLSX: XlsxWriter,
    WRITER_CSV: CsvWriter,
    WRITER_HTML: HtmlWriter,
}


def resolve_writer_type(filename: str | Path | None = None, writer_type: str | None = None) -> str:
    """
    writer 타입 결정.

    우선순위: writer_type → 파일 확장자 ("report.xlsx" → "Xlsx") → Xlsx
    """
    if writer_type:
        return writer_type.capitalize()

    if filename:
        extension = Path(filename).suffix.lstrip(".")
        if extension:
            return extension.capitalize()

    return WRITER_XLSX


def create_writer(
    workbook: Workbook,
    writer_type: str,
    writer_creator: WriterCreator | None = None,
) -> Any:
    """
    writer 생성.

    writer_creator가 있으면 기본 조회 대신 그 결과를 사용.

    Raises:
        ConfigurationError: UNSUPPORTED_WRITER_TYPE
    """
    if writer_creator is not None:
        return writer_creator(workbook, writer_type)

    writer_class = WRITERS.get(writer_type)
    if writer_class is None:
        raise ConfigurationError(
            ErrorCodes.UNSUPPORTED_WRITER_TYPE,
            writer_type=writer_type,
            supported=list(BUILTIN_WRITER_TYPES),
        )

    logger.debug(f"Using {writer_class.__name__} for {writer_type}")
    return writer_class(workbook)
