"""
SheetWriter: openpyxl 시트 모델 어댑터.

역할:
- 좌표에 값 쓰기 + 스타일 적용
- 셀 범위 병합, 컬럼 크기 지정
- 시트 생성/활성화/제목, 문서 속성

openpyxl이 거부한 요청은 모두 StyleApplicationError로 변환.

스타일 블록 형식:
    {
        "alignment": {"horizontal": "center", "vertical": "center", "wrap_text": True},
        "font": {"bold": True, "color": "#FF0000"},
        "fill": {"color": "FFFF00"},
        "borders": {"all_borders": {"style": "dotted"}},
        "number_format": "0.00",
        "protection": {"locked": False},
    }
"""

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Protection, Side
from openpyxl.utils.exceptions import CellCoordinatesException, IllegalCharacterError
from openpyxl.worksheet.worksheet import Worksheet

from sheetgrid.domain.errors import ErrorCodes, StyleApplicationError
from sheetgrid.domain.schemas import ColumnDimension, DocumentProperties

StyleBlock = dict[str, Any]

# openpyxl이 값 그대로 저장할 수 있는 타입
NATIVE_VALUE_TYPES = (str, int, float, bool, date, datetime, time, timedelta)

# openpyxl DocumentProperties 속성명 (snake_case와 다른 것만)
PROPERTY_ATTRS = {
    "content_status": "contentStatus",
    "last_modified_by": "lastModifiedBy",
}

BORDER_SIDES = ("left", "right", "top", "bottom")

SHEET_MODEL_ERRORS = (
    ValueError,
    TypeError,
    AttributeError,
    KeyError,
    IllegalCharacterError,
    CellCoordinatesException,
)


class SheetWriter:
    """
    활성 시트에 값/스타일을 쓰는 얇은 어댑터.

    Usage:
        writer = SheetWriter()
        writer.set_cell("A1", "Name")
        writer.apply_style("A1", {"font": {"bold": True}})
        writer.merge_cells("A1:B1")
    """

    def __init__(self, workbook: Workbook | None = None):
        self.workbook = workbook if workbook is not None else Workbook()

    @property
    def sheet(self) -> Worksheet:
        """활성 시트."""
        ws: Worksheet = self.workbook.active
        return ws

    @property
    def active_index(self) -> int:
        return self.workbook.index(self.workbook.active)

    # =========================================================================
    # Sheet operations
    # =========================================================================

    def create_sheet(self) -> int:
        """시트를 맨 뒤에 추가하고 인덱스 반환."""
        ws = self.workbook.create_sheet()
        return self.workbook.index(ws)

    def set_active_sheet(self, index: int) -> None:
        if not 0 <= index < len(self.workbook.worksheets):
            raise StyleApplicationError(
                ErrorCodes.SHEET_OPERATION_FAILED,
                operation="set_active_sheet",
                index=index,
            )
        self.workbook.active = index

    def set_sheet_title(self, title: str) -> None:
        try:
            self.sheet.title = title
        except SHEET_MODEL_ERRORS as e:
            raise StyleApplicationError(
                ErrorCodes.SHEET_OPERATION_FAILED,
                operation="set_sheet_title",
                title=title,
                error=str(e),
            ) from e

    def set_properties(self, properties: DocumentProperties) -> None:
        """문서 속성 적용."""
        target = self.workbook.properties
        for name, value in properties.items():
            attr = PROPERTY_ATTRS.get(name, name)
            try:
                setattr(target, attr, value)
            except SHEET_MODEL_ERRORS as e:
                raise StyleApplicationError(
                    ErrorCodes.SHEET_OPERATION_FAILED,
                    operation="set_properties",
                    property=name,
                    error=str(e),
                ) from e

    # =========================================================================
    # Cell operations
    # =========================================================================

    def set_cell(self, coordinate: str, value: Any) -> None:
        """좌표에 값 쓰기."""
        try:
            self.sheet[coordinate] = self._convert_value(value)
        except SHEET_MODEL_ERRORS as e:
            raise StyleApplicationError(
                ErrorCodes.CELL_WRITE_FAILED,
                cell=coordinate,
                error=str(e),
            ) from e

    def apply_style(self, coordinate: str, style: StyleBlock | None) -> None:
        """
        셀 스타일 적용.

        alignment는 별도 도메인: 먼저 적용하고 블록에서 제거.
        남은 항목이 없으면 일반 스타일 적용은 건너뜀.
        """
        if not style:
            return

        style = dict(style)
        try:
            cell = self.sheet[coordinate]
            if "alignment" in style:
                cell.alignment = Alignment(**style.pop("alignment"))
                if not style:
                    return
            self._apply_from_dict(cell, style)
        except StyleApplicationError:
            raise
        except SHEET_MODEL_ERRORS as e:
            raise StyleApplicationError(
                ErrorCodes.STYLE_APPLICATION_FAILED,
                cell=coordinate,
                error=str(e),
            ) from e

    def merge_cells(self, cell_range: str) -> None:
        try:
            self.sheet.merge_cells(cell_range)
        except SHEET_MODEL_ERRORS as e:
            raise StyleApplicationError(
                ErrorCodes.SHEET_OPERATION_FAILED,
                operation="merge_cells",
                range=cell_range,
                error=str(e),
            ) from e

    def set_column_dimension(self, letter: str, dimension: ColumnDimension) -> None:
        """컬럼 크기 지정 (None 필드는 건너뜀)."""
        column = self.sheet.column_dimensions[letter]
        try:
            if dimension.width is not None:
                column.width = dimension.width
            if dimension.auto_size is not None:
                column.auto_size = dimension.auto_size
            if dimension.hidden is not None:
                column.hidden = dimension.hidden
            if dimension.outline_level is not None:
                column.outline_level = dimension.outline_level
        except SHEET_MODEL_ERRORS as e:
            raise StyleApplicationError(
                ErrorCodes.SHEET_OPERATION_FAILED,
                operation="set_column_dimension",
                column=letter,
                error=str(e),
            ) from e

    # =========================================================================
    # Helpers
    # =========================================================================

    def _convert_value(self, value: Any) -> Any:
        """값 변환 (Decimal → float 등)."""
        if value is None or isinstance(value, NATIVE_VALUE_TYPES):
            return value
        if isinstance(value, Decimal):
            # Excel은 Decimal을 직접 지원하지 않음
            return float(value)
        return str(value)

    def _apply_from_dict(self, cell: Any, style: StyleBlock) -> None:
        for name, options in style.items():
            if name == "font":
                cell.font = Font(**_with_color(options, "color"))
            elif name == "fill":
                cell.fill = _pattern_fill(options)
            elif name == "borders":
                cell.border = _border(options)
            elif name == "number_format":
                cell.number_format = options
            elif name == "protection":
                cell.protection = Protection(**options)
            elif name == "alignment":
                cell.alignment = Alignment(**options)
            else:
                raise StyleApplicationError(
                    ErrorCodes.STYLE_APPLICATION_FAILED,
                    cell=cell.coordinate,
                    unknown=name,
                )


def normalize_color(color: Any) -> Any:
    """"#RRGGBB", {"rgb": "..."} → "RRGGBB"."""
    if isinstance(color, dict):
        color = color.get("argb") or color.get("rgb")
    if isinstance(color, str):
        return color.lstrip("#")
    return color


def _with_color(options: dict[str, Any], *keys: str) -> dict[str, Any]:
    options = dict(options)
    for key in keys:
        if key in options:
            options[key] = normalize_color(options[key])
    return options


def _pattern_fill(options: dict[str, Any]) -> PatternFill:
    options = _with_color(options, "color", "start_color", "end_color", "fgColor", "bgColor")
    color = options.pop("color", None)
    if color is not None:
        options.setdefault("fill_type", "solid")
        options.setdefault("start_color", color)
        options.setdefault("end_color", color)
    return PatternFill(**options)


def _side(options: dict[str, Any]) -> Side:
    options = _with_color(options, "color")
    if "border_style" in options:
        options["style"] = options.pop("border_style")
    return Side(**options)


def _border(options: dict[str, Any]) -> Border:
    sides: dict[str, Side] = {}
    for name, side_options in options.items():
        if name == "all_borders":
            for side in BORDER_SIDES:
                sides.setdefault(side, _side(side_options))
        elif name in BORDER_SIDES:
            sides[name] = _side(side_options)
        else:
            raise ValueError(f"Unknown border side: {name}")
    # 지정하지 않은 면은 빈 Side
    return Border(**{side: sides.get(side, Side()) for side in BORDER_SIDES})
