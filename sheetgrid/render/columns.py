"""
컬럼 정의: 헤더/푸터/데이터/필터 셀 내용과 스타일 계산.

규칙:
- 모든 셀 쓰기는 grid.render_cell() 하나로 모임
- 헤더/푸터/필터 내용이 None 또는 공백 → grid.empty_cell
- 데이터 값이 None → grid.null_display (empty_cell과 별개)
- content_options는 dict 또는 (model, key, index, column) → dict | None 함수
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from sheetgrid.domain.constants import DEFAULT_COLUMN_FORMAT, SERIAL_COLUMN_HEADER
from sheetgrid.domain.schemas import ColumnDimension
from sheetgrid.render.formatter import FormatSpec
from sheetgrid.render.sheet import StyleBlock

RowCallable = Callable[[Any, Any, int, "Column"], Any]
StyleSpec = StyleBlock | Callable[[Any, Any, int, "Column"], StyleBlock | None]

_MISSING = object()


# =============================================================================
# Helpers
# =============================================================================

def _get(model: Any, name: str, default: Any) -> Any:
    if isinstance(model, Mapping):
        return model.get(name, default)
    return getattr(model, name, default)


def get_value(model: Any, path: str, default: Any = None) -> Any:
    """
    모델에서 속성 값 조회.

    - dict 키 또는 객체 속성
    - 점 경로 지원: "author.name"
    - 키 자체에 점이 있으면 그 키가 우선
    """
    if isinstance(model, Mapping) and path in model:
        return model[path]

    for part in path.split("."):
        model = _get(model, part, _MISSING)
        if model is _MISSING:
            return default
    return model


def camel2words(name: str) -> str:
    """
    속성명 → 사람이 읽는 라벨.

    예: firstName → First Name, first_name → First Name, userID → User ID
    """
    words = re.sub(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Za-z0-9])(?=[A-Z][a-z])", " ", name)
    words = re.sub(r"[-_.]+", " ", words)
    return " ".join(w[:1].upper() + w[1:] for w in words.split())


# =============================================================================
# Column
# =============================================================================

@dataclass
class Column:
    """
    기본 컬럼.

    grid는 ColumnRegistry.resolve()에서 bind()로 연결된다.
    """
    header: str | None = None
    footer: str | None = None
    content: RowCallable | None = None
    visible: bool | Callable[["Column"], bool] = True
    dimension_options: ColumnDimension | dict[str, Any] | None = None
    header_options: StyleBlock = field(default_factory=dict)
    content_options: StyleSpec = field(default_factory=dict)
    footer_options: StyleBlock = field(default_factory=dict)
    filter_options: StyleBlock = field(default_factory=dict)
    grid: Any = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if isinstance(self.dimension_options, dict):
            self.dimension_options = ColumnDimension.from_dict(self.dimension_options)

    def bind(self, grid: Any) -> "Column":
        """렌더링할 Spreadsheet에 연결."""
        self.grid = grid
        return self

    def is_visible(self) -> bool:
        if callable(self.visible):
            return bool(self.visible(self))
        return bool(self.visible)

    # =========================================================================
    # Cell rendering
    # =========================================================================

    def render_header_cell(self, cell: str) -> None:
        self.grid.render_cell(cell, self.render_header_cell_content(), self.header_options)

    def render_footer_cell(self, cell: str) -> None:
        self.grid.render_cell(cell, self.render_footer_cell_content(), self.footer_options)

    def render_filter_cell(self, cell: str) -> None:
        self.grid.render_cell(cell, self.render_filter_cell_content(), self.filter_options)

    def render_data_cell(self, cell: str, model: Any, key: Any, index: int) -> None:
        """
        데이터 셀 렌더링.

        Args:
            cell: 셀 좌표 (예: "B4")
            model: 데이터 레코드
            key: 레코드 키
            index: 배치 전체 기준 0-based 데이터 행 번호
        """
        if callable(self.content_options):
            style = self.content_options(model, key, index, self)
        else:
            style = self.content_options
        self.grid.render_cell(cell, self.render_data_cell_content(model, key, index), style)

    # =========================================================================
    # Cell content
    # =========================================================================

    def render_header_cell_content(self) -> Any:
        return self._text_or_empty(self.header)

    def render_footer_cell_content(self) -> Any:
        return self._text_or_empty(self.footer)

    def render_filter_cell_content(self) -> Any:
        return self.grid.empty_cell

    def render_data_cell_content(self, model: Any, key: Any, index: int) -> Any:
        if self.content is not None:
            return self.content(model, key, index, self)
        return self.grid.empty_cell

    def _text_or_empty(self, text: str | None) -> Any:
        if text is None or str(text).strip() == "":
            return self.grid.empty_cell
        return text


# =============================================================================
# DataColumn
# =============================================================================

@dataclass
class DataColumn(Column):
    """
    속성 값을 표시하는 기본 컬럼.

    값 결정 순서:
    1. content 함수 (포맷터 우회)
    2. value: 함수면 호출, 문자열이면 속성 경로
    3. attribute 경로
    """
    attribute: str | None = None
    label: str | None = None
    value: str | RowCallable | None = None
    format: FormatSpec = DEFAULT_COLUMN_FORMAT
    filter: str | None = None

    _value_getter: Callable[[Any, Any, int], Any] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def bind(self, grid: Any) -> "DataColumn":
        super().bind(grid)
        self._value_getter = self._resolve_value_source()
        return self

    def _resolve_value_source(self) -> Callable[[Any, Any, int], Any]:
        """값 결정 전략을 컬럼당 한 번 확정."""
        value = self.value
        if callable(value):
            return lambda model, key, index: value(model, key, index, self)

        path = value if isinstance(value, str) else self.attribute
        if path is None:
            return lambda model, key, index: None
        return lambda model, key, index: get_value(model, path)

    def render_header_cell_content(self) -> Any:
        if self.header is not None or (self.label is None and self.attribute is None):
            return super().render_header_cell_content()

        if self.label is not None:
            return self._text_or_empty(self.label)

        return self._attribute_label(self.attribute)

    def _attribute_label(self, attribute: str) -> str:
        """provider → 첫 레코드의 get_attribute_label(), 없으면 속성명 변환."""
        for source in (self.grid.data_provider, self.grid.sample_model):
            getter = getattr(source, "get_attribute_label", None)
            if callable(getter):
                return str(getter(attribute))
        return camel2words(attribute)

    def render_filter_cell_content(self) -> Any:
        if isinstance(self.filter, str):
            return self.filter
        return super().render_filter_cell_content()

    def get_data_cell_value(self, model: Any, key: Any, index: int) -> Any:
        if self._value_getter is None:
            self._value_getter = self._resolve_value_source()
        return self._value_getter(model, key, index)

    def render_data_cell_content(self, model: Any, key: Any, index: int) -> Any:
        if self.content is None:
            value = self.get_data_cell_value(model, key, index)
            if value is None:
                return self.grid.null_display
            return self.grid.formatter.format(value, self.format)

        return super().render_data_cell_content(model, key, index)


# =============================================================================
# SerialColumn
# =============================================================================

@dataclass
class SerialColumn(Column):
    """행 번호 컬럼 (1-based, 배치 전체 기준)."""
    header: str | None = SERIAL_COLUMN_HEADER

    def render_data_cell_content(self, model: Any, key: Any, index: int) -> Any:
        return index + 1
