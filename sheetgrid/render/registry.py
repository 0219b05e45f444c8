"""
ColumnRegistry: 컬럼 설정 → 물리 순서의 Column 목록.

허용 설정:
- Column 인스턴스
- dict: {"class": DataColumn | "data" | "serial" | "column", ...필드}
  ("class" 생략 시 DataColumn)
- shorthand 문자열: "attribute", "attribute:format", "attribute:format:label"
- 빈 설정: 첫 레코드의 키로 컬럼 추측

규칙:
- 설정 순서 유지, visible=False 컬럼은 생성 후 제거
- 물리 컬럼 위치(A, B, C, ...) = 필터링된 목록에서의 위치
"""

import dataclasses
import re
from collections.abc import Mapping, Sequence
from typing import Any

from sheetgrid.domain.constants import DEFAULT_COLUMN_FORMAT
from sheetgrid.domain.errors import ConfigurationError, ErrorCodes
from sheetgrid.render.columns import Column, DataColumn, SerialColumn

SHORTHAND_PATTERN = re.compile(r"^([^:]+)(:(\w*))?(:(.*))?$")

COLUMN_TYPES: dict[str, type[Column]] = {
    "data": DataColumn,
    "serial": SerialColumn,
    "column": Column,
}

ColumnConfig = Column | Mapping[str, Any] | str


def parse_shorthand(text: str) -> DataColumn:
    """
    shorthand 문자열 → DataColumn.

    예:
        "price:currency:Price" → attribute=price, format=currency, label=Price
        "price"                → attribute=price, format=raw, label=None
        "price:text:"          → label="" (헤더는 empty_cell)

    Raises:
        ConfigurationError: INVALID_COLUMN_FORMAT (attribute 부분 없음)
    """
    match = SHORTHAND_PATTERN.match(text)
    if match is None:
        raise ConfigurationError(
            ErrorCodes.INVALID_COLUMN_FORMAT,
            text=text,
            error='The column must be specified in the format of "attribute", '
                  '"attribute:format" or "attribute:format:label"',
        )

    return DataColumn(
        attribute=match.group(1),
        format=match.group(3) or DEFAULT_COLUMN_FORMAT,
        label=match.group(5),
    )


def guess_columns(model: Any) -> list[str]:
    """
    레코드에서 컬럼 이름 추측 (레코드 순서 그대로).

    dict → 키, dataclass → 필드, namedtuple → _fields, 일반 객체 → 공개 속성
    """
    if model is None:
        return []
    if isinstance(model, Mapping):
        return [str(name) for name in model]
    if dataclasses.is_dataclass(model) and not isinstance(model, type):
        return [f.name for f in dataclasses.fields(model)]
    if isinstance(model, tuple) and hasattr(model, "_fields"):
        return list(model._fields)
    if hasattr(model, "__dict__"):
        return [name for name in vars(model) if not name.startswith("_")]
    return []


class ColumnRegistry:
    """
    Column 생성 + grid 연결.

    Usage:
        registry = ColumnRegistry(spreadsheet)
        columns = registry.resolve(["id", "name:text:Name"], sample=first_record)
    """

    parse_shorthand = staticmethod(parse_shorthand)

    def __init__(self, grid: Any):
        self.grid = grid

    def resolve(
        self,
        raw_columns: Sequence[ColumnConfig] | None,
        sample: Any = None,
    ) -> list[Column]:
        """
        설정 → 보이는 Column 목록 (물리 순서).

        Args:
            raw_columns: 컬럼 설정 목록 (비어 있으면 sample에서 추측)
            sample: 첫 데이터 레코드 (없으면 None)

        Raises:
            ConfigurationError: INVALID_COLUMN_FORMAT, INVALID_COLUMN_CONFIG
        """
        if not raw_columns:
            raw_columns = guess_columns(sample)

        columns = [self.create_column(config) for config in raw_columns]
        return [column for column in columns if column.is_visible()]

    def create_column(self, config: ColumnConfig) -> Column:
        if isinstance(config, Column):
            column = config
        elif isinstance(config, str):
            column = parse_shorthand(config)
        elif isinstance(config, Mapping):
            column = self._create_from_mapping(config)
        else:
            raise ConfigurationError(
                ErrorCodes.INVALID_COLUMN_CONFIG,
                config=repr(config),
                error="column must be a Column, a mapping or a shorthand string",
            )
        return column.bind(self.grid)

    def _create_from_mapping(self, config: Mapping[str, Any]) -> Column:
        options = dict(config)
        column_class = options.pop("class", DataColumn)

        if isinstance(column_class, str):
            if column_class not in COLUMN_TYPES:
                raise ConfigurationError(
                    ErrorCodes.INVALID_COLUMN_CONFIG,
                    column_class=column_class,
                    supported=sorted(COLUMN_TYPES),
                )
            column_class = COLUMN_TYPES[column_class]

        if not (isinstance(column_class, type) and issubclass(column_class, Column)):
            raise ConfigurationError(
                ErrorCodes.INVALID_COLUMN_CONFIG,
                column_class=repr(column_class),
                error="column class must extend Column",
            )

        try:
            return column_class(**options)
        except TypeError as e:
            raise ConfigurationError(
                ErrorCodes.INVALID_COLUMN_CONFIG,
                column_class=column_class.__name__,
                error=str(e),
            ) from e
