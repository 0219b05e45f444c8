"""
Data schemas for the spreadsheet exporter.

규칙:
- 설정 구조체는 알 수 없는 옵션 이름을 생성 시점에 거절 (reflective setter 호출 금지)
- RenderState는 Spreadsheet만 변경
"""

from dataclasses import dataclass, field, fields
from typing import Any

from sheetgrid.domain.errors import ConfigurationError, ErrorCodes


def _reject_unknown(target: str, options: dict[str, Any], allowed: set[str]) -> None:
    unknown = sorted(set(options) - allowed)
    if unknown:
        raise ConfigurationError(
            ErrorCodes.UNKNOWN_OPTION,
            target=target,
            options=unknown,
            allowed=sorted(allowed),
        )


# =============================================================================
# Column / Document Options
# =============================================================================

@dataclass(frozen=True)
class ColumnDimension:
    """
    컬럼 크기 지정.

    첫 행이 쓰이기 전에 컬럼마다 한 번만 적용된다.
    """
    width: float | None = None
    auto_size: bool | None = None
    hidden: bool | None = None
    outline_level: int | None = None

    @classmethod
    def from_dict(cls, options: dict[str, Any]) -> "ColumnDimension":
        _reject_unknown("column_dimension", options, {f.name for f in fields(cls)})
        return cls(**options)

    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))


@dataclass(frozen=True)
class DocumentProperties:
    """문서 메타데이터 (openpyxl DocumentProperties 대응 필드만)."""
    creator: str | None = None
    title: str | None = None
    description: str | None = None
    subject: str | None = None
    identifier: str | None = None
    language: str | None = None
    keywords: str | None = None
    category: str | None = None
    content_status: str | None = None
    version: str | None = None
    revision: str | None = None
    last_modified_by: str | None = None

    @classmethod
    def from_dict(cls, options: dict[str, Any]) -> "DocumentProperties":
        _reject_unknown("document_properties", options, {f.name for f in fields(cls)})
        return cls(**options)

    def items(self) -> list[tuple[str, Any]]:
        """설정된 (이름, 값) 목록."""
        return [
            (f.name, getattr(self, f.name))
            for f in fields(self)
            if getattr(self, f.name) is not None
        ]


@dataclass(frozen=True)
class HeaderUnion:
    """
    헤더 컬럼 그룹.

    label: union 라벨 (None/공백이면 empty_cell)
    offset: union 앞에 개별 헤더로 렌더링할 일반 컬럼 수
    length: union 라벨 아래로 묶이는 컬럼 수
    """
    label: str | None = None
    offset: int = 0
    length: int = 1
    header_options: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        valid = (
            (self.label is None or isinstance(self.label, str))
            and _is_int(self.offset)
            and _is_int(self.length)
        )
        if not valid or self.offset < 0 or self.length < 1:
            raise ConfigurationError(
                ErrorCodes.INVALID_HEADER_UNION,
                label=self.label,
                offset=self.offset,
                length=self.length,
            )

    @classmethod
    def from_dict(cls, options: dict[str, Any]) -> "HeaderUnion":
        _reject_unknown("header_union", options, {f.name for f in fields(cls)})
        return cls(**options)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# =============================================================================
# Render State
# =============================================================================

@dataclass
class Batch:
    """data source에서 한 번에 가져온 (record, key) 묶음."""
    models: list[Any]
    keys: list[Any] | None = None

    def __len__(self) -> int:
        return len(self.models)

    def key_at(self, position: int, default: Any) -> Any:
        if self.keys is not None and position < len(self.keys):
            return self.keys[position]
        return default


@dataclass
class RenderState:
    """
    시트 하나를 렌더링하는 동안의 커서.

    row_index: 다음에 쓸 행 번호 (1-based)
    model_index: 배치 전체에 걸친 0-based 데이터 행 번호
    """
    row_index: int
    sheet_index: int
    model_index: int = 0
    header_rows: int = 0
    columns_initialized: bool = False


# =============================================================================
# Run Log Schemas
# =============================================================================

@dataclass
class WarningLog:
    """경고 로그."""
    level: str = "warning"
    code: str = ""
    sheet_index: int | None = None
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "code": self.code,
            "sheet_index": self.sheet_index,
            "message": self.message,
        }


@dataclass
class SheetLog:
    """render() 한 번의 결과."""
    sheet_index: int
    title: str | None
    columns: list[str]
    header_rows: int
    data_rows: int
    start_row: int
    end_row: int  # 마지막으로 쓴 행 다음 번호

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheet_index": self.sheet_index,
            "title": self.title,
            "columns": self.columns,
            "header_rows": self.header_rows,
            "data_rows": self.data_rows,
            "start_row": self.start_row,
            "end_row": self.end_row,
        }


@dataclass
class RunLog:
    """
    export 실행 로그.

    Spreadsheet 인스턴스 단위. 시트마다 SheetLog가 추가됨.
    """
    run_id: str
    started_at: str  # ISO 8601
    finished_at: str | None = None
    result: str = "pending"  # pending, success, failed

    sheets: list[SheetLog] = field(default_factory=list)
    warnings: list[WarningLog] = field(default_factory=list)

    output_path: str | None = None
    writer_type: str | None = None

    # Error (if failed)
    error_code: str | None = None
    error_context: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "run_id": self.run_id,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "result": self.result,
            "sheets": [s.to_dict() for s in self.sheets],
            "warnings": [w.to_dict() for w in self.warnings],
            "output_path": self.output_path,
            "writer_type": self.writer_type,
            "error_code": self.error_code,
            "error_context": self.error_context,
        }
