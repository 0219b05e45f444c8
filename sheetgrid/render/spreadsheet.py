"""
Spreadsheet: data source → openpyxl 시트 스트리밍 렌더링.

흐름 (render() 한 번 = 시트 하나):
1. 두 번째 render()부터는 새 시트 추가 후 활성화
2. 제목 지정, row_index = start_row_index
3. 배치 순회
   - 레코드가 있는 첫 배치: 컬럼 확정 → 컬럼 크기 → 헤더(+필터)
   - 레코드마다 데이터 행 1개
4. 푸터 (show_footer)
5. run log에 시트 기록

규칙:
- 한 번에 한 배치만 메모리에 유지
- 에러는 즉시 전파, 이미 쓴 셀은 롤백하지 않음 (문서 폐기 대상)
- row_index는 렌더링 후 마지막으로 쓴 행 다음 번호
"""

import gc
import logging
from collections.abc import Sequence
from io import BytesIO
from pathlib import Path
from typing import Any

from openpyxl.utils import get_column_letter
from openpyxl.workbook import Workbook

from sheetgrid.core.config import load_config, spreadsheet_options
from sheetgrid.core.files import atomic_write
from sheetgrid.core.logging import (
    complete_run_log,
    create_run_log,
    emit_warning,
    record_sheet,
)
from sheetgrid.domain.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_EMPTY_CELL,
    DEFAULT_NULL_DISPLAY,
    DEFAULT_START_ROW_INDEX,
)
from sheetgrid.domain.errors import (
    ConfigurationError,
    ErrorCodes,
    ExportIOError,
    SpreadsheetError,
)
from sheetgrid.domain.schemas import (
    Batch,
    DocumentProperties,
    HeaderUnion,
    RenderState,
    RunLog,
)
from sheetgrid.render.batch import BatchSource, create_batch_source
from sheetgrid.render.columns import Column
from sheetgrid.render.formatter import Formatter
from sheetgrid.render.registry import ColumnRegistry
from sheetgrid.render.sheet import SheetWriter, StyleBlock
from sheetgrid.render.writers import WriterCreator, create_writer, resolve_writer_type

logger = logging.getLogger(__name__)

# configure()에서 허용하는 옵션
OPTION_NAMES = frozenset([
    "data_provider",
    "query",
    "batch_size",
    "columns",
    "show_header",
    "show_footer",
    "show_filter",
    "title",
    "empty_cell",
    "null_display",
    "writer_type",
    "writer_creator",
    "header_column_unions",
    "start_row_index",
    "formatter",
    "collect_garbage",
])


class Spreadsheet:
    """
    스프레드시트 exporter.

    Usage:
        spreadsheet = Spreadsheet(
            data_provider=ArrayDataProvider(items),
            columns=["id", "name:text:Name", "price:currency"],
            title="Items",
        )
        spreadsheet.save("exports/items.xlsx")

    여러 시트:
        spreadsheet.render()
        spreadsheet.configure(title="Other", data_provider=other).render()
        spreadsheet.save("exports/all.xlsx")

    Args:
        document: 기존 openpyxl Workbook (없으면 새로 생성)
        **options: configure()와 같은 옵션
    """

    def __init__(self, document: Workbook | None = None, **options: Any):
        self.data_provider: Any = None
        self.query: Any = None
        self.batch_size: int = DEFAULT_BATCH_SIZE
        self.columns: Sequence[Any] = []
        self.show_header: bool = True
        self.show_footer: bool = False
        self.show_filter: bool = False
        self.title: str | None = None
        self.empty_cell: Any = DEFAULT_EMPTY_CELL
        self.null_display: Any = DEFAULT_NULL_DISPLAY
        self.writer_type: str | None = None
        self.writer_creator: WriterCreator | None = None
        self.header_column_unions: list[HeaderUnion] = []
        self.start_row_index: int = DEFAULT_START_ROW_INDEX
        self.formatter: Formatter = Formatter()
        self.collect_garbage: bool = True

        self.sheet_writer = SheetWriter(document)
        self.run_log: RunLog = create_run_log()
        self.registry = ColumnRegistry(self)

        self.columns_resolved: list[Column] = []
        self.sample_model: Any = None
        self._state: RenderState | None = None
        self._rendered = False

        self.configure(**options)

    @classmethod
    def from_config(cls, config_path: Path | None = None, **options: Any) -> "Spreadsheet":
        """YAML 설정(spreadsheet: 섹션) + 코드 옵션으로 생성. 코드 옵션이 우선."""
        file_options = spreadsheet_options(load_config(config_path))
        document = options.pop("document", None)
        return cls(document, **{**file_options, **options})

    # =========================================================================
    # Configuration
    # =========================================================================

    def configure(self, **options: Any) -> "Spreadsheet":
        """
        옵션 변경 (다음 render()부터 적용).

        Raises:
            ConfigurationError: UNKNOWN_OPTION, INVALID_HEADER_UNION
        """
        unknown = sorted(set(options) - OPTION_NAMES)
        if unknown:
            raise ConfigurationError(
                ErrorCodes.UNKNOWN_OPTION,
                target="spreadsheet",
                options=unknown,
            )

        for name, value in options.items():
            if name == "header_column_unions":
                value = _coerce_unions(value)
            elif name == "formatter" and value is None:
                value = Formatter()
            elif name == "columns" and value is None:
                value = []
            setattr(self, name, value)
        return self

    def properties(self, **properties: Any) -> "Spreadsheet":
        """
        문서 속성 지정.

        Usage:
            spreadsheet.properties(creator="ops", title="Monthly report")

        Raises:
            ConfigurationError: UNKNOWN_OPTION (알 수 없는 속성)
        """
        self.sheet_writer.set_properties(DocumentProperties.from_dict(properties))
        return self

    # =========================================================================
    # State
    # =========================================================================

    @property
    def document(self) -> Workbook:
        return self.sheet_writer.workbook

    workbook = document

    @property
    def rendered(self) -> bool:
        return self._rendered

    @property
    def row_index(self) -> int:
        """다음에 쓸 행 번호 (렌더링 전이면 start_row_index)."""
        if self._state is None:
            return self.start_row_index
        return self._state.row_index

    # =========================================================================
    # Render
    # =========================================================================

    def render(self) -> "Spreadsheet":
        """
        활성 시트(두 번째 호출부터는 새 시트)에 데이터 렌더링.

        Raises:
            ConfigurationError: 잘못된 컬럼/union/data source 설정
            StyleApplicationError: 시트 모델이 값/스타일을 거부
            DataSourceError: provider/query 실패
        """
        try:
            if self._rendered:
                self.sheet_writer.set_active_sheet(self.sheet_writer.create_sheet())
            self._render_sheet(self.sheet_writer.active_index)
        except SpreadsheetError as e:
            logger.error(f"Render failed: {e}")
            complete_run_log(
                self.run_log,
                success=False,
                error_code=e.code,
                error_context=e.to_dict(),
            )
            raise

        self._rendered = True
        return self

    def _render_sheet(self, sheet_index: int) -> None:
        if self.title:
            self.sheet_writer.set_sheet_title(self.title)

        state = RenderState(row_index=self.start_row_index, sheet_index=sheet_index)
        self._state = state
        self.sample_model = None

        # 명시된 컬럼은 데이터 조회 전에 확정 (잘못된 설정이면 셀을 쓰기 전에 실패)
        self.columns_resolved = self.registry.resolve(self.columns) if self.columns else []

        source = self._create_batch_source(sheet_index)
        for batch in source:
            if not state.columns_initialized:
                if not len(batch):
                    continue
                self._initialize_columns(state, batch.models[0])

            self._render_body(state, batch)
            logger.debug(
                f"Sheet {sheet_index}: wrote {len(batch)} row(s), next row {state.row_index}"
            )
            del batch
            if self.collect_garbage:
                gc.collect()

        if not state.columns_initialized:
            logger.warning(f"Sheet {sheet_index}: data source yielded no records")
            emit_warning(
                self.run_log,
                ErrorCodes.EMPTY_DATA_SOURCE,
                "data source yielded no records",
                sheet_index=sheet_index,
            )
            self._initialize_columns(state, None)

        if self.show_footer:
            self._render_footer(state)

        record_sheet(
            self.run_log,
            sheet_index=sheet_index,
            title=self.sheet_writer.sheet.title,
            columns=[str(c.render_header_cell_content()) for c in self.columns_resolved],
            header_rows=state.header_rows,
            data_rows=state.model_index,
            start_row=self.start_row_index,
            end_row=state.row_index,
        )
        logger.info(
            f"Rendered sheet {sheet_index} '{self.sheet_writer.sheet.title}': "
            f"{len(self.columns_resolved)} column(s), {state.model_index} row(s)"
        )

    def _create_batch_source(self, sheet_index: int) -> BatchSource:
        if self.query is not None and self.data_provider is not None:
            emit_warning(
                self.run_log,
                ErrorCodes.AMBIGUOUS_DATA_SOURCE,
                "both query and data_provider configured; query is used",
                sheet_index=sheet_index,
            )
        return create_batch_source(self.data_provider, self.query, self.batch_size)

    def _initialize_columns(self, state: RenderState, sample: Any) -> None:
        """컬럼 확정 + 컬럼 크기 + 헤더/필터 행."""
        self.sample_model = sample
        if not self.columns:
            self.columns_resolved = self.registry.resolve(None, sample)

        for position, column in enumerate(self.columns_resolved, start=1):
            dimension = column.dimension_options
            if dimension is not None and not dimension.is_empty():
                self.sheet_writer.set_column_dimension(get_column_letter(position), dimension)

        header_start = state.row_index
        if self.show_header:
            self._render_header(state)
        if self.show_filter:
            self._render_filter(state)
        state.header_rows = state.row_index - header_start
        state.columns_initialized = True

    # =========================================================================
    # Rows
    # =========================================================================

    def _render_header(self, state: RenderState) -> None:
        if self.header_column_unions:
            self._render_union_header(state)
            return

        row = state.row_index
        for position, column in enumerate(self.columns_resolved, start=1):
            column.render_header_cell(f"{get_column_letter(position)}{row}")
        state.row_index += 1

    def _render_union_header(self, state: RenderState) -> None:
        """
        두 행 헤더.

        윗행: offset 컬럼(세로 병합), union 라벨(가로 병합), 남은 컬럼(세로 병합)
        아랫행: union에 묶인 컬럼 헤더
        """
        columns = self.columns_resolved
        upper = state.row_index
        lower = upper + 1
        position = 0

        for union in self.header_column_unions:
            remaining = len(columns) - position
            if union.offset + union.length > remaining:
                raise ConfigurationError(
                    ErrorCodes.HEADER_UNION_UNDERFLOW,
                    label=union.label,
                    offset=union.offset,
                    length=union.length,
                    remaining=remaining,
                )

            for _ in range(union.offset):
                self._render_spanning_header(columns[position], position + 1, upper, lower)
                position += 1

            start = get_column_letter(position + 1)
            end = get_column_letter(position + union.length)
            label = union.label if union.label and union.label.strip() else self.empty_cell
            self.render_cell(f"{start}{upper}", label, union.header_options)
            if start != end:
                self.merge_cells(f"{start}{upper}:{end}{upper}")

            for _ in range(union.length):
                columns[position].render_header_cell(f"{get_column_letter(position + 1)}{lower}")
                position += 1

        while position < len(columns):
            self._render_spanning_header(columns[position], position + 1, upper, lower)
            position += 1

        state.row_index += 2

    def _render_spanning_header(self, column: Column, number: int, upper: int, lower: int) -> None:
        letter = get_column_letter(number)
        column.render_header_cell(f"{letter}{upper}")
        self.merge_cells(f"{letter}{upper}:{letter}{lower}")

    def _render_filter(self, state: RenderState) -> None:
        row = state.row_index
        for position, column in enumerate(self.columns_resolved, start=1):
            column.render_filter_cell(f"{get_column_letter(position)}{row}")
        state.row_index += 1

    def _render_body(self, state: RenderState, batch: Batch) -> None:
        letters = [get_column_letter(i) for i in range(1, len(self.columns_resolved) + 1)]
        for position, model in enumerate(batch.models):
            key = batch.key_at(position, state.model_index)
            row = state.row_index
            for letter, column in zip(letters, self.columns_resolved):
                column.render_data_cell(f"{letter}{row}", model, key, state.model_index)
            state.model_index += 1
            state.row_index += 1

    def _render_footer(self, state: RenderState) -> None:
        row = state.row_index
        for position, column in enumerate(self.columns_resolved, start=1):
            column.render_footer_cell(f"{get_column_letter(position)}{row}")
        state.row_index += 1

    # =========================================================================
    # Cell helpers
    # =========================================================================

    def render_cell(self, coordinate: str, content: Any, style: StyleBlock | None = None) -> "Spreadsheet":
        """
        셀 하나 쓰기 (값 + 스타일).

        start_row_index > 1로 비워둔 앞쪽 행을 직접 채울 때도 사용.
        """
        self.sheet_writer.set_cell(coordinate, content)
        if style:
            self.sheet_writer.apply_style(coordinate, style)
        return self

    def apply_cell_style(self, coordinate: str, style: StyleBlock) -> "Spreadsheet":
        self.sheet_writer.apply_style(coordinate, style)
        return self

    def merge_cells(self, cell_range: str) -> "Spreadsheet":
        self.sheet_writer.merge_cells(cell_range)
        return self

    # =========================================================================
    # Output
    # =========================================================================

    def save(self, filename: str | Path) -> Path:
        """
        파일로 저장 (렌더링 전이면 먼저 render()).

        writer 타입: writer_type 설정 → 확장자. 상위 디렉토리는 자동 생성.

        Raises:
            ConfigurationError: UNSUPPORTED_WRITER_TYPE
            ExportIOError: EXPORT_IO_FAILED
        """
        path = Path(filename)
        if not self._rendered:
            self.render()

        writer_type = resolve_writer_type(path.name, self.writer_type)
        try:
            writer = create_writer(self.document, writer_type, self.writer_creator)
            atomic_write(path, writer.save)
        except SpreadsheetError as e:
            self._fail_output(e, writer_type)
            raise
        except Exception as e:
            error = ExportIOError(
                ErrorCodes.EXPORT_IO_FAILED,
                path=str(path),
                writer_type=writer_type,
                error=str(e),
            )
            self._fail_output(error, writer_type)
            raise error from e

        complete_run_log(self.run_log, success=True, output_path=str(path), writer_type=writer_type)
        logger.info(f"Saved spreadsheet to {path} ({writer_type})")
        return path

    def export_stream(
        self,
        attachment_name: str | None = None,
        writer_type: str | None = None,
    ) -> BytesIO:
        """
        메모리 스트림으로 내보내기 (위치 0으로 되감은 상태).

        writer 타입: writer_type 인자 → writer_type 설정 → attachment_name 확장자 → Xlsx

        Raises:
            ConfigurationError: UNSUPPORTED_WRITER_TYPE
            ExportIOError: EXPORT_IO_FAILED
        """
        if not self._rendered:
            self.render()

        writer_type = resolve_writer_type(attachment_name, writer_type or self.writer_type)
        stream = BytesIO()
        try:
            writer = create_writer(self.document, writer_type, self.writer_creator)
            writer.save(stream)
        except SpreadsheetError as e:
            self._fail_output(e, writer_type)
            raise
        except Exception as e:
            error = ExportIOError(
                ErrorCodes.EXPORT_IO_FAILED,
                attachment_name=attachment_name,
                writer_type=writer_type,
                error=str(e),
            )
            self._fail_output(error, writer_type)
            raise error from e

        stream.seek(0)
        complete_run_log(self.run_log, success=True, writer_type=writer_type)
        logger.info(f"Exported spreadsheet to stream ({writer_type}, {stream.getbuffer().nbytes} bytes)")
        return stream

    def _fail_output(self, error: SpreadsheetError, writer_type: str) -> None:
        logger.error(f"Export failed: {error}")
        complete_run_log(
            self.run_log,
            success=False,
            writer_type=writer_type,
            error_code=error.code,
            error_context=error.to_dict(),
        )


def _coerce_unions(unions: Any) -> list[HeaderUnion]:
    if not unions:
        return []

    result = []
    for union in unions:
        if isinstance(union, HeaderUnion):
            result.append(union)
        elif isinstance(union, dict):
            result.append(HeaderUnion.from_dict(union))
        else:
            raise ConfigurationError(
                ErrorCodes.INVALID_HEADER_UNION,
                union=repr(union),
                error="header union must be a HeaderUnion or a mapping",
            )
    return result


def export_spreadsheet(
    path: str | Path,
    properties: dict[str, Any] | None = None,
    **options: Any,
) -> Path:
    """
    생성 → 렌더링 → 저장을 한 번에.

    Usage:
        export_spreadsheet("out/items.csv", data_provider=provider, columns=["id", "name"])
    """
    spreadsheet = Spreadsheet(**options)
    if properties:
        spreadsheet.properties(**properties)
    return spreadsheet.save(path)
