"""
sheetgrid: 데이터 그리드 형태의 스프레드시트 exporter.

레이어:
- sheetgrid/domain/  → 에러, 상수, 스키마
- sheetgrid/core/    → 설정, run log, 원자적 파일 쓰기
- sheetgrid/render/  → 컬럼, 데이터 소스, openpyxl 렌더링, writer
- sheetgrid/app/     → FastAPI 다운로드 응답
- sheetgrid/testing/ → 테스트용 XLSX 추출기
"""

from sheetgrid.domain.errors import (
    ConfigurationError,
    DataSourceError,
    ExportIOError,
    SpreadsheetError,
    StyleApplicationError,
)
from sheetgrid.domain.schemas import HeaderUnion
from sheetgrid.render import (
    ArrayDataProvider,
    Column,
    DataColumn,
    DbApiQuery,
    IterableQuery,
    Pagination,
    SerialColumn,
    Spreadsheet,
    export_spreadsheet,
)

__version__ = "0.1.0"

__all__ = [
    "Spreadsheet",
    "export_spreadsheet",
    "Column",
    "DataColumn",
    "SerialColumn",
    "HeaderUnion",
    "ArrayDataProvider",
    "Pagination",
    "IterableQuery",
    "DbApiQuery",
    "SpreadsheetError",
    "ConfigurationError",
    "StyleApplicationError",
    "DataSourceError",
    "ExportIOError",
]
