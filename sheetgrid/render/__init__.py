"""
Render layer: 컬럼, 데이터 소스, openpyxl 시트 렌더링, 문서 writer.
"""

from .batch import BatchSource, CursorBatchSource, PagedBatchSource, create_batch_source
from .columns import Column, DataColumn, SerialColumn
from .formatter import Formatter
from .providers import ArrayDataProvider, DbApiQuery, IterableQuery, Pagination
from .registry import ColumnRegistry, guess_columns, parse_shorthand
from .sheet import SheetWriter
from .spreadsheet import Spreadsheet, export_spreadsheet
from .writers import create_writer, resolve_writer_type

__all__ = [
    # columns
    "Column",
    "DataColumn",
    "SerialColumn",
    "ColumnRegistry",
    "parse_shorthand",
    "guess_columns",
    # data sources
    "ArrayDataProvider",
    "Pagination",
    "IterableQuery",
    "DbApiQuery",
    "BatchSource",
    "PagedBatchSource",
    "CursorBatchSource",
    "create_batch_source",
    # rendering
    "Formatter",
    "SheetWriter",
    "Spreadsheet",
    "export_spreadsheet",
    # writers
    "create_writer",
    "resolve_writer_type",
]
