"""Domain layer: errors and schemas."""

from .errors import (
    ConfigurationError,
    DataSourceError,
    ErrorCodes,
    ExportIOError,
    SpreadsheetError,
    StyleApplicationError,
)
from .schemas import (
    Batch,
    ColumnDimension,
    DocumentProperties,
    HeaderUnion,
    RenderState,
    RunLog,
)

__all__ = [
    "SpreadsheetError",
    "ConfigurationError",
    "StyleApplicationError",
    "DataSourceError",
    "ExportIOError",
    "ErrorCodes",
    "Batch",
    "ColumnDimension",
    "DocumentProperties",
    "HeaderUnion",
    "RenderState",
    "RunLog",
]
