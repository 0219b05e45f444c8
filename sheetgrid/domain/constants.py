"""
Domain Constants: exporter 전역 상수.

writer 타입, MIME 타입, 렌더링 기본값 등 시스템 전반에서 사용되는 값들.
"""

# =============================================================================
# Render Defaults (렌더링 기본값)
# =============================================================================
# default.yaml의 spreadsheet: 섹션으로 오버라이드 가능

DEFAULT_BATCH_SIZE = 100
DEFAULT_START_ROW_INDEX = 1
DEFAULT_EMPTY_CELL = ""
DEFAULT_NULL_DISPLAY = ""

# shorthand에 포맷이 없을 때 (값 그대로 전달)
DEFAULT_COLUMN_FORMAT = "raw"

# SerialColumn 헤더
SERIAL_COLUMN_HEADER = "#"

# header union 사용 시 헤더가 차지하는 물리 행 수
SIMPLE_HEADER_ROWS = 1
UNION_HEADER_ROWS = 2

# =============================================================================
# Writer Types (출력 포맷)
# =============================================================================
# writer 타입 = writer_type 설정 또는 파일 확장자 첫 글자 대문자화
# 예: report.xlsx → "Xlsx", dump.csv → "Csv"

WRITER_XLSX = "Xlsx"
WRITER_CSV = "Csv"
WRITER_HTML = "Html"

BUILTIN_WRITER_TYPES = (WRITER_XLSX, WRITER_CSV, WRITER_HTML)

# =============================================================================
# MIME Types
# =============================================================================

DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_TYPES = {
    "Xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "Xls": "application/vnd.ms-excel",
    "Ods": "application/vnd.oasis.opendocument.spreadsheet",
    "Csv": "text/csv",
    "Html": "text/html",
    "Pdf": "application/pdf",
}

# =============================================================================
# Run Log
# =============================================================================

RUN_ID_PREFIX = "RUN-"
RUN_LOG_FILENAME_PATTERN = "run_*.json"
