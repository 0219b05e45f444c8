"""
Error definitions for the spreadsheet exporter.

규칙:
- 조용한 실패 금지 → 코드가 붙은 SpreadsheetError로 명시적 실패
- 재시도 없음: 감지된 곳에서 즉시 raise, 호출자까지 그대로 전파
- 실패 시 이미 쓰인 시트 내용은 롤백하지 않음 (문서 인스턴스는 폐기 대상)
"""

from typing import Any


class SpreadsheetError(Exception):
    """
    exporter 공통 에러.

    Usage:
        raise ConfigurationError(ErrorCodes.INVALID_COLUMN_FORMAT, text="price:")
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


class ConfigurationError(SpreadsheetError):
    """
    잘못된 설정.

    - shorthand 컬럼 문자열 형식 오류
    - header union 컬럼 부족 (underflow)
    - 알 수 없는 writer 타입 / 옵션 / 포맷
    """


class StyleApplicationError(SpreadsheetError):
    """시트/스타일 모델(openpyxl)이 값, 스타일, 병합 요청을 거부함."""


class DataSourceError(SpreadsheetError):
    """data provider 또는 query 실패. 원인 예외는 __cause__로 보존."""


class ExportIOError(SpreadsheetError):
    """파일 시스템 또는 writer 저장 실패."""


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Configuration ===
    INVALID_COLUMN_FORMAT = "INVALID_COLUMN_FORMAT"
    INVALID_COLUMN_CONFIG = "INVALID_COLUMN_CONFIG"
    UNKNOWN_OPTION = "UNKNOWN_OPTION"
    INVALID_HEADER_UNION = "INVALID_HEADER_UNION"
    HEADER_UNION_UNDERFLOW = "HEADER_UNION_UNDERFLOW"
    UNSUPPORTED_WRITER_TYPE = "UNSUPPORTED_WRITER_TYPE"
    UNKNOWN_FORMAT = "UNKNOWN_FORMAT"
    MISSING_DATA_SOURCE = "MISSING_DATA_SOURCE"
    INVALID_DATA_SOURCE = "INVALID_DATA_SOURCE"

    # === Sheet model ===
    STYLE_APPLICATION_FAILED = "STYLE_APPLICATION_FAILED"
    CELL_WRITE_FAILED = "CELL_WRITE_FAILED"
    SHEET_OPERATION_FAILED = "SHEET_OPERATION_FAILED"

    # === Data source ===
    DATA_SOURCE_FAILED = "DATA_SOURCE_FAILED"

    # === Export ===
    EXPORT_IO_FAILED = "EXPORT_IO_FAILED"

    # === Warnings (run log only, not raised) ===
    AMBIGUOUS_DATA_SOURCE = "AMBIGUOUS_DATA_SOURCE"
    EMPTY_DATA_SOURCE = "EMPTY_DATA_SOURCE"
