"""
값 포맷터: 데이터 셀 값 → 표시 문자열.

규칙:
- 포맷 지정: "name" 또는 ["name", *args] (예: ["date", "%d.%m.%Y"])
- "raw"는 값을 그대로 전달 (숫자/날짜 타입 보존)
- 알 수 없는 포맷 → ConfigurationError (fail-fast)
- 전역 컴포넌트 조회 없음: Spreadsheet 생성 시 주입, 없으면 기본 Formatter
"""

from collections.abc import Callable
from datetime import UTC, date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any

from sheetgrid.domain.errors import ConfigurationError, ErrorCodes

FormatSpec = str | list[Any] | tuple[Any, ...]


class Formatter:
    """
    기본 포맷터.

    Usage:
        formatter = Formatter(date_format="%d.%m.%Y")
        formatter.format(Decimal("1234.5"), ["decimal", 1])  # "1,234.5"
    """

    def __init__(
        self,
        boolean_format: tuple[str, str] = ("No", "Yes"),
        date_format: str = "%Y-%m-%d",
        datetime_format: str = "%Y-%m-%d %H:%M:%S",
        time_format: str = "%H:%M:%S",
        decimal_separator: str = ".",
        thousand_separator: str = ",",
        currency_symbol: str = "$",
    ):
        self.boolean_format = boolean_format
        self.date_format = date_format
        self.datetime_format = datetime_format
        self.time_format = time_format
        self.decimal_separator = decimal_separator
        self.thousand_separator = thousand_separator
        self.currency_symbol = currency_symbol

        self._formats: dict[str, Callable[..., Any]] = {
            "raw": self.as_raw,
            "text": self.as_text,
            "boolean": self.as_boolean,
            "integer": self.as_integer,
            "decimal": self.as_decimal,
            "percent": self.as_percent,
            "currency": self.as_currency,
            "date": self.as_date,
            "datetime": self.as_datetime,
            "time": self.as_time,
        }

    @property
    def format_names(self) -> list[str]:
        return list(self._formats)

    def format(self, value: Any, format_spec: FormatSpec) -> Any:
        """
        값 포맷팅.

        Args:
            value: 원본 값
            format_spec: 포맷 이름 또는 [이름, 인자...]

        Returns:
            포맷된 값 (raw 외에는 문자열)

        Raises:
            ConfigurationError: UNKNOWN_FORMAT
        """
        name, args = self._parse_spec(format_spec)
        formatter = self._formats.get(name)
        if formatter is None:
            raise ConfigurationError(
                ErrorCodes.UNKNOWN_FORMAT,
                format=name,
                supported=self.format_names,
            )
        return formatter(value, *args)

    def _parse_spec(self, format_spec: FormatSpec) -> tuple[str, tuple[Any, ...]]:
        if isinstance(format_spec, str):
            return format_spec.strip().lower() or "raw", ()
        if isinstance(format_spec, (list, tuple)) and format_spec:
            return str(format_spec[0]).strip().lower(), tuple(format_spec[1:])
        raise ConfigurationError(
            ErrorCodes.UNKNOWN_FORMAT,
            format=repr(format_spec),
        )

    # =========================================================================
    # Formats
    # =========================================================================

    def as_raw(self, value: Any) -> Any:
        return value

    def as_text(self, value: Any) -> str:
        return "" if value is None else str(value)

    def as_boolean(self, value: Any) -> str:
        if value is None:
            return ""
        return self.boolean_format[1] if value else self.boolean_format[0]

    def as_integer(self, value: Any) -> str:
        if value is None:
            return ""
        return self._localize(f"{int(self._to_decimal(value)):,}")

    def as_decimal(self, value: Any, decimals: int = 2) -> str:
        if value is None:
            return ""
        return self._localize(f"{self._to_decimal(value):,.{int(decimals)}f}")

    def as_percent(self, value: Any, decimals: int = 0) -> str:
        if value is None:
            return ""
        number = self._to_decimal(value) * 100
        return self._localize(f"{number:,.{int(decimals)}f}") + "%"

    def as_currency(self, value: Any, symbol: str | None = None) -> str:
        if value is None:
            return ""
        prefix = self.currency_symbol if symbol is None else symbol
        number = self._to_decimal(value)
        sign = "-" if number < 0 else ""
        return f"{sign}{prefix}" + self._localize(f"{abs(number):,.2f}")

    def as_date(self, value: Any, fmt: str | None = None) -> str:
        if value is None:
            return ""
        return self._to_datetime(value).strftime(fmt or self.date_format)

    def as_datetime(self, value: Any, fmt: str | None = None) -> str:
        if value is None:
            return ""
        return self._to_datetime(value).strftime(fmt or self.datetime_format)

    def as_time(self, value: Any, fmt: str | None = None) -> str:
        if value is None:
            return ""
        if isinstance(value, time):
            return value.strftime(fmt or self.time_format)
        return self._to_datetime(value).strftime(fmt or self.time_format)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _to_decimal(self, value: Any) -> Decimal:
        if isinstance(value, Decimal):
            return value
        try:
            # float → str 경유 (이진 오차 방지)
            return Decimal(str(value))
        except InvalidOperation as e:
            raise ValueError(f"Cannot format {value!r} as number") from e

    def _to_datetime(self, value: Any) -> datetime:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value, UTC)
        if isinstance(value, str):
            return datetime.fromisoformat(value)
        raise ValueError(f"Cannot format {value!r} as date")

    def _localize(self, number: str) -> str:
        """기본 구분자(",", ".")를 설정된 구분자로 교체."""
        if self.thousand_separator == "," and self.decimal_separator == ".":
            return number
        return number.translate(
            str.maketrans({",": self.thousand_separator, ".": self.decimal_separator})
        )
