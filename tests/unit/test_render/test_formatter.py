"""
test_formatter.py - 기본 포맷터 테스트
"""

from datetime import date, datetime, time
from decimal import Decimal

import pytest

from sheetgrid.domain.errors import ConfigurationError, ErrorCodes
from sheetgrid.render.formatter import Formatter


@pytest.fixture
def formatter() -> Formatter:
    return Formatter()


class TestFormatSpec:
    """포맷 지정 파싱 테스트."""

    def test_raw_passthrough(self, formatter: Formatter):
        """raw: 타입 보존."""
        value = Decimal("1.5")

        assert formatter.format(value, "raw") is value

    def test_empty_name_is_raw(self, formatter: Formatter):
        assert formatter.format(42, "") == 42

    def test_list_with_args(self, formatter: Formatter):
        assert formatter.format(Decimal("1234.567"), ["decimal", 1]) == "1,234.6"

    def test_name_is_case_insensitive(self, formatter: Formatter):
        assert formatter.format(True, "Boolean") == "Yes"

    def test_unknown_format(self, formatter: Formatter):
        with pytest.raises(ConfigurationError) as exc_info:
            formatter.format(1, "roman")

        assert exc_info.value.code == ErrorCodes.UNKNOWN_FORMAT
        assert "raw" in exc_info.value.context["supported"]

    def test_empty_list_spec(self, formatter: Formatter):
        with pytest.raises(ConfigurationError):
            formatter.format(1, [])


class TestFormats:
    """포맷별 결과 테스트."""

    def test_text(self, formatter: Formatter):
        assert formatter.format(12, "text") == "12"

    def test_boolean(self, formatter: Formatter):
        assert formatter.format(0, "boolean") == "No"

    def test_integer(self, formatter: Formatter):
        assert formatter.format(1234567.8, "integer") == "1,234,567"

    def test_decimal_default_places(self, formatter: Formatter):
        assert formatter.format(0.1, "decimal") == "0.10"

    def test_percent(self, formatter: Formatter):
        assert formatter.format(0.256, ["percent", 1]) == "25.6%"

    def test_currency(self, formatter: Formatter):
        assert formatter.format(-1234.5, "currency") == "-$1,234.50"
        assert formatter.format(3, ["currency", "€"]) == "€3.00"

    def test_date(self, formatter: Formatter):
        assert formatter.format(date(2024, 3, 1), "date") == "2024-03-01"
        assert formatter.format("2024-03-01T10:20:30", ["date", "%d.%m.%Y"]) == "01.03.2024"

    def test_datetime(self, formatter: Formatter):
        assert formatter.format(datetime(2024, 3, 1, 9, 5), "datetime") == "2024-03-01 09:05:00"

    def test_time(self, formatter: Formatter):
        assert formatter.format(time(7, 30), "time") == "07:30:00"


class TestLocalization:
    """구분자 설정 테스트."""

    def test_custom_separators(self):
        formatter = Formatter(decimal_separator=",", thousand_separator=".")

        assert formatter.format(Decimal("1234.5"), "decimal") == "1.234,50"

    def test_custom_boolean(self):
        formatter = Formatter(boolean_format=("아니오", "예"))

        assert formatter.format(True, "boolean") == "예"
