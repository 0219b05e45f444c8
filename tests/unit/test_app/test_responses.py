"""
test_responses.py - 다운로드 응답 테스트

DoD:
- 렌더링 결과 bytes + Content-Disposition
- MIME 타입: 인자 → writer 타입 → application/octet-stream
- 비ASCII 파일명은 filename*=UTF-8''
"""

from io import BytesIO

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from sheetgrid.app.responses import content_disposition, get_mime_type, send
from sheetgrid.domain.errors import ConfigurationError, ErrorCodes
from sheetgrid.render.providers import ArrayDataProvider
from sheetgrid.render.spreadsheet import Spreadsheet


class TestContentDisposition:
    """content_disposition 테스트."""

    def test_ascii(self):
        assert content_disposition("items.xlsx") == 'attachment; filename="items.xlsx"'

    def test_inline(self):
        assert content_disposition("items.html", inline=True) == 'inline; filename="items.html"'

    def test_quotes_escaped(self):
        assert content_disposition('a"b.csv') == 'attachment; filename="a\\"b.csv"'

    def test_non_ascii(self):
        value = content_disposition("품목.xlsx")

        assert value.startswith('attachment; filename="??.xlsx"')
        assert "filename*=UTF-8''%ED%92%88%EB%AA%A9.xlsx" in value


class TestGetMimeType:
    def test_known_and_unknown(self):
        assert get_mime_type("Csv") == "text/csv"
        assert get_mime_type("Xls") == "application/vnd.ms-excel"
        assert get_mime_type("Dbf") == "application/octet-stream"


class TestSend:
    """send() 테스트."""

    def test_xlsx_response(self, spreadsheet: Spreadsheet):
        response = send(spreadsheet, "items.xlsx")

        assert response.media_type == (
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert response.headers["content-disposition"] == 'attachment; filename="items.xlsx"'
        wb = load_workbook(BytesIO(response.body))
        assert wb.active["A1"].value == "Id"

    def test_mime_type_override(self, spreadsheet: Spreadsheet):
        response = send(spreadsheet, "items.csv", mime_type="text/plain")

        assert response.media_type == "text/plain"
        assert response.body.decode("utf-8").startswith("Id,Name,Price")

    def test_writer_type_from_spreadsheet(self, provider: ArrayDataProvider):
        spreadsheet = Spreadsheet(data_provider=provider, writer_type="Html")

        response = send(spreadsheet, "items")

        assert response.media_type == "text/html"
        assert response.body.startswith(b"<!DOCTYPE html>")

    def test_unsupported_type(self, spreadsheet: Spreadsheet):
        with pytest.raises(ConfigurationError) as exc_info:
            send(spreadsheet, "items.ods")

        assert exc_info.value.code == ErrorCodes.UNSUPPORTED_WRITER_TYPE

    def test_through_fastapi_route(self, sample_items):
        """라우트에서 그대로 반환."""
        app = FastAPI()

        @app.get("/export")
        def export():
            spreadsheet = Spreadsheet(
                data_provider=ArrayDataProvider(sample_items),
                columns=["id", "name"],
            )
            return send(spreadsheet, "목록.csv")

        client = TestClient(app)
        response = client.get("/export")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "filename*=UTF-8''" in response.headers["content-disposition"]
        assert response.text.splitlines()[1] == "1,bolt"
