"""
다운로드 응답: 렌더링된 스프레드시트 → FastAPI Response.

Usage:
    @router.get("/items/export")
    def export_items() -> Response:
        spreadsheet = Spreadsheet(data_provider=provider, columns=["id", "name"])
        return send(spreadsheet, "items.xlsx")
"""

from urllib.parse import quote

from fastapi import Response

from sheetgrid.domain.constants import DEFAULT_MIME_TYPE, MIME_TYPES
from sheetgrid.render.spreadsheet import Spreadsheet
from sheetgrid.render.writers import resolve_writer_type


def get_mime_type(writer_type: str) -> str:
    """writer 타입 → MIME 타입 (모르면 application/octet-stream)."""
    return MIME_TYPES.get(writer_type, DEFAULT_MIME_TYPE)


def content_disposition(filename: str, inline: bool = False) -> str:
    """
    Content-Disposition 헤더 값.

    ASCII가 아닌 파일명은 RFC 5987 filename* 추가 (filename은 ASCII 대체값).
    """
    disposition = "inline" if inline else "attachment"
    try:
        filename.encode("ascii")
    except UnicodeEncodeError:
        fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', "")
        return f"{disposition}; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"
    escaped = filename.replace("\\", "\\\\").replace('"', '\\"')
    return f'{disposition}; filename="{escaped}"'


def send(
    spreadsheet: Spreadsheet,
    attachment_name: str,
    mime_type: str | None = None,
    inline: bool = False,
    writer_type: str | None = None,
) -> Response:
    """
    스프레드시트를 다운로드 응답으로 변환 (렌더링 전이면 먼저 render()).

    Args:
        spreadsheet: Spreadsheet 인스턴스
        attachment_name: 다운로드 파일명 (확장자로 writer 타입 결정)
        mime_type: 응답 MIME 타입 (없으면 writer 타입 기준)
        inline: True면 브라우저에 바로 표시
        writer_type: writer 타입 강제 지정

    Raises:
        ConfigurationError: UNSUPPORTED_WRITER_TYPE
        ExportIOError: EXPORT_IO_FAILED
    """
    resolved_type = resolve_writer_type(attachment_name, writer_type or spreadsheet.writer_type)
    stream = spreadsheet.export_stream(attachment_name, resolved_type)

    return Response(
        content=stream.getvalue(),
        media_type=mime_type or get_mime_type(resolved_type),
        headers={
            "Content-Disposition": content_disposition(attachment_name, inline),
        },
    )
