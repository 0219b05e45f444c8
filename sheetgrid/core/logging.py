"""
Run logging: export run log schema, sheet records, warnings

규칙:
- Spreadsheet 인스턴스 하나 = RunLog 하나
- render() 한 번마다 SheetLog 추가
- 실패도 기록 (error_code, error_context) 후 에러는 그대로 전파
"""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from sheetgrid.core.files import atomic_write_json
from sheetgrid.core.ids import generate_run_id
from sheetgrid.domain.constants import RUN_LOG_FILENAME_PATTERN
from sheetgrid.domain.schemas import RunLog, SheetLog, WarningLog

# =============================================================================
# Run Log Management
# =============================================================================


def create_run_log() -> RunLog:
    """
    새 RunLog 생성.

    Returns:
        초기화된 RunLog
    """
    now = datetime.now(UTC).isoformat()

    return RunLog(
        run_id=generate_run_id(),
        started_at=now,
        result="pending",
    )


def record_sheet(
    run_log: RunLog,
    sheet_index: int,
    title: str | None,
    columns: list[str],
    header_rows: int,
    data_rows: int,
    start_row: int,
    end_row: int,
) -> SheetLog:
    """
    렌더링된 시트 기록.

    Args:
        run_log: RunLog 인스턴스
        sheet_index: 시트 인덱스 (0-based)
        title: 시트 제목
        columns: 물리 순서의 컬럼 헤더 목록
        header_rows: 헤더(+필터)가 차지한 행 수
        data_rows: 데이터 행 수
        start_row: 시작 행 번호
        end_row: 마지막으로 쓴 행 다음 번호

    Returns:
        추가된 SheetLog
    """
    sheet = SheetLog(
        sheet_index=sheet_index,
        title=title,
        columns=columns,
        header_rows=header_rows,
        data_rows=data_rows,
        start_row=start_row,
        end_row=end_row,
    )
    run_log.sheets.append(sheet)
    return sheet


def emit_warning(
    run_log: RunLog,
    code: str,
    message: str,
    sheet_index: int | None = None,
) -> None:
    """
    경고 이벤트 기록.

    Args:
        run_log: RunLog 인스턴스
        code: 경고 코드
        message: 경고 메시지
        sheet_index: 관련 시트 (없으면 문서 전체)
    """
    run_log.warnings.append(
        WarningLog(
            level="warning",
            code=code,
            sheet_index=sheet_index,
            message=message,
        )
    )


def complete_run_log(
    run_log: RunLog,
    success: bool,
    output_path: str | None = None,
    writer_type: str | None = None,
    error_code: str | None = None,
    error_context: dict[str, Any] | None = None,
) -> None:
    """
    RunLog 완료 처리.

    Args:
        run_log: RunLog 인스턴스
        success: 성공 여부
        output_path: 저장된 파일 경로 (stream export면 None)
        writer_type: 사용된 writer 타입
        error_code: 에러 코드 (실패 시)
        error_context: 에러 컨텍스트 (실패 시)
    """
    run_log.finished_at = datetime.now(UTC).isoformat()
    run_log.result = "success" if success else "failed"
    run_log.output_path = output_path
    run_log.writer_type = writer_type

    if not success:
        run_log.error_code = error_code
        run_log.error_context = error_context


def save_run_log(run_log: RunLog, logs_dir: Path) -> Path:
    """
    RunLog를 파일로 저장.

    Args:
        run_log: RunLog 인스턴스
        logs_dir: 로그 디렉터리 경로

    Returns:
        저장된 파일 경로
    """
    log_path = logs_dir / f"run_{run_log.run_id}.json"
    return atomic_write_json(log_path, run_log.to_dict())


def load_run_log(log_path: Path) -> dict[str, Any]:
    """RunLog 파일 로드."""
    data: dict[str, Any] = json.loads(log_path.read_text(encoding="utf-8"))
    return data


def list_run_logs(logs_dir: Path) -> list[Path]:
    """
    로그 디렉터리의 모든 run log 파일 목록.

    Returns:
        로그 파일 경로 목록 (최신순)
    """
    if not logs_dir.exists():
        return []

    logs = list(logs_dir.glob(RUN_LOG_FILENAME_PATTERN))
    logs.sort(key=lambda p: p.stat().st_mtime, reverse=True)
    return logs
