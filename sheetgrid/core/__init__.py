"""
Core layer: 설정, 실행 로그, 원자적 파일 쓰기.
"""

from .config import load_config, spreadsheet_options
from .files import atomic_write, atomic_write_json
from .ids import generate_run_id
from .logging import (
    complete_run_log,
    create_run_log,
    emit_warning,
    record_sheet,
    save_run_log,
)

__all__ = [
    # config
    "load_config",
    "spreadsheet_options",
    # files
    "atomic_write",
    "atomic_write_json",
    # ids
    "generate_run_id",
    # logging
    "create_run_log",
    "record_sheet",
    "emit_warning",
    "complete_run_log",
    "save_run_log",
]
