"""
설정 로드: default.yaml

구조:
    spreadsheet:
      batch_size: 100
      start_row_index: 1
      show_header: true
      ...

YAML로 표현 가능한 옵션만 허용 (data_provider, query, formatter,
writer_creator 같은 객체는 코드에서 configure()로 전달).
"""

from pathlib import Path
from typing import Any

import yaml

from sheetgrid.domain.errors import ConfigurationError, ErrorCodes

# YAML에서 지정 가능한 spreadsheet 옵션
FILE_OPTIONS = frozenset([
    "batch_size",
    "columns",
    "show_header",
    "show_footer",
    "show_filter",
    "title",
    "empty_cell",
    "null_display",
    "writer_type",
    "header_column_unions",
    "start_row_index",
    "collect_garbage",
])


def default_config_path() -> Path:
    """프로젝트 루트의 default.yaml."""
    return Path(__file__).parent.parent.parent / "default.yaml"


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    설정 파일 로드.

    Args:
        config_path: YAML 경로 (None이면 default.yaml)

    Returns:
        설정 내용 (파일이 없으면 빈 dict)
    """
    if config_path is None:
        config_path = default_config_path()

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[str, Any] | None = yaml.safe_load(f)
        return data or {}


def spreadsheet_options(config: dict[str, Any]) -> dict[str, Any]:
    """
    설정에서 spreadsheet: 섹션 추출 + 옵션 이름 검증.

    Raises:
        ConfigurationError: UNKNOWN_OPTION
    """
    section = config.get("spreadsheet") or {}
    if not isinstance(section, dict):
        raise ConfigurationError(
            ErrorCodes.UNKNOWN_OPTION,
            target="spreadsheet",
            error="spreadsheet section must be a mapping",
        )

    unknown = sorted(set(section) - FILE_OPTIONS)
    if unknown:
        raise ConfigurationError(
            ErrorCodes.UNKNOWN_OPTION,
            target="spreadsheet",
            options=unknown,
        )

    return dict(section)
