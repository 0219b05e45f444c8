"""
Pytest fixtures for the spreadsheet exporter tests.

테스트 구성:
- 단위 테스트: tests/unit/test_<layer>/test_<module>.py
- 통합 테스트: tests/integration/ (파일 저장, sqlite query)
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
import yaml

from sheetgrid.render.providers import ArrayDataProvider, Pagination
from sheetgrid.render.spreadsheet import Spreadsheet
from sheetgrid.testing import XlsxExtractor

# =============================================================================
# Path Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config_path(project_root: Path) -> Path:
    """default.yaml 경로."""
    return project_root / "default.yaml"


@pytest.fixture
def default_config(default_config_path: Path) -> dict:
    """기본 설정 로드."""
    with open(default_config_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


# =============================================================================
# Data Fixtures
# =============================================================================

@dataclass
class Item:
    """객체형 레코드 (속성 접근)."""
    id: int
    name: str
    price: float | None = None


class LabeledProvider(ArrayDataProvider):
    """get_attribute_label()을 제공하는 provider."""

    LABELS = {"id": "번호", "name": "품명"}

    def get_attribute_label(self, attribute: str) -> str:
        return self.LABELS.get(attribute, attribute.upper())


@pytest.fixture
def sample_items() -> list[dict[str, Any]]:
    """dict 레코드 5개."""
    return [
        {"id": 1, "name": "bolt", "price": 0.5},
        {"id": 2, "name": "nut", "price": 0.25},
        {"id": 3, "name": "washer", "price": None},
        {"id": 4, "name": "screw", "price": 0.75},
        {"id": 5, "name": "rivet", "price": 1.0},
    ]


@pytest.fixture
def object_items() -> list[Item]:
    return [Item(1, "bolt", 0.5), Item(2, "nut", None)]


@pytest.fixture
def provider(sample_items: list[dict[str, Any]]) -> ArrayDataProvider:
    """페이지 크기 2 → 3페이지."""
    return ArrayDataProvider(sample_items, pagination=Pagination(page_size=2))


@pytest.fixture
def labeled_provider(sample_items: list[dict[str, Any]]) -> LabeledProvider:
    return LabeledProvider(sample_items, pagination=False)


@pytest.fixture
def spreadsheet(provider: ArrayDataProvider) -> Spreadsheet:
    """기본 설정 Spreadsheet (gc 생략)."""
    return Spreadsheet(data_provider=provider, collect_garbage=False)


@pytest.fixture
def extractor() -> XlsxExtractor:
    return XlsxExtractor()
