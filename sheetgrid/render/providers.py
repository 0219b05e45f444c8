"""
데이터 소스 인터페이스 + 기본 구현.

두 종류:
- DataProvider: 페이지 단위 제공자 (get_models, get_keys, get_pagination,
  prepare, 페이지 이동)
- BatchQuery: batch(size) → 레코드 리스트를 순서대로 내주는 forward-only iterator
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from itertools import islice
from typing import Any

from sheetgrid.render.columns import get_value


# =============================================================================
# Pagination
# =============================================================================

@dataclass
class Pagination:
    """
    페이지 정보.

    page: 0-based 현재 페이지
    page_size < 1 이면 전체가 한 페이지
    """
    page_size: int = 20
    page: int = 0
    total_count: int = 0

    @property
    def page_count(self) -> int:
        if self.page_size < 1:
            return 1 if self.total_count > 0 else 0
        return math.ceil(self.total_count / self.page_size)

    @property
    def offset(self) -> int:
        return self.page * self.page_size if self.page_size > 0 else 0

    @property
    def limit(self) -> int | None:
        return self.page_size if self.page_size > 0 else None

    def set_page(self, page: int) -> None:
        self.page = max(0, int(page))


# =============================================================================
# Interfaces
# =============================================================================

class DataProvider(ABC):
    """페이지 단위 데이터 제공자."""

    @abstractmethod
    def get_models(self) -> list[Any]:
        """현재 페이지의 레코드."""

    @abstractmethod
    def get_keys(self) -> list[Any]:
        """현재 페이지 레코드의 키 (get_models()와 같은 순서)."""

    @abstractmethod
    def get_pagination(self) -> Pagination | None:
        """페이지 정보 (페이지네이션 비활성화면 None)."""

    @abstractmethod
    def prepare(self, force_refresh: bool = False) -> None:
        """현재 페이지 데이터 준비 (force_refresh면 다시 준비)."""


class BatchQuery(ABC):
    """배치 단위 query cursor."""

    @abstractmethod
    def batch(self, size: int) -> Iterator[list[Any]]:
        """size개씩 레코드 리스트를 순서대로 반환."""


# =============================================================================
# ArrayDataProvider
# =============================================================================

class ArrayDataProvider(DataProvider):
    """
    메모리 리스트 기반 제공자.

    Usage:
        provider = ArrayDataProvider(
            [{"id": 1, "name": "first"}, {"id": 2, "name": "second"}],
            key="id",
            pagination=Pagination(page_size=50),
        )

    Args:
        all_models: 전체 레코드
        key: None(절대 인덱스), 속성 경로, 또는 model → key 함수
        pagination: Pagination, dict(Pagination 인자), None(기본값), False(비활성화)
    """

    def __init__(
        self,
        all_models: Iterable[Any] | None = None,
        key: str | Callable[[Any], Any] | None = None,
        pagination: Pagination | dict[str, Any] | bool | None = None,
    ):
        self.all_models = list(all_models or [])
        self.key = key

        if pagination is False:
            self._pagination: Pagination | None = None
        elif isinstance(pagination, Pagination):
            self._pagination = pagination
        elif isinstance(pagination, dict):
            self._pagination = Pagination(**pagination)
        else:
            self._pagination = Pagination()

        self._models: list[Any] | None = None
        self._keys: list[Any] = []

    def get_pagination(self) -> Pagination | None:
        if self._pagination is not None:
            self._pagination.total_count = len(self.all_models)
        return self._pagination

    def prepare(self, force_refresh: bool = False) -> None:
        if self._models is not None and not force_refresh:
            return

        pagination = self.get_pagination()
        offset = 0
        if pagination is None:
            models = list(self.all_models)
        else:
            offset = pagination.offset
            limit = pagination.limit
            end = None if limit is None else offset + limit
            models = self.all_models[offset:end]

        self._models = models
        self._keys = self._prepare_keys(models, offset)

    def get_models(self) -> list[Any]:
        self.prepare()
        return list(self._models or [])

    def get_keys(self) -> list[Any]:
        self.prepare()
        return list(self._keys)

    def _prepare_keys(self, models: list[Any], offset: int) -> list[Any]:
        if self.key is None:
            return [offset + i for i in range(len(models))]
        if callable(self.key):
            return [self.key(model) for model in models]
        return [get_value(model, self.key) for model in models]


# =============================================================================
# Query adaptors
# =============================================================================

class IterableQuery(BatchQuery):
    """
    iterable → BatchQuery.

    source가 함수면 batch()마다 새로 호출 (재시작 가능).
    """

    def __init__(self, source: Iterable[Any] | Callable[[], Iterable[Any]]):
        self.source = source

    def batch(self, size: int) -> Iterator[list[Any]]:
        records = self.source() if callable(self.source) else self.source
        iterator = iter(records)
        while chunk := list(islice(iterator, size)):
            yield chunk


class DbApiQuery(BatchQuery):
    """
    DB-API 2.0 cursor 기반 query.

    레코드는 {컬럼명: 값} dict.

    Usage:
        query = DbApiQuery(sqlite3.connect("app.db"), "SELECT id, name FROM item")
    """

    def __init__(self, connection: Any, sql: str, params: Any = ()):
        self.connection = connection
        self.sql = sql
        self.params = params

    def batch(self, size: int) -> Iterator[list[dict[str, Any]]]:
        cursor = self.connection.cursor()
        try:
            cursor.execute(self.sql, self.params)
            names = [description[0] for description in cursor.description or []]
            while rows := cursor.fetchmany(size):
                yield [dict(zip(names, row)) for row in rows]
        finally:
            cursor.close()
