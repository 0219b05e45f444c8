"""
BatchSource: data source를 배치 단위로 순회.

상태:
- Paged:  NOT_STARTED → PAGING(page) → EXHAUSTED
- Cursor: NOT_STARTED → ITERATING → EXHAUSTED

규칙:
- next_batch()는 겹치지 않는 연속 구간을 순서대로 반환, 끝나면 None
- 한 번에 한 배치만 보유
- 소스 실패는 DataSourceError로 감싸서 전파 (재시도 없음)
- query와 data_provider가 모두 있으면 query 우선
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from enum import Enum
from typing import Any

from sheetgrid.domain.errors import (
    ConfigurationError,
    DataSourceError,
    ErrorCodes,
    SpreadsheetError,
)
from sheetgrid.domain.schemas import Batch
from sheetgrid.render.providers import Pagination

logger = logging.getLogger(__name__)

_END = object()


class BatchState(str, Enum):
    """BatchSource 상태."""
    NOT_STARTED = "not_started"
    PAGING = "paging"
    ITERATING = "iterating"
    EXHAUSTED = "exhausted"


class BatchSource(ABC):
    """배치 순회 공통 인터페이스."""

    state: BatchState = BatchState.NOT_STARTED

    @abstractmethod
    def next_batch(self) -> Batch | None:
        """다음 배치 (끝이면 None)."""

    @property
    def exhausted(self) -> bool:
        return self.state is BatchState.EXHAUSTED

    def __iter__(self) -> Iterator[Batch]:
        while (batch := self.next_batch()) is not None:
            yield batch

    def _fail(self, error: Exception, **context: Any) -> DataSourceError:
        self.state = BatchState.EXHAUSTED
        return DataSourceError(
            ErrorCodes.DATA_SOURCE_FAILED,
            source=type(self).__name__,
            error=str(error),
            **context,
        )


class PagedBatchSource(BatchSource):
    """
    DataProvider 페이지 순회.

    - 페이지네이션 비활성화 또는 페이지 수 0: 현재 모델 전체를 한 번 반환
    - 그 외: page마다 set_page → prepare(True) → (models, keys)
    """

    def __init__(self, provider: Any):
        self.provider = provider
        self.state = BatchState.NOT_STARTED
        self.page = 0
        self._pagination: Pagination | None = None

    def next_batch(self) -> Batch | None:
        if self.state is BatchState.EXHAUSTED:
            return None

        try:
            if self.state is BatchState.NOT_STARTED:
                self._pagination = self.provider.get_pagination()
                self.state = BatchState.PAGING
                self.page = 0

            batch = self._next_page()
        except SpreadsheetError:
            raise
        except Exception as e:
            raise self._fail(e, page=self.page) from e

        if batch is None:
            self.state = BatchState.EXHAUSTED
            self._pagination = None
            logger.debug(f"Paged source exhausted after {self.page} page(s)")
        return batch

    def _next_page(self) -> Batch | None:
        pagination = self._pagination

        if pagination is None or pagination.page_count == 0:
            if self.page == 0:
                self.page += 1
                return Batch(list(self.provider.get_models()), list(self.provider.get_keys()))
            return None

        if self.page < pagination.page_count:
            pagination.set_page(self.page)
            self.provider.prepare(True)
            self.page += 1
            return Batch(list(self.provider.get_models()), list(self.provider.get_keys()))

        return None


class CursorBatchSource(BatchSource):
    """
    BatchQuery 순회.

    배치 크기는 query의 batch(size)가 결정. 키는 따로 없음 (None).
    """

    def __init__(self, query: Any, batch_size: int):
        self.query = query
        self.batch_size = batch_size
        self.state = BatchState.NOT_STARTED
        self._iterator: Iterator[Any] | None = None

    def next_batch(self) -> Batch | None:
        if self.state is BatchState.EXHAUSTED:
            return None

        try:
            if self._iterator is None:
                self._iterator = iter(self.query.batch(self.batch_size))
                self.state = BatchState.ITERATING
            models = next(self._iterator, _END)
        except SpreadsheetError:
            raise
        except Exception as e:
            self._iterator = None
            raise self._fail(e, batch_size=self.batch_size) from e

        if models is _END:
            self.state = BatchState.EXHAUSTED
            self._iterator = None
            logger.debug("Cursor source exhausted")
            return None

        return Batch(list(models), None)


def create_batch_source(
    data_provider: Any = None,
    query: Any = None,
    batch_size: int = 100,
) -> BatchSource:
    """
    설정에 맞는 BatchSource 생성.

    Raises:
        ConfigurationError: MISSING_DATA_SOURCE, INVALID_DATA_SOURCE
    """
    if query is not None:
        if not callable(getattr(query, "batch", None)):
            raise ConfigurationError(
                ErrorCodes.INVALID_DATA_SOURCE,
                source=type(query).__name__,
                error="query must provide batch(size)",
            )
        if batch_size < 1:
            raise ConfigurationError(
                ErrorCodes.INVALID_DATA_SOURCE,
                batch_size=batch_size,
                error="batch_size must be positive",
            )
        if data_provider is not None:
            logger.warning(
                f"Both query ({type(query).__name__}) and data provider "
                f"({type(data_provider).__name__}) configured; using query"
            )
        return CursorBatchSource(query, batch_size)

    if data_provider is not None:
        return PagedBatchSource(data_provider)

    raise ConfigurationError(
        ErrorCodes.MISSING_DATA_SOURCE,
        error="either data_provider or query must be configured",
    )
