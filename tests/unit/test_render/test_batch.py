"""
test_batch.py - BatchSource 상태 머신 테스트

DoD:
- 두 variant 모두 겹치지 않는 연속 구간으로 전체 레코드를 순서대로 1회씩
- 페이지네이션 비활성화/0페이지 → 전체 1회
- 소스 실패 → DataSourceError (원인 보존)
- query + provider 동시 설정 → query 우선 + WARNING
"""

import logging

import pytest

from sheetgrid.domain.errors import ConfigurationError, DataSourceError, ErrorCodes
from sheetgrid.render.batch import (
    BatchState,
    CursorBatchSource,
    PagedBatchSource,
    create_batch_source,
)
from sheetgrid.render.providers import ArrayDataProvider, IterableQuery, Pagination


def drain(source) -> list:
    return [batch for batch in source]


# =============================================================================
# PagedBatchSource
# =============================================================================

class TestPagedBatchSource:
    """페이지 순회 테스트."""

    def test_pages_in_order(self, provider: ArrayDataProvider, sample_items):
        source = PagedBatchSource(provider)

        batches = drain(source)

        assert [len(b) for b in batches] == [2, 2, 1]
        assert [m for b in batches for m in b.models] == sample_items
        assert [k for b in batches for k in b.keys] == [0, 1, 2, 3, 4]
        assert source.state is BatchState.EXHAUSTED

    def test_state_transitions(self, provider: ArrayDataProvider):
        source = PagedBatchSource(provider)
        assert source.state is BatchState.NOT_STARTED

        source.next_batch()
        assert source.state is BatchState.PAGING
        assert source.page == 1

    def test_exhausted_stays_exhausted(self, provider: ArrayDataProvider):
        source = PagedBatchSource(provider)
        drain(source)

        assert source.next_batch() is None
        assert source.exhausted

    def test_pagination_disabled_single_batch(self, sample_items):
        source = PagedBatchSource(ArrayDataProvider(sample_items, pagination=False))

        batches = drain(source)

        assert len(batches) == 1
        assert len(batches[0]) == 5

    def test_zero_pages_single_empty_batch(self):
        """0페이지 → 현재 모델(빈 목록) 1회 후 종료."""
        source = PagedBatchSource(ArrayDataProvider([], pagination=Pagination(page_size=10)))

        batches = drain(source)

        assert len(batches) == 1
        assert len(batches[0]) == 0

    def test_provider_failure(self):
        class BrokenProvider(ArrayDataProvider):
            def prepare(self, force_refresh: bool = False) -> None:
                raise RuntimeError("connection lost")

        source = PagedBatchSource(BrokenProvider([1, 2, 3]))

        with pytest.raises(DataSourceError) as exc_info:
            source.next_batch()

        assert exc_info.value.code == ErrorCodes.DATA_SOURCE_FAILED
        assert exc_info.value.context["page"] == 0
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert source.state is BatchState.EXHAUSTED


# =============================================================================
# CursorBatchSource
# =============================================================================

class TestCursorBatchSource:
    """query cursor 순회 테스트."""

    def test_batches_in_order(self):
        source = CursorBatchSource(IterableQuery(range(10)), batch_size=4)

        batches = drain(source)

        assert [b.models for b in batches] == [[0, 1, 2, 3], [4, 5, 6, 7], [8, 9]]
        assert all(b.keys is None for b in batches)

    def test_states(self):
        source = CursorBatchSource(IterableQuery(range(3)), batch_size=5)
        assert source.state is BatchState.NOT_STARTED

        source.next_batch()
        assert source.state is BatchState.ITERATING

        assert source.next_batch() is None
        assert source.state is BatchState.EXHAUSTED

    def test_query_failure_mid_stream(self):
        def records():
            yield 1
            yield 2
            raise OSError("cursor closed")

        source = CursorBatchSource(IterableQuery(records), batch_size=2)

        assert source.next_batch().models == [1, 2]
        with pytest.raises(DataSourceError) as exc_info:
            source.next_batch()

        assert exc_info.value.context["batch_size"] == 2
        assert source.next_batch() is None


# =============================================================================
# create_batch_source
# =============================================================================

class TestCreateBatchSource:
    """data source 선택 테스트."""

    def test_provider(self, provider: ArrayDataProvider):
        assert isinstance(create_batch_source(provider, None, 10), PagedBatchSource)

    def test_query(self):
        source = create_batch_source(None, IterableQuery([]), 10)

        assert isinstance(source, CursorBatchSource)
        assert source.batch_size == 10

    def test_query_wins_with_warning(self, provider: ArrayDataProvider, caplog):
        caplog.set_level(logging.WARNING, logger="sheetgrid.render.batch")

        source = create_batch_source(provider, IterableQuery([]), 10)

        assert isinstance(source, CursorBatchSource)
        assert any("using query" in r.message for r in caplog.records)

    def test_missing_source(self):
        with pytest.raises(ConfigurationError) as exc_info:
            create_batch_source(None, None, 10)

        assert exc_info.value.code == ErrorCodes.MISSING_DATA_SOURCE

    def test_query_without_batch(self):
        with pytest.raises(ConfigurationError) as exc_info:
            create_batch_source(None, [1, 2, 3], 10)

        assert exc_info.value.code == ErrorCodes.INVALID_DATA_SOURCE

    def test_invalid_batch_size(self):
        with pytest.raises(ConfigurationError) as exc_info:
            create_batch_source(None, IterableQuery([]), 0)

        assert exc_info.value.code == ErrorCodes.INVALID_DATA_SOURCE
