from datetime import timedelta

import pytest
from pydantic import ValidationError

from stockfeed.clients.base import ProviderError
from stockfeed.repositories import RepositoryError, RowWriteError, TickRepository
from stockfeed.schemas.ticks import BatchFetchInput, FetchStockDataInput, ProviderBar
from stockfeed.services.ingestion import (
    batch_fetch_and_store,
    batch_fetch_report,
    fetch_and_store,
    upsert_ticks,
)

from helpers import T, epoch, make_bar


def test_upsert_ticks_returns_numeric_prices_and_logical_interval(repo):
    bars = [make_bar(T, price=150.12345), make_bar(T + timedelta(minutes=1), price=151.0)]

    stored = upsert_ticks(repo, "AAPL", "1m", bars)

    assert len(stored) == 2
    first = stored[0]
    assert first.symbol == "AAPL"
    assert first.interval == "1m"
    assert first.timestamp == T
    assert isinstance(first.open, float)
    assert first.open == pytest.approx(150.1235)
    assert first.volume == 1000
    assert repo.count() == 2


def test_upsert_is_idempotent_and_keeps_last_values(repo):
    first = upsert_ticks(repo, "AAPL", "5m", [make_bar(T, price=100.0, volume=1)])[0]
    second = upsert_ticks(repo, "AAPL", "5m", [make_bar(T, price=200.0, volume=2)])[0]

    assert repo.count() == 1
    assert second.id == first.id
    assert second.created_at == first.created_at
    assert second.open == 200.0
    assert second.volume == 2


def test_duplicates_collapse_to_distinct_natural_keys(repo):
    timestamps = [T, T + timedelta(minutes=1), T, T + timedelta(minutes=2), T + timedelta(minutes=1)]
    bars = [make_bar(ts, volume=i) for i, ts in enumerate(timestamps)]

    upsert_ticks(repo, "MSFT", "1m", bars)

    assert repo.count() == 3


def test_hour_tokens_share_rows(repo):
    upsert_ticks(repo, "AAPL", "60m", [make_bar(T, volume=1)])
    stored = upsert_ticks(repo, "AAPL", "1h", [make_bar(T, volume=2)])

    assert repo.count() == 1
    assert stored[0].interval == "1h"


def test_bad_bar_is_skipped(repo):
    bars = [
        make_bar(T),
        ProviderBar(timestamp=epoch(T) + 60, open=float("inf"), high=1, low=1, close=1, volume=1),
        make_bar(T + timedelta(minutes=2)),
    ]

    stored = upsert_ticks(repo, "AAPL", "1m", bars)

    assert [t.timestamp for t in stored] == [T, T + timedelta(minutes=2)]
    assert repo.count() == 2


def test_row_write_error_skips_only_that_point(repo, monkeypatch):
    real_upsert = TickRepository.upsert

    def flaky_upsert(self, values):
        if values["timestamp"] == T + timedelta(minutes=1):
            raise RowWriteError("rejected")
        return real_upsert(self, values)

    monkeypatch.setattr(TickRepository, "upsert", flaky_upsert)
    bars = [make_bar(T + timedelta(minutes=i)) for i in range(3)]

    stored = upsert_ticks(repo, "AAPL", "1m", bars)

    assert len(stored) == 2
    assert repo.count() == 2


def test_store_error_aborts_remaining_points(repo, monkeypatch):
    real_upsert = TickRepository.upsert

    def failing_upsert(self, values):
        if values["timestamp"] >= T + timedelta(minutes=1):
            raise RepositoryError("database gone")
        return real_upsert(self, values)

    monkeypatch.setattr(TickRepository, "upsert", failing_upsert)
    bars = [make_bar(T + timedelta(minutes=i)) for i in range(3)]

    with pytest.raises(RepositoryError):
        upsert_ticks(repo, "AAPL", "1m", bars)

    assert repo.count() == 1


def test_fetch_and_store(factory, provider):
    provider.bars["NVDA"] = [make_bar(T), make_bar(T + timedelta(minutes=1))]

    stored = fetch_and_store(factory, provider, FetchStockDataInput(symbol="NVDA"))

    assert provider.calls == [("NVDA", "1m", "1d")]
    assert [t.symbol for t in stored] == ["NVDA", "NVDA"]
    assert factory.get_tick_repository().count() == 2


def test_fetch_and_store_empty_provider_result_raises(factory, provider):
    with pytest.raises(ProviderError):
        fetch_and_store(factory, provider, FetchStockDataInput(symbol="AAPL", interval="5m", period="5d"))

    assert provider.calls == [("AAPL", "5m", "5d")]


def test_fetch_and_store_rejects_unknown_symbol():
    with pytest.raises(ValidationError):
        FetchStockDataInput(symbol="TSLA")


def test_batch_processes_symbols_in_order_with_pacing(factory, provider):
    for symbol in ("AAPL", "META", "GOOG"):
        provider.bars[symbol] = [make_bar(T)]
    sleeps = []

    ticks = batch_fetch_and_store(
        factory,
        provider,
        BatchFetchInput(symbols=["AAPL", "META", "GOOG"], interval="5m"),
        delay=0.25,
        sleep=sleeps.append,
    )

    assert [c[0] for c in provider.calls] == ["AAPL", "META", "GOOG"]
    assert sleeps == [0.25, 0.25]
    assert [t.symbol for t in ticks] == ["AAPL", "META", "GOOG"]
    assert all(t.interval == "5m" for t in ticks)


def test_batch_skips_failing_symbols_and_reports_them(factory, provider):
    provider.bars["AAPL"] = [make_bar(T)]
    provider.errors["META"] = ProviderError("timeout")
    provider.bars["MSFT"] = [make_bar(T), make_bar(T + timedelta(minutes=1))]

    report = batch_fetch_report(
        factory, provider, BatchFetchInput(symbols=["AAPL", "META", "AMZN", "MSFT"]), delay=0
    )

    assert len(report.ticks) == 3
    assert report.results["AAPL"].status == "ok"
    assert report.results["AAPL"].count == 1
    assert report.results["META"].status == "failed"
    assert "timeout" in report.results["META"].error
    assert report.results["AMZN"].status == "failed"
    assert report.results["MSFT"].count == 2


def test_batch_store_error_propagates(factory, provider, monkeypatch):
    provider.bars["AAPL"] = [make_bar(T)]
    provider.bars["META"] = [make_bar(T)]

    def broken(self, values):
        raise RepositoryError("down")

    monkeypatch.setattr(TickRepository, "upsert", broken)

    with pytest.raises(RepositoryError):
        batch_fetch_and_store(factory, provider, BatchFetchInput(symbols=["AAPL", "META"]), delay=0)

    assert provider.calls == [("AAPL", "1m", "1d")]


@pytest.mark.parametrize("symbols", [[], ["AAPL"] * 7, ["AAPL", "TSLA"]])
def test_batch_input_validation(symbols):
    with pytest.raises(ValidationError):
        BatchFetchInput(symbols=symbols)
