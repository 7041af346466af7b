from datetime import timedelta

from stockfeed.clients.base import ProviderError
from stockfeed.schemas.ticks import HistoricalDataQuery
from stockfeed.services.chart import get_chart_data
from stockfeed.services.history import query_history

from helpers import T, make_bar, tick_values


def test_projects_stored_ticks(factory, repo, provider):
    repo.insert(tick_values("AAPL", T - timedelta(minutes=1), price="150.2500", volume=1_000_000))
    repo.insert(tick_values("AAPL", T, price="151.0000"))

    chart = get_chart_data(factory, provider, HistoricalDataQuery(symbol="AAPL"))

    assert chart.symbol == "AAPL"
    assert chart.interval == "1m"
    assert [p.timestamp for p in chart.points] == [T, T - timedelta(minutes=1)]
    point = chart.points[1]
    assert (point.open, point.high, point.low, point.close) == (150.25, 151.25, 149.25, 150.25)
    assert point.volume == 1_000_000
    assert not hasattr(point, "symbol")
    assert provider.calls == []


def test_missing_symbol_fetches_once_and_stores(factory, provider):
    provider.bars["GOOG"] = [make_bar(T - timedelta(minutes=i)) for i in range(3, 0, -1)]
    params = HistoricalDataQuery(symbol="GOOG", interval="1m")

    chart = get_chart_data(factory, provider, params)

    assert provider.calls == [("GOOG", "1m", "1d")]
    assert len(chart.points) == 3
    assert chart.points[0].timestamp == T - timedelta(minutes=1)

    history = query_history(factory, params)
    assert [t.timestamp for t in history] == [p.timestamp for p in chart.points]


def test_fallback_with_empty_provider_result(factory, provider):
    chart = get_chart_data(factory, provider, HistoricalDataQuery(symbol="MSFT", interval="1d"))

    assert provider.calls == [("MSFT", "1d", "1d")]
    assert chart.symbol == "MSFT"
    assert chart.interval == "1d"
    assert chart.points == []


def test_fallback_provider_failure_returns_empty(factory, provider):
    provider.errors["NVDA"] = ProviderError("unreachable")

    chart = get_chart_data(factory, provider, HistoricalDataQuery(symbol="NVDA"))

    assert len(provider.calls) == 1
    assert chart.points == []


def test_no_symbol_and_no_rows_uses_default_label(factory, provider):
    chart = get_chart_data(factory, provider, HistoricalDataQuery(interval="5m"))

    assert chart.symbol == "AAPL"
    assert chart.points == []
    assert provider.calls == []


def test_no_symbol_labels_with_newest_row(factory, repo, provider):
    repo.insert(tick_values("AAPL", T - timedelta(minutes=10), "5m"))
    repo.insert(tick_values("META", T, "5m"))

    chart = get_chart_data(factory, provider, HistoricalDataQuery(interval="5m"))

    assert chart.symbol == "META"
    assert len(chart.points) == 2


def test_hour_chart_is_labelled_with_canonical_token(factory, repo, provider):
    repo.insert(tick_values("AAPL", T, "1h"))

    chart = get_chart_data(factory, provider, HistoricalDataQuery(symbol="AAPL", interval="60m"))

    assert chart.interval == "1h"
    assert len(chart.points) == 1
