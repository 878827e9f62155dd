# tests/unit/test_quote_service.py
from datetime import date, datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from app.core.exceptions import QuoteNotFoundError, ValidationError
from app.services.quote_service import QuoteService
from app.services.watchlist_service import WatchlistService
from app.tasks.refresh import refresh_watchlist_quotes

RAW_QUOTE = {
    "symbol": "AAPL",
    "price": 190.5,
    "change": 1.5,
    "change_percent": 0.7937,
    "high": 191.0,
    "low": 188.2,
    "previous_close": 189.0,
    "timestamp": datetime(2025, 3, 1, 15, 30, tzinfo=timezone.utc),
}


@pytest.fixture
def caches():
    quote_cache, history_cache = MagicMock(), MagicMock()
    quote_cache.get.return_value = None
    history_cache.get.return_value = None
    return quote_cache, history_cache


@pytest.fixture
def service(caches):
    return QuoteService(quote_cache=caches[0], history_cache=caches[1])


@patch("app.services.quote_service.fetch_quote")
def test_get_quote_fetches_and_caches_on_miss(mock_fetch, service, caches):
    mock_fetch.return_value = dict(RAW_QUOTE)

    quote = service.get_quote(" aapl ")

    mock_fetch.assert_called_once_with("AAPL")
    assert quote.symbol == "AAPL"
    assert quote.price == 190.5
    caches[0].set.assert_called_once()
    args, kwargs = caches[0].set.call_args
    assert args[1] == "AAPL"
    assert args[0]["price"] == 190.5


@patch("app.services.quote_service.fetch_quote")
def test_get_quote_serves_cache_hit(mock_fetch, service, caches):
    caches[0].get.return_value = {**RAW_QUOTE, "timestamp": "2025-03-01T15:30:00Z"}

    quote = service.get_quote("AAPL")

    mock_fetch.assert_not_called()
    assert quote.previous_close == 189.0


@patch("app.services.quote_service.fetch_quote", return_value=None)
def test_get_quote_unknown_symbol(mock_fetch, service, caches):
    with pytest.raises(QuoteNotFoundError):
        service.get_quote("ZZZZ")
    caches[0].set.assert_not_called()


@pytest.mark.parametrize("symbol", ["", "   ", None])
def test_get_quote_requires_symbol(service, symbol):
    with pytest.raises(ValidationError):
        service.get_quote(symbol)


@patch("app.services.quote_service.fetch_history")
def test_get_history_builds_bars(mock_history, service, caches):
    mock_history.return_value = [
        {"date": date(2025, 2, 27), "close": 10.0, "high": 11.0, "low": 9.5, "volume": 1000},
        {"date": date(2025, 2, 28), "close": 10.5, "high": 10.9, "low": 10.1, "volume": None},
    ]

    history = service.get_history("msft", days=2)

    mock_history.assert_called_once_with("MSFT", 2)
    assert history.symbol == "MSFT"
    assert [bar.close for bar in history.data] == [10.0, 10.5]
    caches[1].set.assert_called_once()


@patch("app.services.quote_service.fetch_history", return_value=[])
def test_get_history_without_data_is_not_found(mock_history, service):
    with pytest.raises(QuoteNotFoundError):
        service.get_history("ZZZZ")


def test_get_history_rejects_non_positive_days(service):
    with pytest.raises(ValidationError):
        service.get_history("AAPL", days=0)


@patch("app.services.quote_service.fetch_quote")
def test_refresh_skips_failures(mock_fetch, service, caches):
    caches[0].get.return_value = {"stale": True}
    mock_fetch.side_effect = lambda symbol: {**RAW_QUOTE, "symbol": symbol} if symbol != "BAD" else None

    refreshed = service.refresh(["aapl", "BAD", "", "msft"])

    assert refreshed == ["AAPL", "MSFT"]
    assert caches[0].set.call_count == 2
    caches[0].get.assert_not_called()


def test_refresh_task_uses_watchlisted_symbols(db_session, factory, owner, other_user):
    watchlist = WatchlistService(factory)
    watchlist.add(owner.id, "AAPL", "Apple")
    watchlist.add(other_user.id, "AAPL", "Apple")
    watchlist.add(other_user.id, "TSLA", "Tesla")
    quote_service = MagicMock()
    quote_service.refresh.return_value = ["AAPL"]

    assert refresh_watchlist_quotes(db_session, quote_service=quote_service) == 1
    quote_service.refresh.assert_called_once_with(["AAPL", "TSLA"])


def test_refresh_task_with_empty_watchlists(db_session):
    quote_service = MagicMock()
    assert refresh_watchlist_quotes(db_session, quote_service=quote_service) == 0
    quote_service.refresh.assert_not_called()
