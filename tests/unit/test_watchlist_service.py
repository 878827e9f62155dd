# tests/unit/test_watchlist_service.py
import pytest

from app.core.exceptions import NotFoundError, ValidationError
from app.services.watchlist_service import WatchlistService


@pytest.fixture
def watchlist(factory, clock):
    return WatchlistService(factory, clock=clock)


def test_add_normalizes_and_keeps_insertion_order(watchlist, owner):
    watchlist.add(owner.id, "msft", "Microsoft")
    items = watchlist.add(owner.id, " aapl ", "Apple")

    assert [(i.symbol, i.name) for i in items] == [("MSFT", "Microsoft"), ("AAPL", "Apple")]


def test_add_duplicate_is_case_insensitive(watchlist, owner):
    watchlist.add(owner.id, "AAPL", "Apple")
    with pytest.raises(ValidationError, match="already in watchlist"):
        watchlist.add(owner.id, "aapl", "Apple Inc")


@pytest.mark.parametrize("symbol, name", [("", "Apple"), ("AAPL", ""), (None, "Apple"), ("  ", " ")])
def test_add_requires_symbol_and_name(watchlist, owner, symbol, name):
    with pytest.raises(ValidationError):
        watchlist.add(owner.id, symbol, name)


def test_remove_drops_entry_and_ignores_absent(watchlist, owner):
    watchlist.add(owner.id, "AAPL", "Apple")
    watchlist.add(owner.id, "TSLA", "Tesla")

    assert [i.symbol for i in watchlist.remove(owner.id, "aapl")] == ["TSLA"]
    assert [i.symbol for i in watchlist.remove(owner.id, "NVDA")] == ["TSLA"]


def test_unknown_user_is_not_found(watchlist):
    with pytest.raises(NotFoundError):
        watchlist.list("ghost")
    with pytest.raises(NotFoundError):
        watchlist.add("ghost", "AAPL", "Apple")


def test_tracked_symbols_are_distinct_across_users(watchlist, owner, other_user):
    watchlist.add(owner.id, "AAPL", "Apple")
    watchlist.add(owner.id, "MSFT", "Microsoft")
    watchlist.add(other_user.id, "AAPL", "Apple")

    assert watchlist.tracked_symbols() == ["AAPL", "MSFT"]
