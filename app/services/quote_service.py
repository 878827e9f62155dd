from typing import Iterable, List, Optional

from app.clients.yfinance_client import fetch_history, fetch_quote
from app.core.config import settings
from app.core.exceptions import QuoteNotFoundError, ValidationError
from app.core.logger import logger
from app.managers.cache_manager import CacheManager
from app.schemas.quotes import HistoricalBar, PriceHistory, Quote


class QuoteService:
    """
    Read-through cache in front of the market-data client.
    Used by the watchlist views and the refresh task; submit prices come
    from the caller, never from here.
    """

    def __init__(
            self,
            quote_cache: Optional[CacheManager] = None,
            history_cache: Optional[CacheManager] = None,
    ):
        self.quote_cache = quote_cache or CacheManager(prefix="quotes")
        self.history_cache = history_cache or CacheManager(prefix="history")

    @staticmethod
    def _normalize(symbol: str) -> str:
        if not isinstance(symbol, str) or not symbol.strip():
            raise ValidationError("Stock symbol required", field="symbol")
        return symbol.strip().upper()

    def get_quote(self, symbol: str) -> Quote:
        symbol = self._normalize(symbol)
        cached = self.quote_cache.get(symbol)
        if cached:
            return Quote.model_validate(cached)
        return self._load_quote(symbol)

    def _load_quote(self, symbol: str) -> Quote:
        raw = fetch_quote(symbol)
        if raw is None:
            raise QuoteNotFoundError(symbol)
        quote = Quote.model_validate(raw)
        self.quote_cache.set(quote.model_dump(mode="json"), symbol, ttl=settings.QUOTE_CACHE_TTL)
        return quote

    def get_history(self, symbol: str, days: int = 30) -> PriceHistory:
        symbol = self._normalize(symbol)
        if days < 1:
            raise ValidationError("days must be at least 1", field="days")

        cached = self.history_cache.get(symbol, days)
        if cached:
            return PriceHistory.model_validate(cached)

        rows = fetch_history(symbol, days)
        if not rows:
            raise QuoteNotFoundError(symbol)
        history = PriceHistory(symbol=symbol, data=[HistoricalBar.model_validate(r) for r in rows])
        self.history_cache.set(history.model_dump(mode="json"), symbol, days, ttl=settings.HISTORY_CACHE_TTL)
        return history

    def refresh(self, symbols: Iterable[str]) -> List[str]:
        """
        Re-fetch quotes for `symbols`, bypassing the cache read.
        Returns the symbols that were refreshed; failures are logged and skipped.
        """
        refreshed = []
        for symbol in symbols:
            try:
                self._load_quote(self._normalize(symbol))
                refreshed.append(symbol.strip().upper())
            except (QuoteNotFoundError, ValidationError) as e:
                logger.warning(f"Skipping quote refresh for {symbol!r}: {e}")
        return refreshed
