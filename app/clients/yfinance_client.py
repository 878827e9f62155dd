import math
from datetime import datetime, timezone
from typing import List, Optional

import pandas as pd
import yfinance as yf

from app.core.logger import logger


def _as_float(value) -> Optional[float]:
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(value) else value


def fetch_quote(symbol: str) -> Optional[dict]:
    """
    Latest quote for a symbol via Yahoo Finance fast_info.
    Returns None when the provider has no price for it.
    """
    symbol = symbol.upper()
    try:
        info = yf.Ticker(symbol).fast_info
        price = _as_float(info.last_price)
        previous_close = _as_float(info.previous_close)
        high = _as_float(info.day_high)
        low = _as_float(info.day_low)
    except Exception as e:
        # yfinance raises assorted KeyError/HTTP errors for unknown symbols
        logger.error(f"Error fetching quote for {symbol}: {e}")
        return None

    if not price:
        logger.info(f"No quote available for {symbol}")
        return None

    change = price - previous_close if previous_close else 0.0
    change_percent = (change / previous_close) * 100 if previous_close else 0.0

    return {
        "symbol": symbol,
        "price": price,
        "change": round(change, 4),
        "change_percent": round(change_percent, 4),
        "high": high or 0.0,
        "low": low or 0.0,
        "previous_close": previous_close or 0.0,
        "timestamp": datetime.now(timezone.utc),
    }


def fetch_history(symbol: str, days: int = 30) -> List[dict]:
    """Daily bars for the last `days` sessions, oldest first."""
    symbol = symbol.upper()
    period = "1y" if days <= 250 else "max"
    data: pd.DataFrame = yf.Ticker(symbol).history(period=period, interval="1d")
    if data is None or data.empty:
        logger.info(f"No historical data for {symbol}")
        return []

    data = data.tail(days).reset_index()
    rows = [
        {
            "date": pd.Timestamp(row["Date"]).date(),
            "close": float(row["Close"]),
            "high": float(row["High"]),
            "low": float(row["Low"]),
            "volume": int(row["Volume"]) if not pd.isna(row["Volume"]) else None,
        }
        for _, row in data.iterrows()
    ]
    logger.info(f"Fetched {len(rows)} rows of price history for {symbol}")
    return rows
