from datetime import date, datetime
from typing import List

from pydantic import BaseModel


class Quote(BaseModel):
    symbol: str
    price: float
    change: float
    change_percent: float
    high: float
    low: float
    previous_close: float
    timestamp: datetime


class HistoricalBar(BaseModel):
    date: date
    close: float
    high: float
    low: float
    volume: int | None


class PriceHistory(BaseModel):
    symbol: str
    data: List[HistoricalBar]
