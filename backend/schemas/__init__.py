from .market_flow import CombinedRecord, ChartPoint, ChartPayload
from .stock_analysis import (
    StockAnalysis,
    RevenueItem,
    MarginItem,
    NewsItem,
    SourceUrl,
)
from .lookup import LookupResult, LookupStatus

__all__ = [
    "CombinedRecord",
    "ChartPoint",
    "ChartPayload",
    "StockAnalysis",
    "RevenueItem",
    "MarginItem",
    "NewsItem",
    "SourceUrl",
    "LookupResult",
    "LookupStatus",
]
