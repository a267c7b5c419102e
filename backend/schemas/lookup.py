"""종목 조회 워크플로 스키마."""
from enum import Enum
from typing import Optional
from pydantic import BaseModel

from schemas.market_flow import CombinedRecord
from schemas.stock_analysis import StockAnalysis


class LookupStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    NO_DATA = "no_data"
    ERROR = "error"


class LookupResult(BaseModel):
    request_id: int
    stock_code: str
    status: LookupStatus
    analysis: Optional[StockAnalysis] = None
    institutional: list[CombinedRecord] = []
    error: Optional[str] = None
