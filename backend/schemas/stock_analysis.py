"""AI 종목 분석 스키마.

Gemini 응답은 필드 누락/null/숫자형 문자열이 섞여 오기 때문에
null은 기본값으로, 수치 필드는 to_number로 정리한 뒤 검증합니다.
"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from utils.numbers import to_number


class _AIModel(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class RevenueItem(_AIModel):
    """월별 매출 (최근 12개월)."""
    date: str  # "2023/10"
    revenue: float = 0
    mom: str = ""
    yoy: str = ""
    cumulative_revenue_yoy: Optional[str] = None

    @field_validator("revenue", mode="before")
    @classmethod
    def _number(cls, v: Any) -> float:
        return to_number(v)


class MarginItem(_AIModel):
    """분기별 이익률 (최근 8분기)."""
    quarter: str  # "23Q4"
    gross_margin: float = 0
    operating_margin: float = 0
    pre_tax_margin: Optional[float] = None
    net_profit_margin: float = 0

    @field_validator(
        "gross_margin", "operating_margin", "pre_tax_margin", "net_profit_margin",
        mode="before",
    )
    @classmethod
    def _number(cls, v: Any) -> float:
        return to_number(v)


class NewsItem(_AIModel):
    title: str = ""
    source: str = ""
    date: str = ""
    url: str = ""


class SourceUrl(_AIModel):
    title: str = ""
    uri: str


class StockAnalysis(_AIModel):
    """Gemini가 생성한 종목 분석 결과."""
    symbol: str
    name: str = ""
    market: str = "TWSE"  # "TWSE"(上市) 또는 "OTC"(上櫃)
    price: str = ""
    change: str = ""
    change_percent: str = ""
    update_time: str = ""
    market_cap: Optional[str] = None
    pe_ratio: Optional[str] = None
    pb_ratio: Optional[str] = None
    dividend_yield: Optional[str] = None
    sector: Optional[str] = None
    eps: Optional[str] = None
    revenue_history: list[RevenueItem] = Field(default_factory=list)
    margin_history: list[MarginItem] = Field(default_factory=list)
    ai_summary: str = ""
    news: list[NewsItem] = Field(default_factory=list)
    source_urls: list[SourceUrl] = Field(default_factory=list)
