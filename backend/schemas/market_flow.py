"""법인 수급 + 신용잔고 + 일봉 병합 스키마."""
from typing import Optional
from pydantic import BaseModel, Field

from utils.numbers import Number


class CombinedRecord(BaseModel):
    """거래일 단위 병합 레코드 (차트/테이블 입력)."""
    date: str = Field(description="YYYY-MM-DD")
    foreign_net: Number = 0  # 外資 매수-매도 (주)
    trust_net: Number = 0  # 投信
    dealer_net: Number = 0  # 自營商 (自行買賣 + 避險)
    margin_balance: Number = 0  # 融資餘額
    short_balance: Number = 0  # 融券餘額
    close: Number
    open: Number = 0
    high: Number = 0
    low: Number = 0


class ChartPoint(BaseModel):
    """차트 포인트. 법인 순매수는 張(1,000주) 단위."""
    date: str
    foreign: int
    trust: int
    dealer: int
    price: Number


class ChartPayload(BaseModel):
    stock_code: str
    market: str
    points: list[ChartPoint] = []
    price_domain: Optional[tuple[int, int]] = None
    external_url: str
