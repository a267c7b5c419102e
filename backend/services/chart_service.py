"""법인 수급 vs 종가 차트 데이터 가공."""
import math
from typing import Optional

from schemas.market_flow import ChartPayload, ChartPoint, CombinedRecord
from utils.numbers import is_positive_finite

SHARES_PER_LOT = 1000  # 1張 = 1,000주
DOMAIN_BUFFER_RATIO = 0.1

OTC_MARKETS = {"OTC", "上櫃", "TPEX"}


def external_chart_url(stock_code: str, market: str = "TWSE") -> str:
    """Yahoo 奇摩股市 기술분석 페이지 URL."""
    suffix = ".TWO" if market in OTC_MARKETS else ".TW"
    return f"https://tw.stock.yahoo.com/quote/{stock_code}{suffix}/technical-analysis"


def to_lots(shares: float) -> int:
    """주 → 張. x.5는 큰 쪽으로 반올림 (-2.5 → -2)."""
    return math.floor(shares / SHARES_PER_LOT + 0.5)


def to_chart_points(records: list[CombinedRecord]) -> list[ChartPoint]:
    """유효 종가만 남기고 날짜 오름차순, 순매수는 張 단위로 변환."""
    valid = [r for r in records if is_positive_finite(r.close)]
    valid.sort(key=lambda r: r.date)
    return [
        ChartPoint(
            date=r.date,
            foreign=to_lots(r.foreign_net),
            trust=to_lots(r.trust_net),
            dealer=to_lots(r.dealer_net),
            price=r.close,
        )
        for r in valid
    ]


def price_domain(points: list[ChartPoint]) -> Optional[tuple[int, int]]:
    """종가 축 범위. 최저/최고가에 범위의 10% 여유를 둠."""
    if not points:
        return None
    prices = [p.price for p in points]
    low, high = min(prices), max(prices)
    if not (math.isfinite(low) and math.isfinite(high)):
        return None
    buffer = (high - low) * DOMAIN_BUFFER_RATIO
    return math.floor(low - buffer), math.ceil(high + buffer)


def build_chart_payload(
    stock_code: str,
    records: list[CombinedRecord],
    market: str = "TWSE",
) -> ChartPayload:
    points = to_chart_points(records)
    return ChartPayload(
        stock_code=stock_code,
        market=market,
        points=points,
        price_domain=price_domain(points),
        external_url=external_chart_url(stock_code, market),
    )
