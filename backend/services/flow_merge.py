"""법인 수급 / 신용잔고 / 일봉 병합.

세 데이터셋은 모양이 서로 다르고 일부 레코드가 깨져 있을 수 있습니다.
여기서는 거래일 기준으로 한 줄씩 합치고, 차트가 그릴 수 없는 값
(NaN, 음수/0 종가)을 걸러냅니다. 예외는 던지지 않습니다.
"""
from collections import defaultdict
from typing import Any, Iterable

from schemas.market_flow import CombinedRecord
from utils.numbers import Number, to_number, is_positive_finite

MAX_RECORDS = 30

FOREIGN_INVESTOR = "Foreign_Investor"
INVESTMENT_TRUST = "Investment_Trust"
DEALER_SELF = "Dealer_Self"
DEALER_HEDGING = "Dealer_Hedging"


def _valid_records(records: Any) -> Iterable[dict]:
    """date 문자열을 가진 dict 레코드만 통과."""
    if not isinstance(records, list):
        return
    for record in records:
        if not isinstance(record, dict):
            continue
        record_date = record.get("date")
        if isinstance(record_date, str) and record_date:
            yield record


def _index_by_date(records: Any) -> dict[str, dict]:
    """날짜 -> 레코드. 같은 날짜가 여러 개면 첫 번째 것을 사용."""
    indexed: dict[str, dict] = {}
    for record in _valid_records(records):
        indexed.setdefault(record["date"], record)
    return indexed


def _net_by_category(day_records: list[dict]) -> dict[str, Number]:
    """투자자 구분별 순매수(매수-매도). 구분당 첫 레코드만 사용."""
    nets: dict[str, Number] = {}
    for record in day_records:
        name = record.get("name")
        if not isinstance(name, str) or name in nets:
            continue
        nets[name] = to_number(record.get("buy")) - to_number(record.get("sell"))
    return nets


def merge_market_flow(
    institutional: Any,
    margin: Any,
    price: Any,
    limit: int = MAX_RECORDS,
) -> list[CombinedRecord]:
    """세 데이터셋을 거래일 기준으로 병합.

    Args:
        institutional: 三大法人 원본 레코드 리스트
        margin: 融資融券 원본 레코드 리스트
        price: 일봉 원본 레코드 리스트 (날짜 기준)
        limit: 최근 N 거래일만 유지

    Returns:
        날짜 오름차순 CombinedRecord 리스트 (최대 limit개).
        일봉에 없는 날짜는 제외, 수급/잔고가 없는 날짜는 0으로 채움.
    """
    if limit <= 0:
        return []

    price_by_date = _index_by_date(price)
    margin_by_date = _index_by_date(margin)

    institutional_by_date: dict[str, list[dict]] = defaultdict(list)
    for record in _valid_records(institutional):
        institutional_by_date[record["date"]].append(record)

    # 일봉 날짜가 기준. 최근 limit 거래일만 남김
    recent_dates = sorted(price_by_date)[-limit:]

    combined: list[CombinedRecord] = []
    for trade_date in recent_dates:
        nets = _net_by_category(institutional_by_date.get(trade_date, []))
        day_margin = margin_by_date.get(trade_date, {})
        day_price = price_by_date[trade_date]

        combined.append(CombinedRecord(
            date=trade_date,
            foreign_net=nets.get(FOREIGN_INVESTOR, 0),
            trust_net=nets.get(INVESTMENT_TRUST, 0),
            dealer_net=nets.get(DEALER_SELF, 0) + nets.get(DEALER_HEDGING, 0),
            margin_balance=to_number(day_margin.get("MarginPurchaseTodayBalance")),
            short_balance=to_number(day_margin.get("ShortSaleTodayBalance")),
            close=to_number(day_price.get("close")),
            open=to_number(day_price.get("open")),
            high=to_number(day_price.get("max")),
            low=to_number(day_price.get("min")),
        ))

    return [record for record in combined if is_positive_finite(record.close)]
