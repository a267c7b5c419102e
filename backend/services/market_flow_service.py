"""법인 수급 데이터 조회 서비스."""
import asyncio
import logging
from datetime import date
from typing import Any, Optional

from core.config import get_settings
from core.timezone import days_ago_iso
from integrations.finmind import (
    FinMindClient,
    get_finmind_client,
    DATASET_INSTITUTIONAL,
    DATASET_MARGIN,
    DATASET_PRICE,
)
from schemas.market_flow import CombinedRecord
from services.flow_merge import merge_market_flow

logger = logging.getLogger(__name__)


class MarketFlowService:
    """FinMind 3개 데이터셋 병렬 조회 + 거래일 기준 병합."""

    def __init__(self, client: Optional[FinMindClient] = None):
        self.settings = get_settings()
        self.client = client or get_finmind_client()

    async def fetch_raw(
        self,
        stock_code: str,
        start_date: str,
    ) -> tuple[list[Any], list[Any], list[Any]]:
        """법인 수급, 신용잔고, 일봉을 동시에 조회.

        데이터셋별로 독립 처리합니다. 하나가 실패해도 나머지 둘은 그대로 쓰고,
        실패한 데이터셋만 빈 리스트로 대체합니다.

        Returns:
            (institutional, margin, price)
        """
        names = (DATASET_INSTITUTIONAL, DATASET_MARGIN, DATASET_PRICE)
        results = await asyncio.gather(
            self.client.get_institutional_investors(stock_code, start_date),
            self.client.get_margin_short(stock_code, start_date),
            self.client.get_daily_price(stock_code, start_date),
            return_exceptions=True,
        )

        datasets: list[list[Any]] = []
        for name, result in zip(names, results):
            if isinstance(result, Exception):
                logger.error(f"FinMind {name} 조회 실패 ({stock_code}): {result}")
                datasets.append([])
            elif isinstance(result, BaseException):
                raise result
            else:
                datasets.append(result)

        institutional, margin, price = datasets
        return institutional, margin, price

    async def get_combined(
        self,
        stock_code: str,
        today: Optional[date] = None,
    ) -> list[CombinedRecord]:
        """종목의 최근 거래일 병합 데이터.

        Args:
            stock_code: 종목코드 (예: "2330")
            today: 조회 기준일 (기본: 오늘, 대만 시간)

        Returns:
            날짜 오름차순 CombinedRecord 리스트. 실패 시 빈 리스트.
        """
        stock_code = (stock_code or "").strip()
        if not stock_code:
            return []

        start_date = days_ago_iso(self.settings.flow_lookback_days, today)

        try:
            institutional, margin, price = await self.fetch_raw(stock_code, start_date)
            records = merge_market_flow(
                institutional,
                margin,
                price,
                limit=self.settings.flow_max_records,
            )
        except Exception as e:
            logger.error(f"FinMind 데이터 조회 실패 ({stock_code}): {e}")
            return []

        logger.info(
            f"FinMind 병합 완료 ({stock_code}): 일봉 {len(price)}건 → {len(records)}건 (start={start_date})"
        )
        return records


_market_flow_service: Optional[MarketFlowService] = None


def get_market_flow_service() -> MarketFlowService:
    """MarketFlowService 싱글톤 반환."""
    global _market_flow_service
    if _market_flow_service is None:
        _market_flow_service = MarketFlowService()
    return _market_flow_service
