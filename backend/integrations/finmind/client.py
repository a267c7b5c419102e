"""FinMind API 클라이언트."""
import logging
from typing import Any, Optional

import httpx

from integrations.base_client import BaseAPIClient
from core.config import get_settings

logger = logging.getLogger(__name__)

# 三大法人 買賣超
DATASET_INSTITUTIONAL = "TaiwanStockInstitutionalInvestorsBuySell"
# 融資融券
DATASET_MARGIN = "TaiwanStockMarginPurchaseShortSale"
# 日K 股價
DATASET_PRICE = "TaiwanStockPrice"


class FinMindClient(BaseAPIClient):
    """FinMind Open API 클라이언트.

    지원 기능:
    - 데이터셋 단위 일별 데이터 조회 (법인 수급, 신용잔고, 일봉)

    모든 데이터셋이 같은 엔드포인트(/data)를 쓰고
    dataset / data_id / start_date / token 파라미터로만 구분됩니다.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        settings = get_settings()
        super().__init__(
            base_url=settings.finmind_api_url,
            calls_per_hour=settings.finmind_calls_per_hour,
            timeout=30.0,
            transport=transport,
        )
        self.api_token = settings.finmind_api_token

    def get_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
        }

    async def get_dataset(
        self,
        dataset: str,
        stock_id: str,
        start_date: str,
    ) -> list[Any]:
        """데이터셋 조회.

        Args:
            dataset: FinMind 데이터셋 이름
            stock_id: 종목코드 (예: "2330")
            start_date: 시작일 (YYYY-MM-DD)

        Returns:
            응답의 data 배열. data 필드가 없거나 배열이 아니면 빈 리스트.
            레코드 내부 값은 검증하지 않고 원본 그대로 반환합니다.

        Raises:
            UpstreamError: 네트워크/HTTP 오류
        """
        params = {
            "dataset": dataset,
            "data_id": stock_id,
            "start_date": start_date,
        }
        if self.api_token:
            params["token"] = self.api_token

        body = await self.get_json("/data", params=params)

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, list):
            msg = body.get("msg") if isinstance(body, dict) else None
            logger.warning(
                f"FinMind 응답에 data 배열 없음 ({dataset}, {stock_id}, msg={msg}) → 빈 결과로 처리"
            )
            return []
        return data

    async def get_institutional_investors(self, stock_id: str, start_date: str) -> list[Any]:
        """三大法人 일별 매수/매도 수량.

        Returns:
            [{"date": "2024-01-02", "stock_id": "2330", "name": "Foreign_Investor",
              "buy": 12345000, "sell": 6789000}, ...]
        """
        return await self.get_dataset(DATASET_INSTITUTIONAL, stock_id, start_date)

    async def get_margin_short(self, stock_id: str, start_date: str) -> list[Any]:
        """融資融券 일별 잔고.

        Returns:
            [{"date": "2024-01-02", "stock_id": "2330",
              "MarginPurchaseTodayBalance": 23456, "ShortSaleTodayBalance": 345}, ...]
        """
        return await self.get_dataset(DATASET_MARGIN, stock_id, start_date)

    async def get_daily_price(self, stock_id: str, start_date: str) -> list[Any]:
        """일봉 시세.

        Returns:
            [{"date": "2024-01-02", "stock_id": "2330",
              "open": 590.0, "max": 593.0, "min": 589.0, "close": 593.0}, ...]
        """
        return await self.get_dataset(DATASET_PRICE, stock_id, start_date)


# 싱글톤 클라이언트
_finmind_client: Optional[FinMindClient] = None


def get_finmind_client() -> FinMindClient:
    """FinMind 클라이언트 싱글톤 반환."""
    global _finmind_client
    if _finmind_client is None:
        _finmind_client = FinMindClient()
    return _finmind_client
