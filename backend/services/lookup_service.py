"""종목 조회 워크플로.

대시보드 검색 한 번 = lookup() 한 번.
AI 분석과 FinMind 수급 조회를 동시에 실행하고, 결과를 최신 상태로 반영합니다.

조회가 겹칠 경우 나중에 시작한 조회만 반영됩니다 (latest wins).
요청마다 단조 증가하는 request_id를 부여하고, 완료 시점에 자신이
여전히 최신 요청일 때만 상태를 덮어씁니다.
"""
import asyncio
import logging
from typing import Optional

from integrations.gemini import GeminiClient, get_gemini_client
from schemas.lookup import LookupResult, LookupStatus
from services.market_flow_service import MarketFlowService, get_market_flow_service

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "無法獲取完整數據，請檢查網路或股票代碼。"


class LookupService:
    """종목 조회 + 최신 결과 보관."""

    def __init__(
        self,
        gemini: Optional[GeminiClient] = None,
        market_flow: Optional[MarketFlowService] = None,
    ):
        self.gemini = gemini or get_gemini_client()
        self.market_flow = market_flow or get_market_flow_service()
        self._latest_request_id = 0
        self._latest: Optional[LookupResult] = None

    def latest(self) -> Optional[LookupResult]:
        """마지막으로 반영된 조회 상태."""
        return self._latest

    def _commit(self, result: LookupResult) -> bool:
        """최신 요청의 결과만 반영. 반영 여부 반환."""
        if result.request_id != self._latest_request_id:
            logger.info(
                f"오래된 조회 결과 폐기: #{result.request_id} {result.stock_code} "
                f"(최신 #{self._latest_request_id})"
            )
            return False
        self._latest = result
        return True

    async def lookup(self, stock_code: str) -> LookupResult:
        """종목 조회.

        Returns:
            이 요청의 결과. 더 새로운 요청이 먼저 시작됐다면
            반환만 하고 최신 상태에는 반영하지 않습니다.
        """
        stock_code = stock_code.strip()
        self._latest_request_id += 1
        request_id = self._latest_request_id

        # 이전 종목 데이터는 바로 폐기
        self._commit(LookupResult(
            request_id=request_id,
            stock_code=stock_code,
            status=LookupStatus.LOADING,
        ))

        try:
            analysis, records = await asyncio.gather(
                self.gemini.analyze_stock(stock_code),
                self.market_flow.get_combined(stock_code),
            )
        except Exception as e:
            logger.error(f"종목 조회 실패 ({stock_code}): {e}")
            result = LookupResult(
                request_id=request_id,
                stock_code=stock_code,
                status=LookupStatus.ERROR,
                error=GENERIC_ERROR_MESSAGE,
            )
        else:
            if analysis is None and not records:
                status = LookupStatus.NO_DATA
            else:
                status = LookupStatus.READY
            result = LookupResult(
                request_id=request_id,
                stock_code=stock_code,
                status=status,
                analysis=analysis,
                institutional=records,
            )

        self._commit(result)
        return result


_lookup_service: Optional[LookupService] = None


def get_lookup_service() -> LookupService:
    """LookupService 싱글톤 반환."""
    global _lookup_service
    if _lookup_service is None:
        _lookup_service = LookupService()
    return _lookup_service
