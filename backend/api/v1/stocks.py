"""종목 수급/차트 API."""
from fastapi import APIRouter, Depends, Path, Query

from schemas.market_flow import ChartPayload, CombinedRecord
from services.chart_service import build_chart_payload
from services.market_flow_service import MarketFlowService, get_market_flow_service

router = APIRouter()

STOCK_CODE_PATTERN = "^[0-9A-Za-z]{1,10}$"


@router.get("/{stock_code}/institutional", response_model=list[CombinedRecord])
async def get_institutional(
    stock_code: str = Path(..., pattern=STOCK_CODE_PATTERN, description="종목코드 (예: 2330)"),
    service: MarketFlowService = Depends(get_market_flow_service),
):
    """三大法人 + 融資融券 + 일봉 병합 데이터.

    최근 60일 조회 → 최근 30 거래일, 날짜 오름차순.
    업스트림 실패 시 빈 배열을 반환합니다.
    """
    return await service.get_combined(stock_code)


@router.get("/{stock_code}/chart", response_model=ChartPayload)
async def get_chart(
    stock_code: str = Path(..., pattern=STOCK_CODE_PATTERN, description="종목코드 (예: 2330)"),
    market: str = Query(default="TWSE", description="TWSE(上市) / OTC(上櫃)"),
    service: MarketFlowService = Depends(get_market_flow_service),
):
    """법인 순매수(張) vs 종가 차트 데이터."""
    records = await service.get_combined(stock_code)
    return build_chart_payload(stock_code, records, market=market)
