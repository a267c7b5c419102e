"""종목 조회 워크플로 API."""
from fastapi import APIRouter, Depends, HTTPException, Path

from schemas.lookup import LookupResult
from services.lookup_service import LookupService, get_lookup_service
from api.v1.stocks import STOCK_CODE_PATTERN

router = APIRouter()


@router.get("/latest", response_model=LookupResult)
async def get_latest_lookup(
    service: LookupService = Depends(get_lookup_service),
):
    """마지막으로 반영된 조회 상태 (loading / ready / no_data / error)."""
    latest = service.latest()
    if latest is None:
        raise HTTPException(status_code=404, detail="조회 이력 없음")
    return latest


@router.post("/{stock_code}", response_model=LookupResult)
async def lookup_stock(
    stock_code: str = Path(..., pattern=STOCK_CODE_PATTERN, description="종목코드 (예: 2330)"),
    service: LookupService = Depends(get_lookup_service),
):
    """종목 조회: AI 분석 + 법인 수급을 동시에 가져옵니다.

    업스트림 실패는 5xx가 아니라 status="error"로 응답합니다.
    """
    return await service.lookup(stock_code)
