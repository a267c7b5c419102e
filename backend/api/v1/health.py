"""API 헬스체크 엔드포인트."""
from fastapi import APIRouter, Depends

from core.config import get_settings
from core.timezone import days_ago_iso
from integrations.finmind import FinMindClient, get_finmind_client, DATASET_PRICE

router = APIRouter()


async def _probe_finmind(client: FinMindClient) -> dict:
    settings = get_settings()

    try:
        # 토큰 없이도 호출은 가능 (호출 한도만 낮음)
        rows = await client.get_dataset(DATASET_PRICE, settings.default_stock_code, days_ago_iso(7))
        return {
            "configured": settings.finmind_configured,
            "connected": True,
            "rows": len(rows),
            "error": None,
        }
    except Exception as e:
        return {
            "configured": settings.finmind_configured,
            "connected": False,
            "rows": 0,
            "error": str(e)[:100],
        }


@router.get("/apis")
async def check_all_apis(client: FinMindClient = Depends(get_finmind_client)):
    """외부 API 연결 상태 확인."""
    settings = get_settings()

    return {
        "finmind": await _probe_finmind(client),
        "gemini": {
            "configured": bool(settings.gemini_api_key),
            "model": settings.gemini_model,
        },
    }


@router.get("/finmind")
async def check_finmind(client: FinMindClient = Depends(get_finmind_client)):
    """FinMind API 연결 상태 확인."""
    return await _probe_finmind(client)
