import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from contextlib import asynccontextmanager

from core.config import get_settings
from api.v1 import stocks, lookup, health
from integrations.finmind import get_finmind_client

settings = get_settings()

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if not settings.finmind_configured:
        logger.warning("FINMIND_API_TOKEN 미설정 → 익명 호출 (호출 한도 낮음)")
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY 미설정 → AI 분석 비활성화")
    logger.info("Application started")

    yield

    # Shutdown
    await get_finmind_client().close()
    logger.info("Application shutdown")


app = FastAPI(
    title="Taiwan Stock Dashboard API",
    description="台股 三大法人 / 融資融券 / AI 분석 대시보드",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(GZipMiddleware, minimum_size=1000)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(stocks.router, prefix="/api/v1/stocks", tags=["stocks"])
app.include_router(lookup.router, prefix="/api/v1/lookup", tags=["lookup"])
app.include_router(health.router, prefix="/api/v1/health", tags=["health"])


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


@app.get("/api/v1/defaults")
async def get_defaults():
    """프론트엔드 초기 화면 설정 (첫 조회 종목 등)."""
    return {
        "stock_code": settings.default_stock_code,
        "lookback_days": settings.flow_lookback_days,
        "max_records": settings.flow_max_records,
    }
