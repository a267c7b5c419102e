"""pytest 설정 및 fixtures."""
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from main import app
from services.lookup_service import LookupService, get_lookup_service
from services.market_flow_service import MarketFlowService, get_market_flow_service


class FakeFinMindClient:
    """데이터셋별 응답(리스트) 또는 예외를 돌려주는 FinMind 대역."""

    def __init__(
        self,
        institutional: Any = None,
        margin: Any = None,
        price: Any = None,
        errors: Optional[dict[str, Exception]] = None,
    ):
        self.responses = {
            "institutional": institutional or [],
            "margin": margin or [],
            "price": price or [],
        }
        self.errors = errors or {}
        self.calls: list[tuple[str, str, str]] = []

    async def _respond(self, kind: str, stock_id: str, start_date: str):
        self.calls.append((kind, stock_id, start_date))
        if kind in self.errors:
            raise self.errors[kind]
        return self.responses[kind]

    async def get_institutional_investors(self, stock_id: str, start_date: str):
        return await self._respond("institutional", stock_id, start_date)

    async def get_margin_short(self, stock_id: str, start_date: str):
        return await self._respond("margin", stock_id, start_date)

    async def get_daily_price(self, stock_id: str, start_date: str):
        return await self._respond("price", stock_id, start_date)


class FakeGeminiClient:
    """analyze_stock 결과를 고정으로 돌려주는 Gemini 대역."""

    def __init__(self, analysis=None, error: Optional[Exception] = None):
        self.analysis = analysis
        self.error = error

    async def analyze_stock(self, stock_code: str):
        if self.error:
            raise self.error
        return self.analysis


def price_row(date: str, close: Any = 100, **extra) -> dict:
    row = {"date": date, "stock_id": "2330", "close": close, "open": close, "max": close, "min": close}
    row.update(extra)
    return row


def inst_row(date: str, name: str, buy: Any, sell: Any) -> dict:
    return {"date": date, "stock_id": "2330", "name": name, "buy": buy, "sell": sell}


def margin_row(date: str, margin: Any, short: Any) -> dict:
    return {
        "date": date,
        "stock_id": "2330",
        "MarginPurchaseTodayBalance": margin,
        "ShortSaleTodayBalance": short,
    }


@pytest.fixture
def finmind():
    """기본 FinMind 대역: 2거래일 데이터."""
    return FakeFinMindClient(
        institutional=[
            inst_row("2024-01-02", "Foreign_Investor", 5000, 2000),
            inst_row("2024-01-03", "Investment_Trust", 1000, 3000),
        ],
        margin=[margin_row("2024-01-02", 23456, 345)],
        price=[price_row("2024-01-02", 593), price_row("2024-01-03", 589.5)],
    )


@pytest.fixture
def market_flow(finmind):
    return MarketFlowService(client=finmind)


@pytest.fixture
def client(market_flow):
    """테스트 클라이언트 (외부 API 대신 대역 주입)."""
    lookup_service = LookupService(gemini=FakeGeminiClient(), market_flow=market_flow)
    app.dependency_overrides[get_market_flow_service] = lambda: market_flow
    app.dependency_overrides[get_lookup_service] = lambda: lookup_service

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
