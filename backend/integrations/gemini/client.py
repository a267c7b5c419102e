"""Google Gemini AI 클라이언트."""
import json
import logging
import re
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from core.config import get_settings
from core.timezone import now_tst
from schemas.stock_analysis import StockAnalysis

logger = logging.getLogger(__name__)

_gemini_client: Optional["GeminiClient"] = None

_FENCE_RE = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL)


class GeminiClient:
    """Google Gemini API 클라이언트."""

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = get_settings()
        self._api_key = self.settings.gemini_api_key
        self.base_url = "https://generativelanguage.googleapis.com/v1beta"
        self.model = self.settings.gemini_model
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def _generate(self, prompt: str, use_search: bool = False) -> Optional[dict]:
        """Gemini API 호출. 첫 번째 candidate 반환, 실패 시 None (재시도 없음)."""
        if not self.is_configured:
            return None

        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload: dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": 0.2,
                "maxOutputTokens": 4096,
            },
        }
        if use_search:
            payload["tools"] = [{"google_search": {}}]

        try:
            async with httpx.AsyncClient(timeout=60.0, transport=self._transport) as client:
                response = await client.post(
                    url,
                    params={"key": self._api_key},
                    json=payload,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Gemini API 호출 실패: HTTP {e.response.status_code}")
            return None
        except (httpx.RequestError, ValueError) as e:
            logger.error(f"Gemini API 호출 실패: {e}")
            return None

        candidates = (data.get("candidates") if isinstance(data, dict) else None) or []
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            logger.warning("Gemini 응답에 candidate 없음")
            return None
        return candidates[0]

    @staticmethod
    def _candidate_text(candidate: dict) -> str:
        content = candidate.get("content")
        parts = (content.get("parts") if isinstance(content, dict) else None) or []
        return "".join(p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str))

    @staticmethod
    def _grounding_sources(candidate: dict) -> list[dict]:
        """Google 검색 grounding에 사용된 출처 목록."""
        metadata = candidate.get("groundingMetadata") or {}
        chunks = (metadata.get("groundingChunks") if isinstance(metadata, dict) else None) or []
        sources = []
        seen = set()
        for chunk in chunks:
            web = chunk.get("web") if isinstance(chunk, dict) else None
            if not isinstance(web, dict) or not web.get("uri") or web["uri"] in seen:
                continue
            seen.add(web["uri"])
            sources.append({"title": web.get("title") or "", "uri": web["uri"]})
        return sources

    def _parse_json_response(self, text: str) -> Optional[dict]:
        """응답 텍스트에서 JSON 객체 추출 (```json 펜스, 앞뒤 설명문 허용)."""
        if not text:
            return None

        fenced = _FENCE_RE.search(text)
        body = fenced.group(1) if fenced else text
        start, end = body.find("{"), body.rfind("}")
        if start == -1 or end < start:
            logger.warning(f"JSON 없음: {text[:200]}")
            return None

        try:
            return json.loads(body[start:end + 1])
        except json.JSONDecodeError:
            logger.warning(f"JSON 파싱 실패: {text[:200]}")
            return None

    async def analyze_stock(self, stock_code: str) -> Optional[StockAnalysis]:
        """대만 종목 AI 분석 (시세, 재무, 요약, 뉴스)."""
        today = now_tst().strftime("%Y-%m-%d")
        prompt = f"""你是台灣股市分析師。請使用 Google 搜尋取得台股代號 {stock_code} 的最新資料（今天是 {today}），並整理成投資摘要。

請只回覆一個 JSON 物件，不要加任何說明文字：
{{
    "symbol": "{stock_code}",
    "name": "公司名稱",
    "market": "TWSE 或 OTC",
    "price": "最新股價",
    "change": "漲跌 (例如 +5.0)",
    "change_percent": "漲跌幅 (例如 +0.85%)",
    "update_time": "資料時間",
    "market_cap": "市值",
    "pe_ratio": "本益比",
    "pb_ratio": "股價淨值比",
    "dividend_yield": "殖利率",
    "sector": "產業",
    "eps": "近四季 EPS",
    "revenue_history": [
        {{"date": "2024/01", "revenue": 0, "mom": "+0.0%", "yoy": "+0.0%", "cumulative_revenue_yoy": "+0.0%"}}
    ],
    "margin_history": [
        {{"quarter": "24Q1", "gross_margin": 0, "operating_margin": 0, "pre_tax_margin": 0, "net_profit_margin": 0}}
    ],
    "ai_summary": "150 字以內的市場分析觀點",
    "news": [
        {{"title": "新聞標題", "source": "來源", "date": "YYYY-MM-DD", "url": "https://..."}}
    ]
}}

revenue_history 提供最近 12 個月，margin_history 提供最近 8 季。查不到的欄位請填空字串。"""

        candidate = await self._generate(prompt, use_search=True)
        if candidate is None:
            return None

        parsed = self._parse_json_response(self._candidate_text(candidate))
        if not isinstance(parsed, dict):
            return None

        if not parsed.get("symbol"):
            parsed["symbol"] = stock_code
        parsed["source_urls"] = self._grounding_sources(candidate)

        try:
            return StockAnalysis.model_validate(parsed)
        except ValidationError as e:
            logger.warning(f"Gemini 분석 결과 형식 오류 ({stock_code}): {e.error_count()}개 필드")
            return None


def get_gemini_client() -> GeminiClient:
    """싱글톤 Gemini 클라이언트 반환."""
    global _gemini_client
    if _gemini_client is None:
        _gemini_client = GeminiClient()
    return _gemini_client
