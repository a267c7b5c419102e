"""Google Gemini AI 종목 분석 클라이언트."""
from .client import GeminiClient, get_gemini_client

__all__ = ["GeminiClient", "get_gemini_client"]
