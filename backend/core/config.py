from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    cors_origins: str = "http://localhost:5173"
    log_level: str = "INFO"

    # FinMind API 설정 (정적 토큰)
    finmind_api_url: str = "https://api.finmindtrade.com/api/v4"
    finmind_api_token: Optional[str] = None
    finmind_calls_per_hour: int = 600  # 토큰 등록 시 600, 익명 300

    # Gemini API 설정
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"

    # 수급 데이터 조회 설정
    flow_lookback_days: int = 60  # 주말/휴장 고려해 30 거래일 이상 확보
    flow_max_records: int = 30

    # 첫 화면 기본 종목
    default_stock_code: str = "2330"

    class Config:
        env_file = ".env"
        extra = "allow"

    @property
    def finmind_configured(self) -> bool:
        return bool(self.finmind_api_token)

    @property
    def cors_origin_list(self) -> list[str]:
        if not self.cors_origins:
            return []
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    return Settings()
