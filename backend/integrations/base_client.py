"""Base HTTP client with quota-window rate limiting."""
import asyncio
import logging
import time
from collections import deque
from typing import Any, Callable, Optional
from abc import ABC, abstractmethod

import httpx

logger = logging.getLogger(__name__)


class UpstreamError(Exception):
    """외부 API가 오류를 응답하거나 연결에 실패함."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimiter:
    """Sliding window rate limiter.

    FinMind 한도는 시간당 호출 수로 정해져 있어 호출 간격이 아니라
    최근 period초 안의 호출 수를 셉니다. 한도 안에서는 병렬 호출이
    대기 없이 동시에 나갑니다.
    """

    def __init__(
        self,
        max_calls: int,
        period: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_calls = max_calls
        self.period = period
        self._clock = clock
        self._calls: deque[float] = deque()

    def _prune(self, now: float):
        while self._calls and now - self._calls[0] >= self.period:
            self._calls.popleft()

    @property
    def remaining(self) -> int:
        self._prune(self._clock())
        return max(self.max_calls - len(self._calls), 0)

    async def acquire(self):
        while True:
            now = self._clock()
            self._prune(now)
            if len(self._calls) < self.max_calls:
                self._calls.append(now)
                return
            wait_time = self.period - (now - self._calls[0])
            logger.warning(f"호출 한도 도달 ({self.max_calls}/{self.period:.0f}s) → {wait_time:.1f}초 대기")
            await asyncio.sleep(wait_time)


class BaseAPIClient(ABC):
    """Base class for JSON API clients.

    재시도는 하지 않습니다. 실패는 UpstreamError로 호출자에게 전파되고,
    호출자가 빈 결과로 대체할지 결정합니다.
    """

    def __init__(
        self,
        base_url: str,
        calls_per_hour: int = 600,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.rate_limiter = RateLimiter(calls_per_hour)
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers=self.get_headers(),
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    @abstractmethod
    def get_headers(self) -> dict[str, str]:
        """Default headers for every request."""

    async def get_json(self, path: str, params: Optional[dict] = None) -> Any:
        """GET 요청 후 JSON 본문 반환.

        Raises:
            UpstreamError: HTTP 오류 상태, 네트워크 오류, JSON이 아닌 응답
        """
        await self.rate_limiter.acquire()

        try:
            response = await self.client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"HTTP {status} for GET {path}: {e.response.text[:200]}")
            raise UpstreamError(f"HTTP {status} for GET {path}", status_code=status) from e
        except httpx.RequestError as e:
            logger.error(f"Request error for GET {path}: {e!r}")
            raise UpstreamError(f"Request error for GET {path}: {type(e).__name__}") from e
        except ValueError as e:
            logger.error(f"Invalid JSON for GET {path}")
            raise UpstreamError(f"Invalid JSON for GET {path}") from e
