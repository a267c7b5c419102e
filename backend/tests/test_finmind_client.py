"""FinMind 클라이언트 테스트 (httpx.MockTransport)."""
import asyncio

import httpx
import pytest

from integrations.base_client import RateLimiter, UpstreamError
from integrations.finmind import (
    FinMindClient,
    DATASET_INSTITUTIONAL,
    DATASET_MARGIN,
    DATASET_PRICE,
)


def make_client(handler) -> FinMindClient:
    client = FinMindClient(transport=httpx.MockTransport(handler))
    client.rate_limiter = RateLimiter(1000)
    client.api_token = "test-token"
    return client


async def _run(client: FinMindClient, coro):
    try:
        return await coro
    finally:
        await client.close()


class TestFinMindClient:
    def test_query_parameters(self):
        """dataset / data_id / start_date / token 전달."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"msg": "success", "status": 200, "data": [{"date": "2024-01-02"}]})

        client = make_client(handler)
        rows = asyncio.run(_run(client, client.get_daily_price("2330", "2024-01-01")))

        assert rows == [{"date": "2024-01-02"}]
        request = seen[0]
        assert request.method == "GET"
        assert request.url.path.endswith("/data")
        assert request.url.params["dataset"] == DATASET_PRICE
        assert request.url.params["data_id"] == "2330"
        assert request.url.params["start_date"] == "2024-01-01"
        assert request.url.params["token"] == "test-token"

    def test_dataset_names(self):
        datasets = []

        def handler(request: httpx.Request) -> httpx.Response:
            datasets.append(request.url.params["dataset"])
            return httpx.Response(200, json={"data": []})

        client = make_client(handler)

        async def fetch_all():
            await client.get_institutional_investors("2330", "2024-01-01")
            await client.get_margin_short("2330", "2024-01-01")
            await client.get_daily_price("2330", "2024-01-01")

        asyncio.run(_run(client, fetch_all()))

        assert datasets == [DATASET_INSTITUTIONAL, DATASET_MARGIN, DATASET_PRICE]

    def test_token_omitted_when_not_configured(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": []})

        client = make_client(handler)
        client.api_token = None
        asyncio.run(_run(client, client.get_margin_short("2330", "2024-01-01")))

        assert "token" not in seen[0].url.params

    @pytest.mark.parametrize("body", [
        {"msg": "error"},
        {"data": None},
        {"data": {"date": "2024-01-02"}},
        {"data": "2024-01-02"},
        [],
    ])
    def test_malformed_payload_is_empty(self, body):
        """data 배열이 없으면 빈 리스트 (예외 아님)."""
        client = make_client(lambda request: httpx.Response(200, json=body))

        rows = asyncio.run(_run(client, client.get_institutional_investors("2330", "2024-01-01")))

        assert rows == []

    def test_http_error_raises(self):
        client = make_client(lambda request: httpx.Response(402, json={"msg": "Requests reach the upper limit"}))

        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(_run(client, client.get_daily_price("2330", "2024-01-01")))

        assert exc_info.value.status_code == 402

    def test_invalid_json_raises(self):
        client = make_client(lambda request: httpx.Response(200, text="<html>maintenance</html>"))

        with pytest.raises(UpstreamError):
            asyncio.run(_run(client, client.get_daily_price("2330", "2024-01-01")))

    def test_network_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(UpstreamError) as exc_info:
            asyncio.run(_run(client, client.get_daily_price("2330", "2024-01-01")))

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
