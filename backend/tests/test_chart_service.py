"""차트 데이터 가공 테스트."""
from schemas.market_flow import ChartPoint, CombinedRecord
from services.chart_service import (
    build_chart_payload,
    external_chart_url,
    price_domain,
    to_chart_points,
    to_lots,
)


def record(date: str, close, foreign=0, trust=0, dealer=0) -> CombinedRecord:
    return CombinedRecord(date=date, close=close, foreign_net=foreign, trust_net=trust, dealer_net=dealer)


class TestChartService:
    def test_to_lots_rounds_half_up(self):
        assert to_lots(1499) == 1
        assert to_lots(1500) == 2
        assert to_lots(-1500) == -1
        assert to_lots(-1501) == -2
        assert to_lots(0) == 0

    def test_points_sorted_and_filtered(self):
        points = to_chart_points([
            record("2024-01-03", 102, foreign=12_345_000),
            record("2024-01-02", 0),
            record("2024-01-01", 100, trust=-2_600, dealer=400),
        ])

        assert [p.date for p in points] == ["2024-01-01", "2024-01-03"]
        assert (points[0].foreign, points[0].trust, points[0].dealer) == (0, -3, 0)
        assert points[1].foreign == 12345
        assert points[1].price == 102

    def test_price_domain_buffer(self):
        points = [
            ChartPoint(date="2024-01-01", foreign=0, trust=0, dealer=0, price=100),
            ChartPoint(date="2024-01-02", foreign=0, trust=0, dealer=0, price=150),
        ]
        assert price_domain(points) == (95, 155)

    def test_price_domain_flat_and_empty(self):
        flat = [ChartPoint(date="2024-01-01", foreign=0, trust=0, dealer=0, price=593.5)]
        assert price_domain(flat) == (593, 594)
        assert price_domain([]) is None

    def test_external_url(self):
        assert external_chart_url("2330") == "https://tw.stock.yahoo.com/quote/2330.TW/technical-analysis"
        for market in ("OTC", "上櫃", "TPEX"):
            assert external_chart_url("6488", market).endswith("/6488.TWO/technical-analysis")

    def test_payload(self):
        payload = build_chart_payload("2330", [record("2024-01-02", 593)])

        assert payload.stock_code == "2330"
        assert payload.market == "TWSE"
        assert len(payload.points) == 1
        assert payload.price_domain == (593, 593)
        assert payload.external_url.endswith("2330.TW/technical-analysis")

    def test_empty_payload(self):
        payload = build_chart_payload("2330", [], market="OTC")

        assert payload.points == []
        assert payload.price_domain is None
