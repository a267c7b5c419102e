from .flow_merge import merge_market_flow
from .market_flow_service import MarketFlowService, get_market_flow_service
from .chart_service import build_chart_payload
from .lookup_service import LookupService, get_lookup_service

__all__ = [
    "merge_market_flow",
    "MarketFlowService",
    "get_market_flow_service",
    "build_chart_payload",
    "LookupService",
    "get_lookup_service",
]
