# FinMind (台灣股市 데이터) API Integration
from integrations.finmind.client import (
    FinMindClient,
    get_finmind_client,
    DATASET_INSTITUTIONAL,
    DATASET_MARGIN,
    DATASET_PRICE,
)

__all__ = [
    "FinMindClient",
    "get_finmind_client",
    "DATASET_INSTITUTIONAL",
    "DATASET_MARGIN",
    "DATASET_PRICE",
]
