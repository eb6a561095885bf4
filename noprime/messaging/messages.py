"""
Message contract between page controllers and the coordinator.

Messages are plain JSON-serializable dicts with a "type" field:
- PRODUCT_DETECTED {payload}: page -> coordinator, fire-and-forget
- GET_PRODUCT {tabId}: request to coordinator -> cached payload or None
- QUERY_PRODUCT: request to a page -> freshly computed payload or None
- ENABLED_CHANGED {enabled}: coordinator -> pages, broadcast
"""

from typing import Any, Dict, Optional

PRODUCT_DETECTED = "PRODUCT_DETECTED"
GET_PRODUCT = "GET_PRODUCT"
QUERY_PRODUCT = "QUERY_PRODUCT"
ENABLED_CHANGED = "ENABLED_CHANGED"

Message = Dict[str, Any]


def product_detected(payload: Dict[str, Any]) -> Message:
    return {"type": PRODUCT_DETECTED, "payload": payload}


def get_product(tab_id: Optional[int]) -> Message:
    return {"type": GET_PRODUCT, "tabId": tab_id}


def query_product() -> Message:
    return {"type": QUERY_PRODUCT}


def enabled_changed(enabled: bool) -> Message:
    return {"type": ENABLED_CHANGED, "enabled": enabled}
