from fastapi import APIRouter, Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

router = APIRouter(prefix="/metrics")

PARSE_LATENCY = Histogram("uniformops_parse_latency_seconds", "Latency for free-text parse runs")
ORDERS_PARSED = Counter("uniformops_orders_parsed_total", "Staging orders produced by the text parser")
ORDERS_STAGED = Counter("uniformops_orders_staged_total", "Staging orders written to imported_orders")
IMPORTS_REVIEWED = Counter("uniformops_imports_reviewed_total", "Review outcomes for staged orders", ["outcome"])
CUSTOMER_RESOLVED = Counter("uniformops_customer_resolved_total", "Customer resolution during approval", ["reason"])
BACKEND_FAILURES = Counter("uniformops_backend_failures_total", "Failed backend calls", ["operation", "table"])

@router.get("")
def metrics():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
