from prometheus_client import Counter, Histogram

ORDERS_TOTAL = Counter(
    "storefront_orders_total",
    "Order placement attempts by outcome",
    ["outcome"],
)
ORDER_DURATION = Histogram(
    "storefront_order_duration_seconds",
    "Time spent in order placement by outcome",
    ["outcome"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

def observe_order(outcome: str, elapsed: float) -> None:
    """Order engine listener feeding the Prometheus collectors."""
    ORDERS_TOTAL.labels(outcome=outcome).inc()
    ORDER_DURATION.labels(outcome=outcome).observe(elapsed)
