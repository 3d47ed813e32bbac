from prometheus_client import Counter, Histogram, make_asgi_app

# Low-cardinality labels: route templates only, never raw paths
REQUESTS = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "route", "status"],
)

LATENCY = Histogram(
    "http_request_duration_seconds",
    "Request latency in seconds",
    ["method", "route"],
)

# outcome is "success" or an ErrorKind value
FETCHES = Counter(
    "object_fetch_total",
    "Object fetch attempts by outcome",
    ["outcome"],
)

metrics_app = make_asgi_app()
