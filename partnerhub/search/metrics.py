from prometheus_client import Counter


search_requests_total = Counter(
    "search_requests_total",
    "Total cross-entity search requests",
    ["scope"],
)
