from prometheus_client import Counter


health_score_recomputes_total = Counter(
    "health_score_recomputes_total",
    "Total project health scores recomputed and persisted",
)

health_score_recompute_failures_total = Counter(
    "health_score_recompute_failures_total",
    "Total project health score recomputes that failed",
)

health_score_batch_runs_total = Counter(
    "health_score_batch_runs_total",
    "Total batch health score update runs",
)
