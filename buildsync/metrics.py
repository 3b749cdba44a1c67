"""
Prometheus metrics for build synchronisation.

All metrics are prefixed with ``buildsync_``. Collectors live in the default
registry; a long-running host process can expose them with
``prometheus_client.start_http_server``.
"""
from prometheus_client import Counter, Histogram

# ---------------------------------------------------------------------------
# Counters
# ---------------------------------------------------------------------------

SYNC_TOTAL = Counter(
    "buildsync_sync_total",
    "Sync calls by outcome (reused, uploaded, failed)",
    ["outcome"],
)

UPLOADS_TOTAL = Counter(
    "buildsync_uploads_total",
    "Upload attempts by final status",
    ["status"],
)

# ---------------------------------------------------------------------------
# Histograms (stage latency)
# ---------------------------------------------------------------------------

STAGE_DURATION = Histogram(
    "buildsync_stage_duration_seconds",
    "Duration of each sync stage in seconds",
    ["stage"],
    buckets=(0.05, 0.1, 0.5, 1, 5, 15, 30, 60, 120, 180, 300),
)
