# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics: single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""

from prometheus_client import Counter, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "skillmatrix_requests_total",
    "Total HTTP requests to the skill matrix service",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "skillmatrix_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "skillmatrix_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)
ENVELOPE_FAILURES = Counter(
    "skillmatrix_envelope_failures_total",
    "Responses returned with success=false, by error kind",
    ["kind"],
)

# ── Business Metrics (updated by service layer only) ──
DOCUMENTS_CREATED = Counter(
    "skillmatrix_documents_created_total",
    "Documents created",
    ["entity"],
)
DOCUMENTS_UPDATED = Counter(
    "skillmatrix_documents_updated_total",
    "Documents updated",
    ["entity"],
)
DOCUMENTS_DELETED = Counter(
    "skillmatrix_documents_deleted_total",
    "Documents deleted (soft or hard)",
    ["entity"],
)
SYNC_RUNS = Counter(
    "skillmatrix_sync_runs_total",
    "Catalog synchronisations run",
    ["catalog"],
)
SYNC_ITEMS = Counter(
    "skillmatrix_sync_items_total",
    "Catalog entries touched by synchronisation, by outcome",
    ["catalog", "action"],
)
SYNC_DURATION = Histogram(
    "skillmatrix_sync_duration_seconds",
    "Duration of a catalog synchronisation",
    ["catalog"],
)
AUTO_GROUPS = Counter(
    "skillmatrix_auto_groups_total",
    "Groups considered by automatic group creation, by outcome",
    ["criteria", "action"],
)
FUNCTION_INVOCATIONS = Counter(
    "skillmatrix_function_invocations_total",
    "Function entry point invocations",
    ["function", "method", "outcome"],
)
SYNERGY_ANALYSES = Counter(
    "skillmatrix_synergy_analyses_total",
    "Synergy analyses produced",
    ["mode"],
)
