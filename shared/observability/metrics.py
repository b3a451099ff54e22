from prometheus_client import Counter, Histogram

# Business Metrics
backoffice_status_transitions_total = Counter(
    "backoffice_status_transitions_total",
    "Order status change attempts",
    ["role", "outcome"] # outcome: 'applied', 'noop', 'rejected'
)

backoffice_status_rollbacks_total = Counter(
    "backoffice_status_rollbacks_total",
    "Optimistic status changes reverted after a failed backend call",
    ["step_name"]
)

backoffice_envelope_unrecognized_total = Counter(
    "backoffice_envelope_unrecognized_total",
    "List responses whose envelope shape matched none of the known shapes",
    ["collection"] # 'orders', 'products'
)

backoffice_records_rejected_total = Counter(
    "backoffice_records_rejected_total",
    "Records dropped from a list response because they failed validation",
    ["collection"]
)

backoffice_stale_responses_discarded_total = Counter(
    "backoffice_stale_responses_discarded_total",
    "List responses discarded because a newer query superseded them"
)

backoffice_exports_total = Counter(
    "backoffice_exports_total",
    "Text documents generated for download",
    ["kind"] # 'invoice', 'batch'
)

backoffice_upstream_request_duration_seconds = Histogram(
    "backoffice_upstream_request_duration_seconds",
    "Latency of calls to the REST backend",
    ["method", "outcome"]
)
