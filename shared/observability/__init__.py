from .setup import setup_observability, configure_logging
from .metrics import (
    backoffice_status_transitions_total,
    backoffice_status_rollbacks_total,
    backoffice_envelope_unrecognized_total,
    backoffice_records_rejected_total,
    backoffice_stale_responses_discarded_total,
    backoffice_exports_total,
    backoffice_upstream_request_duration_seconds
)
