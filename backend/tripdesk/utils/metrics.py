"""Prometheus metrics for the submission workflow."""

from prometheus_client import Counter

submissions_created_total = Counter(
    "tripdesk_submissions_created_total",
    "Total submissions created",
    ["variant"],
)

decisions_total = Counter(
    "tripdesk_decisions_total",
    "Total review decisions by outcome",
    ["decision", "outcome"],
)

documents_total = Counter(
    "tripdesk_documents_total",
    "Total document generation attempts by outcome",
    ["outcome"],
)


class PrometheusWorkflowMetrics:
    """Prometheus-based workflow metrics implementation."""

    def inc_submission(self, variant: str) -> None:
        """Count a created submission."""
        submissions_created_total.labels(variant=variant).inc()

    def inc_decision(self, decision: str, outcome: str) -> None:
        """Count a decision attempt (applied or refused)."""
        decisions_total.labels(decision=decision, outcome=outcome).inc()

    def inc_document(self, outcome: str) -> None:
        """Count a document generation attempt."""
        documents_total.labels(outcome=outcome).inc()
