"""Structured logging for workflow events."""

import logging
from typing import Any
from uuid import UUID

from backend.tripdesk.db.context import RequestContext

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    """Apply the configured level to the package loggers."""
    logging.getLogger("backend.tripdesk").setLevel(level.upper())


class StructuredWorkflowLogger:
    """Structured logger for submission lifecycle events."""

    def log_submitted(self, ctx: RequestContext, submission_id: UUID, variant: str) -> None:
        """Log creation of a pending submission."""
        logger.info(
            f"Submission created: {submission_id}",
            extra={
                "structured": {
                    "submission_id": str(submission_id),
                    "owner_id": str(ctx.user_id),
                    "variant": variant,
                    "status": "pending",
                }
            },
        )

    def log_transition(
        self,
        ctx: RequestContext,
        submission_id: UUID,
        decision: str,
        outcome: str,
        current_status: str | None = None,
    ) -> None:
        """Log a decision attempt with its outcome."""
        log_data: dict[str, Any] = {
            "submission_id": str(submission_id),
            "actor_id": str(ctx.user_id),
            "role": ctx.role.value,
            "decision": decision,
            "outcome": outcome,
        }

        if current_status:
            log_data["current_status"] = current_status

        log_msg = f"Submission decision: {decision} - {outcome}"

        if outcome == "applied":
            logger.info(log_msg, extra={"structured": log_data})
        else:
            logger.warning(log_msg, extra={"structured": log_data})

    def log_document(
        self, submission_id: UUID, outcome: str, error_reason: str | None = None
    ) -> None:
        """Log a document generation attempt."""
        log_data: dict[str, Any] = {"submission_id": str(submission_id), "outcome": outcome}

        if error_reason:
            log_data["error_reason"] = error_reason

        if outcome == "attached":
            logger.info(f"Document generation: {outcome}", extra={"structured": log_data})
        else:
            logger.warning(f"Document generation: {outcome}", extra={"structured": log_data})
