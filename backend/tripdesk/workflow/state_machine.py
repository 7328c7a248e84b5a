"""Review state machine.

``pending`` is the only state with outgoing transitions; ``approved`` and
``rejected`` are terminal. The functions here are pure: persistence of a
transition (and its atomicity) belongs to the repository.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from backend.tripdesk.errors import InvalidDecision, InvalidTransition
from backend.tripdesk.models.common import SubmissionStatus
from backend.tripdesk.models.submission import Submission


class DecisionKind(str, Enum):
    """Admin decision."""

    approve = "approve"
    reject = "reject"


@dataclass(frozen=True)
class Decision:
    """A decision with its (rejection-only) message."""

    kind: DecisionKind
    message: str | None = None

    @classmethod
    def approve(cls) -> "Decision":
        return cls(kind=DecisionKind.approve)

    @classmethod
    def reject(cls, message: str) -> "Decision":
        return cls(kind=DecisionKind.reject, message=message)

    @property
    def target(self) -> SubmissionStatus:
        if self.kind is DecisionKind.approve:
            return SubmissionStatus.approved
        return SubmissionStatus.rejected


TRANSITIONS: dict[SubmissionStatus, frozenset[SubmissionStatus]] = {
    SubmissionStatus.pending: frozenset({SubmissionStatus.approved, SubmissionStatus.rejected}),
    SubmissionStatus.approved: frozenset(),
    SubmissionStatus.rejected: frozenset(),
}


def can_transition(current: SubmissionStatus, target: SubmissionStatus) -> bool:
    """Whether ``current -> target`` is a legal move."""
    return target in TRANSITIONS[current]


def normalize_decision(decision: Decision) -> Decision:
    """Validate the decision itself, independent of any submission.

    Raises:
        InvalidDecision: If a rejection has no (non-blank) message
    """
    if decision.kind is DecisionKind.reject:
        message = (decision.message or "").strip()
        if not message:
            raise InvalidDecision("Please provide a reason for rejection")
        return Decision.reject(message)
    return Decision.approve()


def ensure_transition(submission: Submission, decision: Decision) -> None:
    """Raise InvalidTransition if the submission cannot take the decision."""
    if not can_transition(submission.status, decision.target):
        raise InvalidTransition(
            f"Submission {submission.id} is already {submission.status.value}; "
            f"it cannot be {decision.target.value}"
        )


def apply_decision(submission: Submission, decision: Decision, now: datetime) -> Submission:
    """Return the submission as it is after ``decision``.

    Raises:
        InvalidDecision: If the decision is malformed
        InvalidTransition: If the submission is already decided
    """
    decision = normalize_decision(decision)
    ensure_transition(submission, decision)

    return submission.model_copy(
        update={
            "status": decision.target,
            "decided_at": now,
            "admin_message": decision.message,
        }
    )
