"""Job status state machine.

Jobs move strictly forward through ``pending -> in_progress -> completed ->
picked_up``. The only transition ever offered is "advance to the next
status"; skipping or moving backwards is rejected before anything is
written.
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from stringdesk.jobs.models import JobStatus
from stringdesk.shared.models import utcnow

STATUS_ORDER = (
    JobStatus.PENDING,
    JobStatus.IN_PROGRESS,
    JobStatus.COMPLETED,
    JobStatus.PICKED_UP,
)


class RejectionReason(str, Enum):
    TERMINAL = "terminal"
    NOT_NEXT = "not_next"
    IN_FLIGHT = "in_flight"
    UNKNOWN_STATUS = "unknown_status"


def _coerce(status) -> Optional[JobStatus]:
    if isinstance(status, JobStatus):
        return status
    try:
        return JobStatus(status)
    except ValueError:
        return None


def next_status(current) -> Optional[JobStatus]:
    current = _coerce(current)
    if current is None:
        return None
    position = STATUS_ORDER.index(current)
    if position + 1 < len(STATUS_ORDER):
        return STATUS_ORDER[position + 1]
    return None


@dataclass(frozen=True)
class Rejected:
    reason: RejectionReason
    current_status: Optional[JobStatus]
    message: str

    @property
    def next_status(self) -> Optional[JobStatus]:
        return next_status(self.current_status)


@dataclass(frozen=True)
class Transition:
    from_status: JobStatus
    to_status: JobStatus
    updated_at: datetime
    completed_date: Optional[datetime]
    first_completion: bool = False

    def patch(self) -> dict:
        return {
            "job_status": self.to_status,
            "updated_at": self.updated_at,
            "completed_date": self.completed_date,
        }

    def apply(self, job):
        for field, value in self.patch().items():
            setattr(job, field, value)
        return job


AdvanceResult = Union[Transition, Rejected]


def enter_status(job, status: JobStatus, now: Optional[datetime] = None) -> Transition:
    """Side effects of entering ``status``, with no ordering check.

    ``completed_date`` is stamped only the first time the job is completed and
    is carried through every later state.
    """
    now = now or utcnow()
    completed_date = job.completed_date
    first_completion = False
    if status == JobStatus.COMPLETED and completed_date is None:
        completed_date = now
        first_completion = True
    return Transition(
        from_status=_coerce(job.job_status),
        to_status=status,
        updated_at=now,
        completed_date=completed_date,
        first_completion=first_completion,
    )


def advance(job, target=None, now: Optional[datetime] = None) -> AdvanceResult:
    current = _coerce(job.job_status)
    if current is None:
        return Rejected(RejectionReason.UNKNOWN_STATUS, None, f"Unknown job status {job.job_status!r}")

    successor = next_status(current)
    if successor is None:
        return Rejected(RejectionReason.TERMINAL, current, f"Job is already {current.value}")

    if target is not None and _coerce(target) != successor:
        return Rejected(
            RejectionReason.NOT_NEXT,
            current,
            f"Job can only move from {current.value} to {successor.value}",
        )

    return enter_status(job, successor, now)
