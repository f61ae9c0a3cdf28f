from datetime import datetime, timedelta, timezone
from enum import Enum

from app.core.config import settings
from app.schemas.appraisal import AppraisalRecord
from app.schemas.views import Badge


class AssignmentStatus(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    SUBMITTED = "SUBMITTED"
    MANAGER_SUBMITTED = "MANAGER_SUBMITTED"
    PUBLISHED = "PUBLISHED"
    ACKNOWLEDGED = "ACKNOWLEDGED"


class DisputeStatus(str, Enum):
    OPEN = "OPEN"
    UNDER_REVIEW = "UNDER_REVIEW"
    ADJUSTED = "ADJUSTED"
    REJECTED = "REJECTED"


class CycleType(str, Enum):
    ANNUAL = "ANNUAL"
    SEMI_ANNUAL = "SEMI_ANNUAL"
    PROBATIONARY = "PROBATIONARY"
    PROJECT = "PROJECT"
    AD_HOC = "AD_HOC"


CYCLE_TYPE_LABELS = {
    CycleType.ANNUAL: "Annual",
    CycleType.SEMI_ANNUAL: "Semi-Annual",
    CycleType.PROBATIONARY: "Probationary",
    CycleType.PROJECT: "Project",
    CycleType.AD_HOC: "Ad Hoc",
}

DISPUTE_STATUS_LABELS = {
    DisputeStatus.OPEN: "Open",
    DisputeStatus.UNDER_REVIEW: "Under Review",
    DisputeStatus.ADJUSTED: "Adjusted",
    DisputeStatus.REJECTED: "Rejected",
}

# statuses counted as "done" by the dashboard completion rate
COMPLETED_STATUSES = (
    AssignmentStatus.SUBMITTED,
    AssignmentStatus.PUBLISHED,
    AssignmentStatus.ACKNOWLEDGED,
)


def assignment_badge(status: str | None) -> Badge:
    if status == AssignmentStatus.SUBMITTED.value:
        css = "badge-success"
    elif status == AssignmentStatus.IN_PROGRESS.value:
        css = "badge-warning"
    else:
        css = "badge-info"
    return Badge(label=status or "", css_class=css)


def dispute_badge(status: str | None) -> Badge:
    if status == DisputeStatus.ADJUSTED.value:
        css = "badge-success"
    elif status == DisputeStatus.REJECTED.value:
        css = "badge-error"
    elif status in (DisputeStatus.OPEN.value, DisputeStatus.UNDER_REVIEW.value):
        css = "badge-warning"
    else:
        css = "badge-info"
    return Badge(label=status or "", css_class=css)


def info_badge(label: str | None) -> Badge:
    return Badge(label=label or "N/A", css_class="badge-info")


def can_file_dispute(
    record: AppraisalRecord,
    now: datetime | None = None,
    window_days: int | None = None,
) -> bool:
    """
    A dispute may be raised once the record is published, for `window_days`
    days (inclusive) after publication, and only until it is acknowledged.
    """
    if record.published_at is None or record.acknowledged_at is not None:
        return False

    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    window = timedelta(days=settings.DISPUTE_WINDOW_DAYS if window_days is None else window_days)
    return now - record.published_at <= window


def can_acknowledge(record: AppraisalRecord) -> bool:
    if record.published_at is None and record.status != AssignmentStatus.PUBLISHED.value:
        return False
    return record.acknowledged_at is None and record.status != AssignmentStatus.ACKNOWLEDGED.value


def is_resolvable(status: str | None) -> bool:
    return status in (DisputeStatus.OPEN.value, DisputeStatus.UNDER_REVIEW.value)


def evaluation_action_label(status: str | None) -> str:
    return "Start Evaluation" if status == AssignmentStatus.NOT_STARTED.value else "View/Edit"
