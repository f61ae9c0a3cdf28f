from pydantic import AliasChoices, Field

from app.schemas.appraisal import AppraisalRecord
from app.schemas.assignment import Assignment
from app.schemas.common import Entity, PersonRef, Timestamp, display_name


class Dispute(Entity):
    appraisal: AppraisalRecord | None = Field(
        default=None, validation_alias=AliasChoices("appraisalId", "appraisal")
    )
    assignment: Assignment | None = Field(
        default=None, validation_alias=AliasChoices("assignmentId", "assignment")
    )
    raised_by: PersonRef | None = Field(
        default=None, validation_alias=AliasChoices("raisedByEmployeeId", "raised_by")
    )
    reason: str = ""
    details: str | None = None
    status: str = "OPEN"
    resolution_summary: str | None = Field(
        default=None, validation_alias=AliasChoices("resolutionSummary", "resolution_summary")
    )
    adjusted_score: int | float | None = Field(
        default=None, validation_alias=AliasChoices("adjustedScore", "adjusted_score")
    )
    adjusted_rating_label: str | None = Field(
        default=None, validation_alias=AliasChoices("adjustedRatingLabel", "adjusted_rating_label")
    )
    created_at: Timestamp = Field(
        default=None, validation_alias=AliasChoices("createdAt", "submittedAt", "created_at")
    )

    @property
    def employee_name(self) -> str:
        return display_name(
            self.raised_by,
            self.assignment.employee if self.assignment else None,
            self.appraisal.employee if self.appraisal else None,
        )
