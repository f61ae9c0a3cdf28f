from typing import Any

from pydantic import AliasChoices, Field, model_validator

from app.schemas.assignment import Assignment
from app.schemas.common import ApiModel, Entity, Lines, PersonRef, Timestamp
from app.schemas.template import Template


class Rating(ApiModel):
    """
    One criterion score. Current backends send {key, ratingValue, comments};
    older records use {criterionKey, score, comment}.
    """

    key: str = Field(validation_alias=AliasChoices("criterionKey", "key"))
    score: int | float = Field(default=0, validation_alias=AliasChoices("score", "ratingValue"))
    comment: str = Field(default="", validation_alias=AliasChoices("comment", "comments"))

    @model_validator(mode="before")
    @classmethod
    def prefer_filled_comment(cls, data: Any) -> Any:
        # {"comment": "", "comments": "..."} keeps the non-empty one
        if isinstance(data, dict) and not data.get("comment") and data.get("comments"):
            return {**data, "comment": data["comments"]}
        return data


class AppraisalRecord(Entity):
    assignment: Assignment | None = Field(
        default=None, validation_alias=AliasChoices("assignmentId", "assignment")
    )
    employee: PersonRef | None = Field(
        default=None, validation_alias=AliasChoices("employeeProfileId", "employee")
    )
    ratings: list[Rating] = []
    manager_summary: str = Field(
        default="", validation_alias=AliasChoices("managerSummary", "overallComment", "manager_summary")
    )
    strengths: Lines = []
    improvement_areas: Lines = Field(
        default=[], validation_alias=AliasChoices("improvementAreas", "improvement_areas")
    )
    total_score: int | float | None = Field(default=None, validation_alias=AliasChoices("totalScore", "total_score"))
    overall_rating_label: str | None = Field(
        default=None, validation_alias=AliasChoices("overallRatingLabel", "overall_rating_label")
    )
    status: str | None = None
    manager_submitted_at: Timestamp = Field(
        default=None, validation_alias=AliasChoices("managerSubmittedAt", "manager_submitted_at")
    )
    published_at: Timestamp = Field(
        default=None, validation_alias=AliasChoices("hrPublishedAt", "publishedAt", "published_at")
    )
    acknowledged_at: Timestamp = Field(
        default=None, validation_alias=AliasChoices("acknowledgedAt", "acknowledged_at")
    )


class EvaluationFormData(ApiModel):
    """Body of GET /performance/assignments/{id}/form."""

    assignment: Assignment
    template: Template | None = None
    existing_record: AppraisalRecord | None = Field(
        default=None, validation_alias=AliasChoices("existingRecord", "existing_record")
    )

    @property
    def effective_template(self) -> Template | None:
        return self.template or self.assignment.template


def score_text(value: Any) -> str:
    if value is None:
        return "-"
    return f"{float(value):.1f}"
