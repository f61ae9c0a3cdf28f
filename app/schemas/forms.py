from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator

from app.core.errors import FormValidationError
from app.core.forms import join_lines, parse_id_list_json, require, split_commas, to_date_input
from app.schemas.appraisal import EvaluationFormData
from app.schemas.common import Lines
from app.schemas.cycle import Cycle
from app.schemas.dispute import Dispute
from app.schemas.template import Template


def _labels(value):
    if isinstance(value, str):
        return split_commas(value)
    return value or []


def _drop_blank(payload: dict) -> dict:
    """Empty optional inputs are left out rather than sent as ''."""
    return {k: v for k, v in payload.items() if v not in ("", None)}


# ---- cycles ----

class TemplateAssignmentRow(BaseModel):
    template_id: str = ""
    department_ids: list[str] = []


class CycleForm(BaseModel):
    name: str = ""
    description: str = ""
    cycle_type: str = "ANNUAL"
    start_date: str = ""
    end_date: str = ""
    manager_due_date: str = ""
    employee_acknowledgement_due_date: str = ""
    template_assignments: list[TemplateAssignmentRow] = []

    @classmethod
    def from_cycle(cls, cycle: Cycle) -> "CycleForm":
        return cls(
            name=cycle.name,
            description=cycle.description or "",
            cycle_type=cycle.cycle_type,
            start_date=to_date_input(cycle.start_date),
            end_date=to_date_input(cycle.end_date),
            manager_due_date=to_date_input(cycle.manager_due_date),
            employee_acknowledgement_due_date=to_date_input(cycle.employee_acknowledgement_due_date),
            template_assignments=[
                TemplateAssignmentRow(template_id=ta.template.id or "", department_ids=ta.department_ids)
                for ta in cycle.template_assignments
            ],
        )

    def validate_required(self) -> None:
        require(self.model_dump(), "name", "cycle_type", "start_date", "end_date")
        if any(not row.template_id for row in self.template_assignments):
            raise FormValidationError("Select a template for every template assignment row")

    def to_payload(self) -> dict:
        payload = _drop_blank({
            "name": self.name.strip(),
            "description": self.description,
            "cycleType": self.cycle_type,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "managerDueDate": self.manager_due_date,
            "employeeAcknowledgementDueDate": self.employee_acknowledgement_due_date,
        })
        if self.template_assignments:
            payload["templateAssignments"] = [
                {"templateId": r.template_id, "departmentIds": r.department_ids}
                for r in self.template_assignments
            ]
        return payload


# ---- templates ----

class RatingScaleInput(BaseModel):
    type: str = "FIVE_POINT"
    min: int | float = 1
    max: int | float = 5
    step: int | float = 1
    labels: Annotated[list[str], BeforeValidator(_labels)] = []


class CriterionRow(BaseModel):
    key: str = ""
    title: str = ""
    details: str = ""
    weight: int | float = 0
    max_score: int | float = 5
    required: bool = False


class TemplateForm(BaseModel):
    name: str = ""
    description: str = ""
    template_type: str = "ANNUAL"
    rating_scale: RatingScaleInput = RatingScaleInput()
    criteria: list[CriterionRow] = []
    instructions: str = ""
    is_active: bool = True

    @classmethod
    def from_template(cls, t: Template) -> "TemplateForm":
        return cls(
            name=t.name,
            description=t.description or "",
            template_type=t.template_type,
            rating_scale=RatingScaleInput(**t.rating_scale.model_dump()),
            criteria=[
                CriterionRow(
                    key=c.key,
                    title=c.title,
                    details=c.details or "",
                    weight=c.weight or 0,
                    max_score=c.max_score if c.max_score is not None else 5,
                    required=c.required,
                )
                for c in t.criteria
            ],
            instructions=t.instructions or "",
            is_active=t.is_active,
        )

    def validate_required(self) -> None:
        require(self.model_dump(), "name", "template_type")
        if not self.rating_scale.type.strip():
            raise FormValidationError("Rating scale type is required")
        if any(not c.key.strip() or not c.title.strip() for c in self.criteria):
            raise FormValidationError("Key and title are required for criteria")

    def to_payload(self) -> dict:
        return {
            "name": self.name.strip(),
            "description": self.description,
            "templateType": self.template_type,
            "ratingScale": self.rating_scale.model_dump(),
            "criteria": [
                {
                    "key": c.key.strip(),
                    "title": c.title.strip(),
                    "details": c.details,
                    "weight": c.weight,
                    "maxScore": c.max_score,
                    "required": c.required,
                }
                for c in self.criteria
            ],
            "instructions": self.instructions,
            "isActive": self.is_active,
        }


# ---- assignments ----

class AssignmentCreateForm(BaseModel):
    cycle_id: str = ""
    template_id: str = ""
    employee_ids: list[str] = []
    # fallback when no employee list could be loaded: '["id-1", "id-2"]'
    employee_ids_json: str = ""

    def toggle_employee(self, employee_id: str) -> "AssignmentCreateForm":
        if employee_id in self.employee_ids:
            ids = [i for i in self.employee_ids if i != employee_id]
        else:
            ids = [*self.employee_ids, employee_id]
        return self.model_copy(update={"employee_ids": ids})

    def resolve_employee_ids(self) -> list[str]:
        ids = self.employee_ids
        if self.employee_ids_json.strip():
            ids = parse_id_list_json(self.employee_ids_json)
        if not ids:
            raise FormValidationError("Please select at least one employee or provide employee IDs")
        return ids

    def to_payload(self) -> dict:
        require(self.model_dump(), "cycle_id", "template_id")
        return {"templateId": self.template_id, "employeeIds": self.resolve_employee_ids()}


# ---- evaluations ----

class RatingRow(BaseModel):
    criterion_key: str
    score: int | float = 0
    comments: str = ""


class EvaluationForm(BaseModel):
    ratings: list[RatingRow] = []
    manager_summary: str = ""
    strengths: Lines = []
    improvement_areas: Lines = []

    @classmethod
    def from_form_data(cls, data: EvaluationFormData) -> "EvaluationForm":
        existing = data.existing_record
        if existing is not None:
            return cls(
                ratings=[RatingRow(criterion_key=r.key, score=r.score, comments=r.comment) for r in existing.ratings],
                manager_summary=existing.manager_summary,
                strengths=existing.strengths,
                improvement_areas=existing.improvement_areas,
            )
        template = data.effective_template
        criteria = template.criteria if template else []
        return cls(ratings=[RatingRow(criterion_key=c.key) for c in criteria])

    def to_payload(self, status: str | None = None) -> dict:
        payload = {
            "ratings": [
                {"criterionKey": r.criterion_key, "score": r.score, "comment": r.comments or ""}
                for r in self.ratings
            ],
            "managerSummary": self.manager_summary or "",
            "strengths": join_lines(self.strengths),
            "improvementAreas": join_lines(self.improvement_areas),
        }
        if status:
            payload["status"] = status
        return payload


# ---- employee actions ----

class AcknowledgeForm(BaseModel):
    comment: str = ""

    def to_payload(self) -> dict:
        return {"comment": self.comment} if self.comment.strip() else {}


class DisputeForm(BaseModel):
    record_id: str = ""
    reason: str = ""
    details: str = ""

    def to_payload(self) -> dict:
        if not self.record_id:
            raise FormValidationError("No appraisal record specified")
        require(self.model_dump(), "reason", "details")
        return {"appraisalId": self.record_id, "reason": self.reason.strip(), "details": self.details.strip()}


class ResolutionForm(BaseModel):
    action: Literal["APPROVE", "REJECT"] = "APPROVE"
    adjusted_score: int | float | str | None = None
    adjusted_rating_label: str = ""
    resolution_summary: str = ""

    @classmethod
    def from_dispute(cls, dispute: Dispute) -> "ResolutionForm":
        if dispute.adjusted_score is not None:
            return cls(
                adjusted_score=dispute.adjusted_score,
                adjusted_rating_label=dispute.adjusted_rating_label or "",
            )
        return cls()

    def to_payload(self) -> dict:
        require(self.model_dump(), "resolution_summary")
        dto: dict = {"resolutionSummary": self.resolution_summary.strip()}
        if self.action == "APPROVE" and self.adjusted_score is not None and str(self.adjusted_score).strip():
            try:
                dto["adjustedScore"] = float(self.adjusted_score)
            except ValueError:
                raise FormValidationError("Adjusted score must be a number")
            dto["adjustedRatingLabel"] = self.adjusted_rating_label
        return {"dto": dto, "action": "approve" if self.action == "APPROVE" else "reject"}


class RowEdit(BaseModel):
    """An add/update/remove on one nested row list of a form."""
    op: Literal["add", "update", "remove"]
    index: int | None = None
    field: str | None = None
    value: Any = None
