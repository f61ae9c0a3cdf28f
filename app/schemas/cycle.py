from typing import Any

from pydantic import AliasChoices, Field, field_validator

from app.schemas.common import ApiModel, DateOnly, Entity, Ref


class TemplateAssignment(ApiModel):
    template: Ref = Field(validation_alias=AliasChoices("templateId", "template"))
    department_ids: list[str] = Field(default=[], validation_alias=AliasChoices("departmentIds", "department_ids"))

    @field_validator("department_ids", mode="before")
    @classmethod
    def flatten_departments(cls, v: Any) -> Any:
        # populated departments come back as objects
        if isinstance(v, list):
            return [(d.get("_id") or d.get("id")) if isinstance(d, dict) else d for d in v]
        return v


class Cycle(Entity):
    name: str = ""
    description: str | None = None
    cycle_type: str = Field(default="ANNUAL", validation_alias=AliasChoices("cycleType", "cycle_type"))
    status: str | None = None
    start_date: DateOnly = Field(default=None, validation_alias=AliasChoices("startDate", "start_date"))
    end_date: DateOnly = Field(default=None, validation_alias=AliasChoices("endDate", "end_date"))
    manager_due_date: DateOnly = Field(
        default=None, validation_alias=AliasChoices("managerDueDate", "manager_due_date")
    )
    employee_acknowledgement_due_date: DateOnly = Field(
        default=None,
        validation_alias=AliasChoices("employeeAcknowledgementDueDate", "employee_acknowledgement_due_date"),
    )
    template_assignments: list[TemplateAssignment] = Field(
        default=[], validation_alias=AliasChoices("templateAssignments", "template_assignments")
    )

    @field_validator("template_assignments", mode="before")
    @classmethod
    def skip_unlinked_templates(cls, v: Any) -> Any:
        """Entries whose template was deleted come back with templateId: null."""
        if not isinstance(v, list):
            return []
        return [
            ta for ta in v
            if isinstance(ta, dict) and (ta.get("templateId") or ta.get("template"))
        ]
