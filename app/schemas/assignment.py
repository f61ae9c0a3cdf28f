from pydantic import AliasChoices, Field

from app.schemas.common import Entity, PersonRef, Ref, RefId, Timestamp
from app.schemas.template import Template


class Assignment(Entity):
    cycle: Ref | None = Field(default=None, validation_alias=AliasChoices("cycleId", "cycle"))
    template: Template | None = Field(default=None, validation_alias=AliasChoices("templateId", "template"))
    employee: PersonRef | None = Field(
        default=None, validation_alias=AliasChoices("employeeProfileId", "employee")
    )
    manager: PersonRef | None = Field(
        default=None, validation_alias=AliasChoices("managerProfileId", "managerId", "manager")
    )
    department: Ref | None = Field(default=None, validation_alias=AliasChoices("departmentId", "department"))
    status: str = "NOT_STARTED"
    due_date: Timestamp = Field(default=None, validation_alias=AliasChoices("dueDate", "due_date"))
    created_at: Timestamp = Field(default=None, validation_alias=AliasChoices("createdAt", "created_at"))
    latest_appraisal_id: RefId = Field(
        default=None, validation_alias=AliasChoices("latestAppraisalId", "latest_appraisal_id")
    )
