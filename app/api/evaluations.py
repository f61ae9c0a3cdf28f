from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError

from app.core.api_client import PerformanceApi, get_api_client
from app.core.app_logger import get_logger
from app.core.errors import ApiError, FormValidationError, to_http_exception
from app.core.fetcher import describe_failure, fetch_list, parse_list, parse_one
from app.core.forms import apply_row_edit
from app.core.resource_list import ActionSpec, ColumnSpec, ResourceList
from app.core.security import get_current_user_id
from app.core.status import AssignmentStatus, assignment_badge, evaluation_action_label
from app.schemas.appraisal import EvaluationFormData
from app.schemas.assignment import Assignment
from app.schemas.forms import EvaluationForm, RatingRow, RowEdit
from app.schemas.views import EvaluationView, FormResult, TableView

router = APIRouter(prefix="/performance/evaluations", tags=["evaluations"])

logger = get_logger("evaluations")

EVALUATION_LIST = ResourceList(
    title="My Evaluations",
    subtitle="Complete appraisals for your assigned employees",
    columns=(
        ColumnSpec("employee", "Employee", lambda a: a.employee.full_name if a.employee else "Unknown"),
        ColumnSpec("cycle", "Cycle", lambda a: (a.cycle.name if a.cycle else None) or "N/A"),
        ColumnSpec("template", "Template", lambda a: (a.template.name if a.template else None) or "N/A"),
        ColumnSpec("status", "Status", lambda a: a.status),
    ),
    actions=(
        ActionSpec(lambda a: evaluation_action_label(a.status), lambda a: f"/performance/evaluations/{a.id}"),
    ),
    badge=lambda a: assignment_badge(a.status),
    empty_message="No evaluation assignments found.",
)


@router.get("", response_model=TableView)
async def list_evaluations(
    user_id: str = Depends(get_current_user_id),
    api: PerformanceApi = Depends(get_api_client),
):
    rows, err = await fetch_list(api, f"/performance/assignments/manager/{user_id}")
    return EVALUATION_LIST.render(
        parse_list(Assignment, rows),
        error=describe_failure([err], noun="evaluation assignments") if err else None,
    )


@router.get("/{assignment_id}", response_model=EvaluationView)
async def get_evaluation_form(assignment_id: str, api: PerformanceApi = Depends(get_api_client)):
    try:
        data = parse_one(EvaluationFormData, await api.get(f"/performance/assignments/{assignment_id}/form"))
    except ApiError as e:
        raise to_http_exception(e, "Failed to load evaluation")

    assignment = data.assignment
    template = data.effective_template
    record = data.existing_record

    return EvaluationView(
        assignment_id=assignment_id,
        employee_name=assignment.employee.full_name if assignment.employee else "Unknown",
        cycle_name=(assignment.cycle.name if assignment.cycle else None) or "N/A",
        template_name=(template.name if template else None) or "N/A",
        criteria=[c.model_dump(mode="json") for c in template.criteria] if template else [],
        rating_scale=template.rating_scale.model_dump(mode="json") if template else None,
        record_id=record.id if record else None,
        record_status=record.status if record else None,
        badge=assignment_badge(record.status if record and record.status else assignment.status),
        values=EvaluationForm.from_form_data(data).model_dump(),
        draft_href=f"/performance/evaluations/{assignment_id}/draft",
        submit_href=f"/performance/evaluations/{assignment_id}/submit",
    )


@router.post("/{assignment_id}/form/ratings", response_model=EvaluationForm)
def edit_rating_row(assignment_id: str, form: EvaluationForm, edit: RowEdit):
    """Change the score or comment of one criterion row. Rows follow the template, so only updates apply."""
    if edit.op != "update":
        raise to_http_exception(FormValidationError("Rating rows follow the template criteria and can only be updated"))
    try:
        rows = apply_row_edit(
            [r.model_dump() for r in form.ratings],
            edit.op,
            edit.index,
            edit.field,
            edit.value,
            fields=RatingRow.model_fields,
        )
        return form.model_copy(update={"ratings": [RatingRow(**r) for r in rows]})
    except (FormValidationError, ValidationError) as e:
        raise to_http_exception(e)


@router.post("/{assignment_id}/draft", response_model=FormResult)
async def save_draft(
    assignment_id: str,
    payload: EvaluationForm,
    api: PerformanceApi = Depends(get_api_client),
):
    # the records endpoint creates or updates the assignment's single record
    try:
        saved = await api.post(f"/performance/assignments/{assignment_id}/records", payload.to_payload())
    except ApiError as e:
        raise to_http_exception(e, "Failed to save draft")

    logger.info("Saved draft evaluation for assignment %s", assignment_id)
    return FormResult(message="Draft saved successfully", data=saved)


@router.post("/{assignment_id}/submit", response_model=FormResult)
async def submit_evaluation(
    assignment_id: str,
    payload: EvaluationForm,
    record_id: str | None = Query(default=None, description="Existing appraisal record, if any"),
    api: PerformanceApi = Depends(get_api_client),
):
    """
    With an existing record: save the current form onto it, then submit it.
    Without one: create the record directly in MANAGER_SUBMITTED.
    """
    try:
        if record_id:
            await api.post(f"/performance/assignments/{assignment_id}/records", payload.to_payload())
            result = await api.post(f"/performance/records/{record_id}/submit")
        else:
            result = await api.post(
                f"/performance/assignments/{assignment_id}/records",
                payload.to_payload(status=AssignmentStatus.MANAGER_SUBMITTED.value),
            )
    except ApiError as e:
        raise to_http_exception(e, "Failed to submit evaluation")

    logger.info("Submitted evaluation for assignment %s", assignment_id)
    return FormResult(
        redirect_to="/performance/evaluations",
        message="Evaluation submitted successfully",
        data=result,
    )
