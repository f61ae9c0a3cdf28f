from fastapi import APIRouter, Depends, status
from pydantic import ValidationError

from app.core.api_client import PerformanceApi, get_api_client
from app.core.app_logger import get_logger
from app.core.errors import ApiError, FormValidationError, to_http_exception
from app.core.fetcher import fetch_list, gather_settled, as_list, parse_list, parse_one
from app.core.forms import apply_row_edit
from app.core.resource_list import ActionSpec, ColumnSpec, ResourceList, date_text, truncate
from app.core.status import CYCLE_TYPE_LABELS, assignment_badge, info_badge
from app.schemas.assignment import Assignment
from app.schemas.common import Department
from app.schemas.cycle import Cycle
from app.schemas.forms import CycleForm, RowEdit, TemplateAssignmentRow
from app.schemas.template import Template
from app.schemas.views import DetailView, FormResult, FormView, Option, RowAction, TableView

router = APIRouter(prefix="/performance/cycles", tags=["cycles"])

logger = get_logger("cycles")

ACTIVE_TEMPLATES = ("/performance/templates", {"activeOnly": "true"})
DEPARTMENTS = "/organization-structure/departments"

CYCLE_LIST = ResourceList(
    title="Appraisal Cycles",
    subtitle="Create and manage appraisal cycles for employee evaluations",
    columns=(
        ColumnSpec("name", "Name", lambda c: c.name),
        ColumnSpec("description", "Description", lambda c: truncate(c.description)),
        ColumnSpec("cycle_type", "Type", lambda c: c.cycle_type),
        ColumnSpec("start_date", "Start Date", lambda c: date_text(c.start_date)),
        ColumnSpec("end_date", "End Date", lambda c: date_text(c.end_date)),
        ColumnSpec("manager_due_date", "Manager Due Date", lambda c: date_text(c.manager_due_date)),
    ),
    actions=(
        ActionSpec("View", lambda c: f"/performance/cycles/{c.id}"),
        ActionSpec("Edit", lambda c: f"/performance/cycles/{c.id}/edit"),
        ActionSpec("Assignments", lambda c: f"/performance/cycles/{c.id}/assignments"),
    ),
    badge=lambda c: info_badge(c.cycle_type),
    create_href="/performance/cycles/new",
    empty_message="No cycles found. Create your first cycle to get started.",
)

CYCLE_ASSIGNMENT_LIST = ResourceList(
    title="Cycle Assignments",
    subtitle="All appraisal assignments created for this cycle.",
    columns=(
        ColumnSpec("employee", "Employee", lambda a: a.employee.full_name if a.employee else "Unknown"),
        ColumnSpec("employee_number", "Employee #", lambda a: (a.employee.employee_number if a.employee else None) or "-"),
        ColumnSpec("template", "Template", lambda a: (a.template.name if a.template else None) or "-"),
        ColumnSpec("manager", "Manager", lambda a: a.manager.full_name if a.manager else "-"),
        ColumnSpec("department", "Department", lambda a: (a.department.name if a.department else None) or "-"),
        ColumnSpec("status", "Status", lambda a: a.status),
        ColumnSpec("created_at", "Assigned", lambda a: date_text(a.created_at)),
        ColumnSpec("due_date", "Due Date", lambda a: date_text(a.due_date)),
    ),
    badge=lambda a: assignment_badge(a.status),
    empty_message="No assignments have been created for this cycle yet.",
)


def _options(templates: list[Template], departments: list[Department]) -> dict[str, list[Option]]:
    return {
        "cycle_types": [Option(value=k.value, label=v) for k, v in CYCLE_TYPE_LABELS.items()],
        "templates": [Option(value=t.id, label=t.name) for t in templates if t.id],
        "departments": [
            Option(value=d.id, label=f"{d.name} ({d.code})" if d.code else d.name)
            for d in departments if d.id
        ],
    }


def _option_sources(results: list) -> tuple[list[Template], list[Department], str | None]:
    """Templates/departments results from gather_settled -> parsed lists + banner text."""
    templates_res, departments_res = results
    error = None
    templates: list[Template] = []
    departments: list[Department] = []

    if isinstance(templates_res, ApiError):
        error = f"Failed to load templates: {templates_res.message}"
    else:
        templates = parse_list(Template, as_list(templates_res))

    if isinstance(departments_res, ApiError):
        error = (
            f"Failed to load departments: {departments_res.message}. "
            "Please ensure the backend is running and you have the required permissions."
        )
    else:
        departments = parse_list(Department, as_list(departments_res))
        if not departments:
            logger.warning("No departments found; department-scoped template assignment unavailable")

    return templates, departments, error


@router.get("", response_model=TableView)
async def list_cycles(api: PerformanceApi = Depends(get_api_client)):
    rows, err = await fetch_list(api, "/performance/cycles")
    return CYCLE_LIST.render(
        parse_list(Cycle, rows),
        error=f"Failed to load cycles: {err.message}" if err else None,
    )


@router.get("/new", response_model=FormView)
async def new_cycle_form(api: PerformanceApi = Depends(get_api_client)):
    results = await gather_settled(
        api.get(ACTIVE_TEMPLATES[0], params=ACTIVE_TEMPLATES[1]),
        api.get(DEPARTMENTS),
    )
    templates, departments, error = _option_sources(results)
    return FormView(
        title="Create Appraisal Cycle",
        values=CycleForm().model_dump(),
        options=_options(templates, departments),
        error=error,
        submit_href="/performance/cycles",
    )


@router.post("/form/template-assignments", response_model=CycleForm)
def edit_template_assignment_rows(form: CycleForm, edit: RowEdit):
    """Add, change or remove one template-assignment row of an unsaved cycle form."""
    try:
        rows = apply_row_edit(
            [r.model_dump() for r in form.template_assignments],
            edit.op,
            edit.index,
            edit.field,
            edit.value,
            blank=TemplateAssignmentRow().model_dump(),
            fields=TemplateAssignmentRow.model_fields,
        )
        return form.model_copy(update={"template_assignments": [TemplateAssignmentRow(**r) for r in rows]})
    except (FormValidationError, ValidationError) as e:
        raise to_http_exception(e)


@router.post("", response_model=FormResult, status_code=status.HTTP_201_CREATED)
async def create_cycle(
    payload: CycleForm,
    api: PerformanceApi = Depends(get_api_client),
):
    try:
        payload.validate_required()
        created = await api.post("/performance/cycles", payload.to_payload())
    except (ApiError, FormValidationError) as e:
        raise to_http_exception(e, "Failed to create cycle")

    logger.info("Created cycle %r", payload.name)
    return FormResult(redirect_to="/performance/cycles", message="Cycle created", data=created)


@router.get("/{cycle_id}", response_model=DetailView)
async def get_cycle(cycle_id: str, api: PerformanceApi = Depends(get_api_client)):
    try:
        cycle = parse_one(Cycle, await api.get(f"/performance/cycles/{cycle_id}"))
    except ApiError as e:
        raise to_http_exception(e, "Failed to load cycle")

    return DetailView(
        title=cycle.name,
        subtitle=cycle.description or "No description provided",
        item=cycle.model_dump(mode="json"),
        badge=info_badge(cycle.cycle_type),
        actions=[
            RowAction(label="Edit", href=f"/performance/cycles/{cycle_id}/edit"),
            RowAction(label="View Assignments", href=f"/performance/cycles/{cycle_id}/assignments"),
            RowAction(label="Create Assignments", href=f"/performance/assignments/new?cycle={cycle_id}"),
        ],
        back_href="/performance/cycles",
    )


@router.get("/{cycle_id}/edit", response_model=FormView)
async def edit_cycle_form(cycle_id: str, api: PerformanceApi = Depends(get_api_client)):
    cycle_res, *option_results = await gather_settled(
        api.get(f"/performance/cycles/{cycle_id}"),
        api.get(ACTIVE_TEMPLATES[0], params=ACTIVE_TEMPLATES[1]),
        api.get(DEPARTMENTS),
    )
    if isinstance(cycle_res, ApiError):
        raise to_http_exception(cycle_res, "Failed to load cycle")

    try:
        cycle = parse_one(Cycle, cycle_res)
    except ApiError as e:
        raise to_http_exception(e, "Failed to load cycle")

    templates, departments, error = _option_sources(option_results)
    return FormView(
        title="Edit Appraisal Cycle",
        values=CycleForm.from_cycle(cycle).model_dump(),
        options=_options(templates, departments),
        error=error,
        submit_href=f"/performance/cycles/{cycle_id}",
        submit_method="PUT",
    )


@router.put("/{cycle_id}", response_model=FormResult)
async def update_cycle(
    cycle_id: str,
    payload: CycleForm,
    api: PerformanceApi = Depends(get_api_client),
):
    try:
        payload.validate_required()
        updated = await api.put(f"/performance/cycles/{cycle_id}", payload.to_payload())
    except (ApiError, FormValidationError) as e:
        raise to_http_exception(e, "Failed to update cycle")

    logger.info("Updated cycle %s", cycle_id)
    return FormResult(redirect_to=f"/performance/cycles/{cycle_id}", message="Cycle updated", data=updated)


@router.delete("/{cycle_id}", response_model=FormResult)
async def delete_cycle(cycle_id: str, api: PerformanceApi = Depends(get_api_client)):
    try:
        await api.delete(f"/performance/cycles/{cycle_id}")
    except ApiError as e:
        raise to_http_exception(e, "Failed to delete cycle")

    logger.info("Deleted cycle %s", cycle_id)
    return FormResult(redirect_to="/performance/cycles", message="Cycle deleted")


@router.get("/{cycle_id}/assignments", response_model=TableView)
async def list_cycle_assignments(cycle_id: str, api: PerformanceApi = Depends(get_api_client)):
    rows, err = await fetch_list(api, f"/performance/cycles/{cycle_id}/assignments")
    return CYCLE_ASSIGNMENT_LIST.render(
        parse_list(Assignment, rows),
        error=f"Failed to load assignments for this cycle: {err.message}" if err else None,
    )
