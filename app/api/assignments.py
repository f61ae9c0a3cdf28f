from fastapi import APIRouter, Body, Depends, Query, status

from app.core.api_client import PerformanceApi, get_api_client
from app.core.app_logger import get_logger
from app.core.config import settings
from app.core.errors import ApiError, FormValidationError, to_http_exception
from app.core.fetcher import as_list, gather_settled, load_user_assignments, parse_list
from app.core.resource_list import ActionSpec, ColumnSpec, ResourceList, date_text
from app.core.security import get_current_user_id
from app.core.status import assignment_badge
from app.schemas.common import PersonRef, Ref
from app.schemas.forms import AssignmentCreateForm
from app.schemas.views import FormResult, FormView, Option, TableView

router = APIRouter(prefix="/performance/assignments", tags=["assignments"])

logger = get_logger("assignments")

ASSIGNMENT_LIST = ResourceList(
    title="Appraisal Assignments",
    subtitle="View and manage appraisal assignments",
    columns=(
        ColumnSpec("employee", "Employee", lambda a: a.employee.full_name if a.employee else "Unknown"),
        ColumnSpec("cycle", "Cycle", lambda a: (a.cycle.name if a.cycle else None) or "N/A"),
        ColumnSpec("template", "Template", lambda a: (a.template.name if a.template else None) or "N/A"),
        ColumnSpec("status", "Status", lambda a: a.status),
        ColumnSpec("created_at", "Created", lambda a: date_text(a.created_at)),
    ),
    actions=(
        ActionSpec("View", lambda a: f"/performance/evaluations/{a.id}"),
        ActionSpec("Delete", lambda a: f"/performance/assignments/{a.id}", method="DELETE"),
    ),
    badge=lambda a: assignment_badge(a.status),
    create_href="/performance/assignments/new",
    empty_message="No assignments found.",
)


@router.get("", response_model=TableView)
async def list_assignments(
    cycle_id: str | None = Query(default=None, description="Restrict to one cycle"),
    user_id: str = Depends(get_current_user_id),
    api: PerformanceApi = Depends(get_api_client),
):
    assignments, error = await load_user_assignments(api, user_id, cycle_id)
    view = ASSIGNMENT_LIST.render(assignments, error=error)
    view.filters = {"cycle_id": cycle_id}
    return view


@router.get("/new", response_model=FormView)
async def new_assignment_form(
    cycle: str | None = Query(default=None, description="Preselected cycle id"),
    api: PerformanceApi = Depends(get_api_client),
):
    calls = [
        api.get("/performance/cycles"),
        api.get("/performance/templates", params={"activeOnly": "true"}),
    ]
    if settings.EMPLOYEE_PROFILE_URL:
        calls.append(api.get(settings.EMPLOYEE_PROFILE_URL))

    results = await gather_settled(*calls)
    # every source is optional here: a failed list just renders as empty
    lists = [[] if isinstance(r, ApiError) else as_list(r) for r in results]
    cycles = parse_list(Ref, lists[0])
    templates = parse_list(Ref, lists[1])
    employees = parse_list(PersonRef, lists[2]) if len(lists) > 2 else []

    return FormView(
        title="Create Appraisal Assignments",
        values=AssignmentCreateForm(cycle_id=cycle or "").model_dump(),
        options={
            "cycles": [Option(value=c.id, label=c.name or c.id) for c in cycles if c.id],
            "templates": [Option(value=t.id, label=t.name or t.id) for t in templates if t.id],
            "employees": [Option(value=e.id, label=e.full_name) for e in employees if e.id],
        },
        submit_href="/performance/assignments",
    )


@router.post("/form/toggle-employee", response_model=AssignmentCreateForm)
def toggle_employee(
    form: AssignmentCreateForm,
    employee_id: str = Body(..., min_length=1),
):
    return form.toggle_employee(employee_id)


@router.post("", response_model=FormResult, status_code=status.HTTP_201_CREATED)
async def create_assignments(
    payload: AssignmentCreateForm,
    api: PerformanceApi = Depends(get_api_client),
):
    try:
        body = payload.to_payload()
        created = await api.post(f"/performance/cycles/{payload.cycle_id}/assignments", body)
    except (ApiError, FormValidationError) as e:
        raise to_http_exception(e, "Failed to create assignments")

    logger.info("Created %d assignment(s) in cycle %s", len(body["employeeIds"]), payload.cycle_id)
    return FormResult(redirect_to="/performance/assignments", message="Assignments created", data=created)


@router.delete("/{assignment_id}", response_model=FormResult)
async def delete_assignment(assignment_id: str, api: PerformanceApi = Depends(get_api_client)):
    try:
        await api.delete(f"/performance/assignments/{assignment_id}")
    except ApiError as e:
        raise to_http_exception(e, "Failed to delete assignment")

    logger.info("Deleted assignment %s", assignment_id)
    return FormResult(redirect_to="/performance/assignments", message="Assignment deleted")
