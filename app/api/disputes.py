from fastapi import APIRouter, Depends, Query, status

from app.core.api_client import PerformanceApi, get_api_client
from app.core.app_logger import get_logger
from app.core.errors import ApiError, FormValidationError, to_http_exception
from app.core.fetcher import fetch_list, parse_list, parse_one
from app.core.resource_list import ActionSpec, ColumnSpec, ResourceList, date_text, truncate
from app.core.status import DISPUTE_STATUS_LABELS, dispute_badge, is_resolvable
from app.schemas.dispute import Dispute
from app.schemas.forms import DisputeForm, ResolutionForm
from app.schemas.views import DetailView, FormResult, FormView, Option, RowAction, TableView

router = APIRouter(prefix="/performance/disputes", tags=["disputes"])

logger = get_logger("disputes")


def status_options() -> list[Option]:
    return [Option(value=k.value, label=v) for k, v in DISPUTE_STATUS_LABELS.items()]


DISPUTE_LIST = ResourceList(
    title="Disputes Management",
    subtitle="Review and resolve employee disputes regarding appraisals",
    columns=(
        ColumnSpec("employee", "Employee", lambda d: d.employee_name),
        ColumnSpec("reason", "Reason", lambda d: truncate(d.reason) or "No reason provided"),
        ColumnSpec("status", "Status", lambda d: d.status),
        ColumnSpec("created_at", "Created", lambda d: date_text(d.created_at)),
    ),
    actions=(
        ActionSpec(
            lambda d: "Resolve" if is_resolvable(d.status) else "View",
            lambda d: f"/performance/disputes/{d.id}",
        ),
    ),
    badge=lambda d: dispute_badge(d.status),
    empty_message="No disputes found.",
    filter_fields={"status": lambda d: d.status},
)


@router.get("", response_model=TableView)
async def list_disputes(
    status_filter: str | None = Query(default=None, alias="status", description="OPEN, UNDER_REVIEW, ADJUSTED, REJECTED"),
    api: PerformanceApi = Depends(get_api_client),
):
    rows, err = await fetch_list(api, "/performance/disputes")
    view = DISPUTE_LIST.render(
        parse_list(Dispute, rows),
        error=f"Failed to load disputes: {err.message}" if err else None,
        filters={"status": status_filter},
    )
    view.filter_options = {"status": status_options()}
    return view


@router.get("/new", response_model=FormView)
def new_dispute_form(record_id: str | None = Query(default=None, alias="recordId")):
    return FormView(
        title="File a Dispute",
        values=DisputeForm(record_id=record_id or "").model_dump(),
        error=None if record_id else "No appraisal record specified. Please go back and try again.",
        submit_href="/performance/disputes",
    )


@router.post("", response_model=FormResult, status_code=status.HTTP_201_CREATED)
async def file_dispute(
    payload: DisputeForm,
    api: PerformanceApi = Depends(get_api_client),
):
    try:
        created = await api.post("/performance/disputes", payload.to_payload())
    except (ApiError, FormValidationError) as e:
        raise to_http_exception(e, "Failed to submit dispute")

    logger.info("Dispute filed against appraisal record %s", payload.record_id)
    return FormResult(redirect_to="/performance/my-appraisals", message="Dispute submitted", data=created)


@router.get("/{dispute_id}", response_model=DetailView)
async def get_dispute(dispute_id: str, api: PerformanceApi = Depends(get_api_client)):
    try:
        dispute = parse_one(Dispute, await api.get(f"/performance/disputes/{dispute_id}"))
    except ApiError as e:
        raise to_http_exception(e, "Failed to load dispute")

    item = dispute.model_dump(mode="json")
    item["employee_name"] = dispute.employee_name
    actions = []
    if is_resolvable(dispute.status):
        item["resolution_form"] = ResolutionForm.from_dispute(dispute).model_dump()
        item["resolution_actions"] = [Option(value="APPROVE", label="Approve").model_dump(),
                                      Option(value="REJECT", label="Reject").model_dump()]
        actions.append(
            RowAction(label="Resolve", href=f"/performance/disputes/{dispute_id}/resolve", method="POST")
        )

    return DetailView(
        title="Dispute Resolution",
        subtitle=f"Employee: {dispute.employee_name}",
        item=item,
        badge=dispute_badge(dispute.status),
        actions=actions,
        back_href="/performance/disputes",
    )


@router.post("/{dispute_id}/resolve", response_model=FormResult)
async def resolve_dispute(
    dispute_id: str,
    payload: ResolutionForm,
    api: PerformanceApi = Depends(get_api_client),
):
    try:
        result = await api.post(f"/performance/disputes/{dispute_id}/resolve", payload.to_payload())
    except (ApiError, FormValidationError) as e:
        raise to_http_exception(e, "Failed to resolve dispute")

    logger.info("Resolved dispute %s (%s)", dispute_id, payload.action)
    return FormResult(redirect_to="/performance/disputes", message="Dispute resolved", data=result)
