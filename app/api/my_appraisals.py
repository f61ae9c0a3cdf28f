from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from app.core.api_client import PerformanceApi, get_api_client
from app.core.app_logger import get_logger
from app.core.errors import ApiError, to_http_exception
from app.core.fetcher import fetch_list, parse_list, parse_one
from app.core.resource_list import ActionSpec, ColumnSpec, ResourceList, date_text
from app.core.security import get_current_user_id
from app.core.status import AssignmentStatus, can_acknowledge, can_file_dispute, info_badge
from app.schemas.appraisal import AppraisalRecord, score_text
from app.schemas.forms import AcknowledgeForm
from app.schemas.views import DetailView, FormResult, RowAction, TableView

router = APIRouter(prefix="/performance/my-appraisals", tags=["my-appraisals"])

logger = get_logger("my_appraisals")


def _cycle_name(r: AppraisalRecord) -> str:
    a = r.assignment
    return (a.cycle.name if a and a.cycle else None) or "N/A"


def _template_name(r: AppraisalRecord) -> str:
    a = r.assignment
    return (a.template.name if a and a.template else None) or "N/A"


MY_APPRAISAL_LIST = ResourceList(
    title="My Appraisals",
    subtitle="View your published performance appraisals",
    columns=(
        ColumnSpec("cycle", "Cycle", _cycle_name),
        ColumnSpec("template", "Template", _template_name),
        ColumnSpec("total_score", "Score", lambda r: score_text(r.total_score)),
        ColumnSpec("overall_rating_label", "Rating", lambda r: r.overall_rating_label or "N/A"),
        ColumnSpec("published_at", "Published", lambda r: date_text(r.published_at)),
    ),
    actions=(
        ActionSpec("View", lambda r: f"/performance/my-appraisals/{r.id}"),
    ),
    badge=lambda r: info_badge(r.overall_rating_label),
    empty_message="No published appraisals found.",
)


@router.get("", response_model=TableView)
async def list_my_appraisals(
    user_id: str = Depends(get_current_user_id),
    api: PerformanceApi = Depends(get_api_client),
):
    rows, err = await fetch_list(api, f"/performance/records/employee/{user_id}")
    published = [r for r in parse_list(AppraisalRecord, rows) if r.status == AssignmentStatus.PUBLISHED.value]
    return MY_APPRAISAL_LIST.render(
        published,
        error=f"Failed to load appraisals: {err.message}" if err else None,
    )


@router.get("/{record_id}", response_model=DetailView)
async def get_my_appraisal(record_id: str, api: PerformanceApi = Depends(get_api_client)):
    try:
        record = parse_one(AppraisalRecord, await api.get(f"/performance/records/{record_id}/view"))
    except ApiError as e:
        raise to_http_exception(e, "Failed to load appraisal")

    actions = []
    if can_acknowledge(record):
        actions.append(
            RowAction(label="Acknowledge", href=f"/performance/my-appraisals/{record_id}/acknowledge", method="POST")
        )
    if can_file_dispute(record, now=datetime.now(timezone.utc)):
        actions.append(
            RowAction(label="File Dispute", href=f"/performance/disputes/new?recordId={record_id}")
        )

    return DetailView(
        title="Performance Appraisal",
        subtitle=f"{_cycle_name(record)} | {_template_name(record)}",
        item=record.model_dump(mode="json"),
        badge=info_badge(record.overall_rating_label),
        actions=actions,
        back_href="/performance/my-appraisals",
    )


@router.post("/{record_id}/acknowledge", response_model=FormResult)
async def acknowledge_appraisal(
    record_id: str,
    payload: AcknowledgeForm,
    api: PerformanceApi = Depends(get_api_client),
):
    try:
        result = await api.post(f"/performance/records/{record_id}/acknowledge", payload.to_payload())
    except ApiError as e:
        raise to_http_exception(e, "Failed to acknowledge appraisal")

    logger.info("Acknowledged appraisal record %s", record_id)
    return FormResult(
        redirect_to=f"/performance/my-appraisals/{record_id}",
        message="Appraisal acknowledged",
        data=result,
    )
