from fastapi import APIRouter, Depends

from app.core.api_client import PerformanceApi, get_api_client
from app.core.app_logger import get_logger
from app.core.errors import ApiError, to_http_exception
from app.core.fetcher import as_list, fetch_list, gather_settled, parse_list, parse_one
from app.core.resource_list import ActionSpec, ColumnSpec, ResourceList, date_text
from app.core.status import AssignmentStatus, info_badge
from app.schemas.appraisal import AppraisalRecord, score_text
from app.schemas.assignment import Assignment
from app.schemas.cycle import Cycle
from app.schemas.common import Ref
from app.schemas.views import FormResult, TableView

router = APIRouter(prefix="/performance/publish", tags=["publish"])

logger = get_logger("publish")


def _employee(r: AppraisalRecord) -> str:
    a = r.assignment
    return a.employee.full_name if a and a.employee else "Unknown"


PUBLISH_LIST = ResourceList(
    title="Publish Appraisals",
    subtitle="Review and publish manager-submitted appraisals to employees",
    columns=(
        ColumnSpec("employee", "Employee", _employee),
        ColumnSpec("cycle", "Cycle", lambda r: (r.assignment.cycle.name if r.assignment and r.assignment.cycle else None) or "N/A"),
        ColumnSpec("total_score", "Score", lambda r: score_text(r.total_score)),
        ColumnSpec("overall_rating_label", "Rating", lambda r: r.overall_rating_label or "N/A"),
        ColumnSpec("manager_submitted_at", "Submitted", lambda r: date_text(r.manager_submitted_at)),
    ),
    actions=(
        ActionSpec("Review", lambda r: f"/performance/evaluations/{r.assignment.id}",
                   visible=lambda r: bool(r.assignment and r.assignment.id)),
        ActionSpec("Publish", lambda r: f"/performance/publish/{r.id}", method="POST"),
    ),
    badge=lambda r: info_badge(r.overall_rating_label),
    empty_message="No manager-submitted appraisals found waiting for publication.",
)


async def _pending_for_assignment(
    api: PerformanceApi,
    assignment: Assignment,
    cycle: Cycle,
) -> AppraisalRecord | None:
    """The assignment's latest record, if a manager has submitted it and HR has not published it yet."""
    record_id = assignment.latest_appraisal_id
    if not record_id:
        detail = parse_one(Assignment, await api.get(f"/performance/assignments/{assignment.id}"))
        record_id = detail.latest_appraisal_id
    if not record_id:
        return None

    record = parse_one(AppraisalRecord, await api.get(f"/performance/records/{record_id}"))
    if record.status != AssignmentStatus.MANAGER_SUBMITTED.value:
        return None

    # list endpoints do not always populate the cycle; fall back to the one we walked
    if assignment.cycle is None or not assignment.cycle.name:
        assignment = assignment.model_copy(update={"cycle": Ref(id=cycle.id, name=cycle.name)})
    return record.model_copy(update={"assignment": assignment})


async def load_pending_records(api: PerformanceApi) -> tuple[list[AppraisalRecord], str | None]:
    rows, err = await fetch_list(api, "/performance/cycles")
    if err:
        return [], f"Failed to load appraisals: {err.message}"
    cycles = [c for c in parse_list(Cycle, rows) if c.id]

    per_cycle = await gather_settled(
        *(api.get(f"/performance/cycles/{c.id}/assignments") for c in cycles)
    )

    lookups = []
    for cycle, result in zip(cycles, per_cycle):
        if isinstance(result, ApiError):
            logger.warning("Skipping cycle %s: %s", cycle.id, result.message)
            continue
        for a in parse_list(Assignment, as_list(result)):
            if a.id and a.status == AssignmentStatus.SUBMITTED.value:
                lookups.append(_pending_for_assignment(api, a, cycle))

    records = []
    for result in await gather_settled(*lookups):
        if isinstance(result, ApiError):
            logger.warning("Skipping unreadable appraisal record: %s", result.message)
        elif result is not None:
            records.append(result)
    return records, None


@router.get("", response_model=TableView)
async def list_pending(api: PerformanceApi = Depends(get_api_client)):
    records, error = await load_pending_records(api)
    return PUBLISH_LIST.render(records, error=error)


@router.post("/{record_id}", response_model=FormResult)
async def publish_record(record_id: str, api: PerformanceApi = Depends(get_api_client)):
    try:
        result = await api.post(f"/performance/records/{record_id}/publish")
    except ApiError as e:
        raise to_http_exception(e, "Failed to publish appraisal")

    logger.info("Published appraisal record %s", record_id)
    return FormResult(
        redirect_to="/performance/publish",
        message="Appraisal published successfully",
        data=result,
    )
