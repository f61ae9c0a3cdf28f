from collections import Counter

from fastapi import APIRouter, Depends, Query

from app.core.api_client import PerformanceApi, get_api_client
from app.core.app_logger import get_logger
from app.core.errors import ApiError
from app.core.fetcher import as_list, fetch_list, gather_settled, parse_list
from app.core.status import COMPLETED_STATUSES, AssignmentStatus
from app.schemas.assignment import Assignment
from app.schemas.cycle import Cycle
from app.schemas.stats import CycleStats, DashboardView, HomeView
from app.schemas.template import Template
from app.schemas.views import Option

router = APIRouter(prefix="/performance", tags=["dashboard"])

logger = get_logger("dashboard")

SECTIONS = [
    Option(value="/performance/dashboard", label="Dashboard"),
    Option(value="/performance/cycles", label="Appraisal Cycles"),
    Option(value="/performance/templates", label="Appraisal Templates"),
    Option(value="/performance/assignments", label="Assignments"),
    Option(value="/performance/evaluations", label="My Evaluations"),
    Option(value="/performance/publish", label="Publish Appraisals"),
    Option(value="/performance/my-appraisals", label="My Appraisals"),
    Option(value="/performance/disputes", label="Disputes"),
]


def compute_stats(assignments: list[Assignment]) -> CycleStats:
    """
    Count assignments per status. Completion counts SUBMITTED, PUBLISHED and
    ACKNOWLEDGED as done.
    """
    total = len(assignments)
    by_status = Counter(a.status for a in assignments)
    done = sum(by_status.get(s.value, 0) for s in COMPLETED_STATUSES)
    completion_rate = (done / total * 100) if total > 0 else 0.0

    return CycleStats(
        total_assignments=total,
        not_started=by_status.get(AssignmentStatus.NOT_STARTED.value, 0),
        in_progress=by_status.get(AssignmentStatus.IN_PROGRESS.value, 0),
        submitted=by_status.get(AssignmentStatus.SUBMITTED.value, 0),
        published=by_status.get(AssignmentStatus.PUBLISHED.value, 0),
        acknowledged=by_status.get(AssignmentStatus.ACKNOWLEDGED.value, 0),
        completion_rate=round(completion_rate, 2),
    )


@router.get("", response_model=HomeView)
async def home(api: PerformanceApi = Depends(get_api_client)):
    cycles_res, templates_res = await gather_settled(
        api.get("/performance/cycles"),
        api.get("/performance/templates", params={"activeOnly": "true"}),
    )

    failures = []
    cycles: list[Cycle] = []
    templates: list[Template] = []
    if isinstance(cycles_res, ApiError):
        failures.append(f"cycles ({cycles_res.message})")
    else:
        cycles = parse_list(Cycle, as_list(cycles_res))
    if isinstance(templates_res, ApiError):
        failures.append(f"templates ({templates_res.message})")
    else:
        templates = parse_list(Template, as_list(templates_res))

    if failures:
        logger.warning("Home page degraded: %s", ", ".join(failures))

    return HomeView(
        sections=SECTIONS,
        cycles=[c.model_dump(mode="json") for c in cycles],
        templates=[t.model_dump(mode="json") for t in templates],
        error=f"Failed to load {', '.join(failures)}" if failures else None,
    )


@router.get("/dashboard", response_model=DashboardView)
async def dashboard(
    cycle_id: str | None = Query(default=None, description="Cycle to summarize; defaults to the first cycle"),
    api: PerformanceApi = Depends(get_api_client),
):
    rows, err = await fetch_list(api, "/performance/cycles")
    if err:
        return DashboardView(cycles=[], error=f"Failed to load cycles: {err.message}")

    cycles = [c for c in parse_list(Cycle, rows) if c.id]
    options = [Option(value=c.id, label=c.name or c.id) for c in cycles]
    selected = cycle_id or (cycles[0].id if cycles else None)
    if selected is None:
        return DashboardView(cycles=options)

    assignment_rows, err = await fetch_list(api, f"/performance/cycles/{selected}/assignments")
    if err:
        return DashboardView(
            cycles=options,
            selected_cycle_id=selected,
            error=f"Failed to load assignments for this cycle: {err.message}",
        )

    return DashboardView(
        cycles=options,
        selected_cycle_id=selected,
        stats=compute_stats(parse_list(Assignment, assignment_rows)),
    )
