from pydantic import BaseModel

from app.schemas.views import Option


class CycleStats(BaseModel):
    """Assignment progress for one appraisal cycle"""
    total_assignments: int = 0
    not_started: int = 0
    in_progress: int = 0
    submitted: int = 0
    published: int = 0
    acknowledged: int = 0
    completion_rate: float = 0.0  # (submitted + published + acknowledged) / total, as a percentage


class DashboardView(BaseModel):
    cycles: list[Option]
    selected_cycle_id: str | None = None
    stats: CycleStats | None = None
    error: str | None = None


class HomeView(BaseModel):
    """Landing page: section links plus recent cycles and active templates."""
    sections: list[Option]
    cycles: list[dict]
    templates: list[dict]
    error: str | None = None
