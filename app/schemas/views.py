from typing import Any

from pydantic import BaseModel


class Option(BaseModel):
    value: str
    label: str


class Badge(BaseModel):
    label: str
    css_class: str


class Column(BaseModel):
    key: str
    label: str


class RowAction(BaseModel):
    label: str
    href: str
    method: str = "GET"


class Row(BaseModel):
    id: str | None
    cells: dict[str, Any]
    badge: Badge | None = None
    actions: list[RowAction] = []


class TableView(BaseModel):
    """View state of a list page: rows ready to render plus an optional page banner."""
    title: str
    subtitle: str | None = None
    columns: list[Column]
    rows: list[Row]
    total: int
    empty_message: str
    error: str | None = None
    filters: dict[str, str | None] = {}
    filter_options: dict[str, list[Option]] = {}
    create_href: str | None = None


class DetailView(BaseModel):
    title: str
    subtitle: str | None = None
    item: dict[str, Any]
    badge: Badge | None = None
    actions: list[RowAction] = []
    back_href: str | None = None


class FormView(BaseModel):
    """Initial state of an editable form plus the option lists it needs."""
    title: str
    values: dict[str, Any]
    options: dict[str, list[Option]] = {}
    error: str | None = None
    submit_href: str
    submit_method: str = "POST"


class FormResult(BaseModel):
    ok: bool = True
    redirect_to: str | None = None
    message: str | None = None
    data: Any = None


class EvaluationView(BaseModel):
    """A manager's evaluation form for one assignment."""
    assignment_id: str
    employee_name: str
    cycle_name: str
    template_name: str
    criteria: list[dict]
    rating_scale: dict | None = None
    record_id: str | None = None
    record_status: str | None = None
    badge: Badge | None = None
    values: dict[str, Any]
    draft_href: str
    submit_href: str
