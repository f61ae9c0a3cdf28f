from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Iterable

from app.schemas.views import Badge, Column, Row, RowAction, TableView


def date_text(value: date | datetime | None) -> str:
    if value is None:
        return "-"
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def truncate(text: str | None, limit: int = 60) -> str:
    if not text:
        return ""
    return text if len(text) <= limit else text[:limit] + "..."


@dataclass(frozen=True)
class ColumnSpec:
    key: str
    label: str
    value: Callable[[Any], Any]


@dataclass(frozen=True)
class ActionSpec:
    label: str | Callable[[Any], str]
    href: Callable[[Any], str]
    method: str = "GET"
    visible: Callable[[Any], bool] | None = None

    def build(self, item: Any) -> RowAction | None:
        if self.visible is not None and not self.visible(item):
            return None
        label = self.label(item) if callable(self.label) else self.label
        return RowAction(label=label, href=self.href(item), method=self.method)


@dataclass(frozen=True)
class ResourceList:
    """
    One configurable table: every list page is an instance of this with its
    own columns, row actions and badge mapping.
    """

    title: str
    columns: tuple[ColumnSpec, ...]
    empty_message: str
    subtitle: str | None = None
    actions: tuple[ActionSpec, ...] = ()
    badge: Callable[[Any], Badge] | None = None
    create_href: str | None = None
    filter_fields: dict[str, Callable[[Any], Any]] = field(default_factory=dict)

    def render(
        self,
        items: Iterable[Any],
        *,
        error: str | None = None,
        filters: dict[str, str | None] | None = None,
    ) -> TableView:
        filters = {k: v for k, v in (filters or {}).items() if k in self.filter_fields}
        selected = list(items)
        for name, wanted in filters.items():
            if wanted:
                getter = self.filter_fields[name]
                selected = [i for i in selected if getter(i) == wanted]

        rows = []
        for item in selected:
            actions = [a for a in (spec.build(item) for spec in self.actions) if a is not None]
            rows.append(
                Row(
                    id=getattr(item, "id", None),
                    cells={c.key: c.value(item) for c in self.columns},
                    badge=self.badge(item) if self.badge else None,
                    actions=actions,
                )
            )

        return TableView(
            title=self.title,
            subtitle=self.subtitle,
            columns=[Column(key=c.key, label=c.label) for c in self.columns],
            rows=rows,
            total=len(rows),
            empty_message=self.empty_message,
            error=error,
            filters=filters,
            create_href=self.create_href,
        )
