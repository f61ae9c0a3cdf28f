import json
from datetime import date, datetime
from typing import Any, Iterable, TypeVar

from app.core.errors import FormValidationError

T = TypeVar("T")


def _check_index(rows: list, index: int) -> None:
    if index < 0 or index >= len(rows):
        raise FormValidationError(f"Row {index} does not exist")


def add_row(rows: list[T], row: T) -> list[T]:
    return [*rows, row]


def update_row(rows: list[dict], index: int, field: str, value: Any) -> list[dict]:
    """Replace one field of one row; every other row is carried over unchanged."""
    _check_index(rows, index)
    updated = list(rows)
    updated[index] = {**updated[index], field: value}
    return updated


def remove_row(rows: list[T], index: int) -> list[T]:
    _check_index(rows, index)
    return [r for i, r in enumerate(rows) if i != index]


def join_lines(items: list[str] | None) -> str:
    return "\n".join(items or [])


def split_commas(text: str | None) -> list[str]:
    if not text:
        return []
    return [p.strip() for p in text.split(",") if p.strip()]


def parse_id_list_json(text: str) -> list[str]:
    """JSON array typed into a textarea -> list of ids."""
    try:
        parsed = json.loads(text)
    except ValueError:
        raise FormValidationError("Invalid JSON format for employee IDs")
    if not isinstance(parsed, list):
        raise FormValidationError("Employee IDs must be a JSON array")
    return [str(p) for p in parsed]


def to_date_input(value: date | datetime | str | None) -> str:
    """Value for an <input type=date>: YYYY-MM-DD or empty."""
    if not value:
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).split("T")[0]


def require(values: dict[str, Any], *fields: str) -> None:
    missing = [f for f in fields if not str(values.get(f) or "").strip()]
    if missing:
        raise FormValidationError(f"Missing required field(s): {', '.join(missing)}")


def apply_row_edit(
    rows: list[dict],
    op: str,
    index: int | None = None,
    field: str | None = None,
    value: Any = None,
    blank: dict | None = None,
    fields: Iterable[str] | None = None,
) -> list[dict]:
    """
    One edit on a nested list of form rows:
      add    -> append `blank` (or `value` when given)
      update -> rows[index][field] = value
      remove -> drop rows[index]
    `fields`, when given, limits which row fields an update may set.
    """
    if op == "add":
        return add_row(rows, dict(value) if isinstance(value, dict) else dict(blank or {}))
    if index is None:
        raise FormValidationError(f"'{op}' needs a row index")
    if op == "update":
        if not field:
            raise FormValidationError("'update' needs a field name")
        if fields is not None and field not in fields:
            raise FormValidationError(f"Unknown field: {field}")
        return update_row(rows, index, field, value)
    if op == "remove":
        return remove_row(rows, index)
    raise FormValidationError(f"Unknown row operation: {op}")
