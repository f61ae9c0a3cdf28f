from datetime import date, datetime, timezone
from typing import Annotated, Any

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, model_validator


def split_lines(value: Any) -> list[str]:
    """Newline-delimited text (or a list) -> trimmed, non-empty strings."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        parts = [str(v) for v in value]
    else:
        parts = str(value).split("\n")
    return [p.strip() for p in parts if p.strip()]


def _parse_timestamp(value: Any) -> datetime | None:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        s = str(value).strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        dt = datetime.fromisoformat(s)
    # naive timestamps from the backend are UTC
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _parse_date(value: Any) -> date | None:
    if value in (None, ""):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).split("T")[0])


def _ref_id(value: Any) -> Any:
    if isinstance(value, dict):
        return value.get("_id") or value.get("id")
    return value


Timestamp = Annotated[datetime | None, BeforeValidator(_parse_timestamp)]
DateOnly = Annotated[date | None, BeforeValidator(_parse_date)]
Lines = Annotated[list[str], BeforeValidator(split_lines)]
RefId = Annotated[str | None, BeforeValidator(_ref_id)]


class ApiModel(BaseModel):
    """
    Base for every shape read from the performance API.

    Accepts camelCase (wire) or snake_case (ours) keys, ignores unknown keys
    and treats explicit nulls as "absent" so field defaults apply.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Entity(ApiModel):
    """
    A backend record. References arrive either populated ({"_id": ..., ...})
    or as a bare id string; both parse into the same model.
    """

    id: str | None = Field(default=None, validation_alias=AliasChoices("_id", "id"))

    @model_validator(mode="before")
    @classmethod
    def from_bare_id(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"_id": data}
        return data


class Ref(Entity):
    name: str | None = None


class PersonRef(Entity):
    first_name: str = Field(default="", validation_alias=AliasChoices("firstName", "first_name"))
    last_name: str = Field(default="", validation_alias=AliasChoices("lastName", "last_name"))
    employee_number: str | None = Field(
        default=None, validation_alias=AliasChoices("employeeNumber", "employee_number")
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or "Unknown"


class Department(Entity):
    name: str = ""
    code: str | None = None


def display_name(*people: PersonRef | None) -> str:
    """First populated person wins."""
    for p in people:
        if p is not None and (p.first_name or p.last_name):
            return p.full_name
    return "Unknown"
