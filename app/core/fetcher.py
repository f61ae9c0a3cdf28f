import asyncio
from typing import Any, Awaitable, Iterable, TypeVar

from pydantic import BaseModel, ValidationError

from app.core.api_client import PerformanceApi
from app.core.app_logger import get_logger
from app.core.errors import ApiError, AuthorizationError, NotFoundError
from app.schemas.assignment import Assignment

logger = get_logger("fetcher")

M = TypeVar("M", bound=BaseModel)

NOT_AUTHORIZED_MESSAGE = "You are not authorized to view {noun}. HR can assign you as a manager."
NOTHING_YET_MESSAGE = "No {noun} found for your account yet."


async def gather_settled(*aws: Awaitable[Any]) -> list[Any]:
    """
    Run awaitables concurrently. Each slot holds the result or the ApiError it
    raised, so one failing call never cancels or hides its siblings.
    Anything that is not an ApiError is a bug and is re-raised.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for r in results:
        if isinstance(r, BaseException) and not isinstance(r, ApiError):
            raise r
    return list(results)


def as_list(data: Any) -> list:
    if data is None:
        return []
    if isinstance(data, list):
        return data
    # some list endpoints wrap their rows
    if isinstance(data, dict):
        for key in ("items", "data", "results"):
            if isinstance(data.get(key), list):
                return data[key]
    return []


def parse_list(model: type[M], rows: Iterable[Any]) -> list[M]:
    out: list[M] = []
    for row in rows:
        try:
            out.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning("Skipping malformed %s row: %s", model.__name__, e.errors()[:1])
    return out


def parse_one(model: type[M], data: Any) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ApiError(f"Unexpected {model.__name__} payload from the performance service", 502) from e


async def fetch_list(
    api: PerformanceApi,
    path: str,
    params: dict[str, Any] | None = None,
) -> tuple[list, ApiError | None]:
    """GET a list; on failure degrade to [] and hand the error back for the banner."""
    try:
        data = await api.get(path, params=params)
    except ApiError as e:
        logger.warning("Degrading %s to an empty list: %s", path, e.message)
        return [], e
    return as_list(data), None


def item_id(item: Any) -> Any:
    if isinstance(item, dict):
        return item.get("_id") or item.get("id")
    return getattr(item, "id", None)


def dedupe_by_id(items: Iterable[Any]) -> list:
    """Keep the first occurrence of each id; rows without an id are kept as-is."""
    seen: set = set()
    out = []
    for item in items:
        key = item_id(item)
        if key is not None:
            if key in seen:
                continue
            seen.add(key)
        out.append(item)
    return out


def describe_failure(errors: list[ApiError], noun: str = "assignments") -> str:
    """
    Turn the failures of a page load into one message:
      - every call refused with 403                  -> not authorized
      - only 403/404 and at least one 404             -> nothing exists yet
      - anything else (network, 5xx, ...)             -> generic failure
    """
    if errors and all(isinstance(e, AuthorizationError) for e in errors):
        return NOT_AUTHORIZED_MESSAGE.format(noun=noun)
    if errors and all(isinstance(e, (AuthorizationError, NotFoundError)) for e in errors):
        return NOTHING_YET_MESSAGE.format(noun=noun)
    detail = next((e.message for e in errors if e.message), "")
    return f"Failed to load {noun}: {detail}" if detail else f"Failed to load {noun}"


async def load_user_assignments(
    api: PerformanceApi,
    user_id: str,
    cycle_id: str | None = None,
) -> tuple[list[Assignment], str | None]:
    """
    Assignments visible to a user.

    With a cycle filter the cycle's own list is used. Without one, the user's
    manager-side and employee-side lists are fetched in parallel, concatenated
    (manager first) and de-duplicated by id. Returns (assignments, error message).
    """
    if cycle_id:
        rows, err = await fetch_list(api, f"/performance/cycles/{cycle_id}/assignments")
        return parse_list(Assignment, rows), (describe_failure([err]) if err else None)

    results = await gather_settled(
        api.get(f"/performance/assignments/manager/{user_id}"),
        api.get(f"/performance/assignments/employee/{user_id}"),
    )

    merged: list = []
    errors: list[ApiError] = []
    for r in results:
        if isinstance(r, ApiError):
            errors.append(r)
        else:
            merged.extend(as_list(r))

    if len(errors) == len(results):
        return [], describe_failure(errors)
    if errors:
        logger.info("Partial assignment load for %s: %d of %d sources failed", user_id, len(errors), len(results))

    return dedupe_by_id(parse_list(Assignment, merged)), None
