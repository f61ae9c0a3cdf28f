from fastapi import APIRouter, Depends, Query, status
from pydantic import ValidationError

from app.core.api_client import PerformanceApi, get_api_client
from app.core.app_logger import get_logger
from app.core.errors import ApiError, FormValidationError, to_http_exception
from app.core.fetcher import fetch_list, parse_list, parse_one
from app.core.forms import apply_row_edit
from app.core.resource_list import ActionSpec, ColumnSpec, ResourceList
from app.core.status import CYCLE_TYPE_LABELS
from app.schemas.forms import CriterionRow, RowEdit, TemplateForm
from app.schemas.template import Template
from app.schemas.views import Badge, DetailView, FormResult, FormView, Option, RowAction, TableView

router = APIRouter(prefix="/performance/templates", tags=["templates"])

logger = get_logger("templates")


def _active_badge(t: Template) -> Badge:
    if t.is_active:
        return Badge(label="Active", css_class="badge-success")
    return Badge(label="Inactive", css_class="badge-error")


TEMPLATE_LIST = ResourceList(
    title="Appraisal Templates",
    subtitle="Manage standardized appraisal templates and rating scales",
    columns=(
        ColumnSpec("name", "Name", lambda t: t.name),
        ColumnSpec("template_type", "Type", lambda t: t.template_type),
        ColumnSpec("rating_scale", "Rating Scale", lambda t: t.scale_label),
        ColumnSpec("criteria", "Criteria", lambda t: len(t.criteria)),
        ColumnSpec("status", "Status", lambda t: "Active" if t.is_active else "Inactive"),
    ),
    actions=(
        ActionSpec("View", lambda t: f"/performance/templates/{t.id}"),
        ActionSpec("Delete", lambda t: f"/performance/templates/{t.id}", method="DELETE"),
    ),
    badge=_active_badge,
    create_href="/performance/templates/new",
    empty_message="No templates found. Create your first template to get started.",
)


def _type_options() -> dict[str, list[Option]]:
    return {"template_types": [Option(value=k.value, label=v) for k, v in CYCLE_TYPE_LABELS.items()]}


@router.get("", response_model=TableView)
async def list_templates(
    active_only: bool = Query(default=False, description="Only active templates"),
    api: PerformanceApi = Depends(get_api_client),
):
    params = {"activeOnly": "true"} if active_only else None
    rows, err = await fetch_list(api, "/performance/templates", params)
    return TEMPLATE_LIST.render(
        parse_list(Template, rows),
        error=f"Failed to load templates: {err.message}" if err else None,
    )


@router.get("/new", response_model=FormView)
def new_template_form():
    return FormView(
        title="Create Appraisal Template",
        values=TemplateForm().model_dump(),
        options=_type_options(),
        submit_href="/performance/templates",
    )


@router.post("/form/criteria", response_model=TemplateForm)
def edit_criteria_rows(form: TemplateForm, edit: RowEdit):
    """Add, change or remove one criterion row of an unsaved template form."""
    try:
        if edit.op == "add":
            # a new criterion must be identifiable before it joins the list
            row = CriterionRow(**(edit.value or {}))
            if not row.key.strip() or not row.title.strip():
                raise FormValidationError("Key and title are required for criteria")
            edit = edit.model_copy(update={"value": row.model_dump()})
        rows = apply_row_edit(
            [c.model_dump() for c in form.criteria],
            edit.op,
            edit.index,
            edit.field,
            edit.value,
            fields=CriterionRow.model_fields,
        )
        return form.model_copy(update={"criteria": [CriterionRow(**r) for r in rows]})
    except (FormValidationError, ValidationError) as e:
        raise to_http_exception(e)


@router.post("", response_model=FormResult, status_code=status.HTTP_201_CREATED)
async def create_template(
    payload: TemplateForm,
    api: PerformanceApi = Depends(get_api_client),
):
    try:
        payload.validate_required()
        created = await api.post("/performance/templates", payload.to_payload())
    except (ApiError, FormValidationError) as e:
        raise to_http_exception(e, "Failed to create template")

    logger.info("Created template %r with %d criteria", payload.name, len(payload.criteria))
    return FormResult(redirect_to="/performance/templates", message="Template created", data=created)


@router.get("/{template_id}", response_model=DetailView)
async def get_template(template_id: str, api: PerformanceApi = Depends(get_api_client)):
    try:
        template = parse_one(Template, await api.get(f"/performance/templates/{template_id}"))
    except ApiError as e:
        raise to_http_exception(e, "Failed to load template")

    return DetailView(
        title=template.name,
        subtitle=template.description,
        item=template.model_dump(mode="json"),
        badge=_active_badge(template),
        actions=[
            RowAction(label="Edit", href=f"/performance/templates/{template_id}/edit"),
            RowAction(label="Delete", href=f"/performance/templates/{template_id}", method="DELETE"),
        ],
        back_href="/performance/templates",
    )


@router.get("/{template_id}/edit", response_model=FormView)
async def edit_template_form(template_id: str, api: PerformanceApi = Depends(get_api_client)):
    try:
        template = parse_one(Template, await api.get(f"/performance/templates/{template_id}"))
    except ApiError as e:
        raise to_http_exception(e, "Failed to load template")

    return FormView(
        title="Edit Appraisal Template",
        values=TemplateForm.from_template(template).model_dump(),
        options=_type_options(),
        submit_href=f"/performance/templates/{template_id}",
        submit_method="PUT",
    )


@router.put("/{template_id}", response_model=FormResult)
async def update_template(
    template_id: str,
    payload: TemplateForm,
    api: PerformanceApi = Depends(get_api_client),
):
    try:
        payload.validate_required()
        updated = await api.put(f"/performance/templates/{template_id}", payload.to_payload())
    except (ApiError, FormValidationError) as e:
        raise to_http_exception(e, "Failed to update template")

    logger.info("Updated template %s", template_id)
    return FormResult(redirect_to=f"/performance/templates/{template_id}", message="Template updated", data=updated)


@router.delete("/{template_id}", response_model=FormResult)
async def delete_template(template_id: str, api: PerformanceApi = Depends(get_api_client)):
    try:
        await api.delete(f"/performance/templates/{template_id}")
    except ApiError as e:
        raise to_http_exception(e, "Failed to delete template")

    logger.info("Deleted template %s", template_id)
    return FormResult(redirect_to="/performance/templates", message="Template deleted")
