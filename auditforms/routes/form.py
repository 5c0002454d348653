"""
Form routes - CRUD operations and the public render model
"""
from fastapi import APIRouter, HTTPException, status, Depends, Query
from typing import List, Optional
from datetime import timedelta
from auditforms.models.form import FormCreate, FormUpdate, FormResponse, FormStats
from auditforms.config.settings import settings
from auditforms.config.database import Collections
from auditforms.database.db_operations import to_object_id
from auditforms.services.access import can_manage_form
from auditforms.services.builtin_forms import get_builtin_form
from auditforms.services.container import Services, get_services
from auditforms.services.renderer import build_render_model, needs_reference_data
from auditforms.services.schema_validator import load_schema
from auditforms.utils.helpers import serialize_doc, serialize_docs, utcnow
from auditforms.utils.auth import get_current_user

router = APIRouter(prefix="/forms", tags=["Forms"])


async def _get_managed_form(services: Services, form_id: str, current_user: dict) -> dict:
    form = await services.db_ops.get_by_id(Collections.FORMS, form_id)
    if not form:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Form not found"
        )
    if not can_manage_form(current_user, form):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Permission denied"
        )
    return form


@router.post("/", response_model=FormResponse, status_code=status.HTTP_201_CREATED)
async def create_form(
    form: FormCreate,
    current_user: dict = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Create a new form owned by the caller"""
    form_dict = form.model_dump(by_alias=True)
    form_dict['createdById'] = current_user["sub"]
    form_dict['submissions'] = 0

    created_form = await services.db_ops.create(Collections.FORMS, form_dict)
    return serialize_doc(created_form)


@router.get("/", response_model=List[FormResponse])
async def get_forms(
    skip: int = 0,
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, le=settings.MAX_PAGE_SIZE),
    current_user: dict = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Get all forms, newest first"""
    forms = await services.db_ops.get_all(
        Collections.FORMS, skip=skip, limit=limit, sort=[("created_at", -1)]
    )
    return serialize_docs(forms)


@router.get("/stats", response_model=FormStats)
async def get_form_stats(
    current_user: dict = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Dashboard counters"""
    week_ago = utcnow() - timedelta(days=7)
    return FormStats(
        totalForms=await services.db_ops.count(Collections.FORMS),
        activeForms=await services.db_ops.count(Collections.FORMS, {"isActive": True}),
        totalSubmissions=await services.db_ops.count(Collections.SUBMISSIONS),
        recentSubmissions=await services.db_ops.count(
            Collections.SUBMISSIONS, {"created_at": {"$gte": week_ago}}
        ),
    )


# ─── Public Endpoints (No Auth Required) ──────────────────────────────────────

@router.get("/public/{form_id}")
async def get_public_form(
    form_id: str,
    layout: Optional[str] = None,
    services: Services = Depends(get_services),
):
    """Render model for a built-in form or an active stored form"""
    builtin = get_builtin_form(form_id)
    if builtin is not None:
        schema = builtin.schema
        title, description = builtin.title, builtin.description
        presentation = dict(builtin.presentation)
    else:
        form = None
        if to_object_id(form_id) is not None:
            form = await services.db_ops.get_by_id(Collections.FORMS, form_id)
        if not form or not form.get("isActive", True):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Form not found or is inactive"
            )
        schema = load_schema(form.get("schema"))
        title, description = form["title"], form.get("description")
        presentation = {}

    if layout:
        presentation["layout"] = layout
    reference = await services.gateway.fetch(**needs_reference_data(schema))
    return build_render_model(form_id, title, description, schema, reference, presentation)


# ─── Owner / Admin Endpoints ──────────────────────────────────────────────────

@router.get("/{form_id}", response_model=FormResponse)
async def get_form(
    form_id: str,
    current_user: dict = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Get form by ID"""
    form = await services.db_ops.get_by_id(Collections.FORMS, form_id)
    if not form:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Form not found"
        )
    return serialize_doc(form)


@router.patch("/{form_id}", response_model=FormResponse)
async def update_form(
    form_id: str,
    form_update: FormUpdate,
    current_user: dict = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Partially update title, description, isActive or schema"""
    await _get_managed_form(services, form_id, current_user)
    update_data = form_update.model_dump(exclude_unset=True, by_alias=True)
    if form_update.form_schema is not None:
        update_data["schema"] = form_update.form_schema.model_dump()

    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update"
        )

    updated_form = await services.db_ops.update(Collections.FORMS, form_id, update_data)
    if not updated_form:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Form not found"
        )
    return serialize_doc(updated_form)


@router.delete("/{form_id}")
async def delete_form(
    form_id: str,
    current_user: dict = Depends(get_current_user),
    services: Services = Depends(get_services),
):
    """Delete a form together with its submissions"""
    await _get_managed_form(services, form_id, current_user)
    await services.db_ops.delete_many(Collections.SUBMISSIONS, {"form_id": form_id})
    await services.db_ops.delete(Collections.FORMS, form_id)
    return {"success": True}
