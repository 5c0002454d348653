"""
Public Form Renderer

Builds the render model a public page needs: fields in display order, their
initial values, and choice lists for the employee / store typeahead inputs.
The visual variant is a presentation option, not a separate form.
"""
from typing import Any, Dict, Optional

from auditforms.models.form import FieldType, FormSchema
from auditforms.models.reference import ReferenceData
from auditforms.services.normalizer import EMPLOYEE_FIELD, STORE_FIELD

LAYOUTS = ("card", "apple", "simple")

DEFAULT_PRESENTATION = {
    "layout": "card",
    "showProgressBar": False,
    "submitLabel": "Submit",
}


def initial_value(field) -> Any:
    if field.type == FieldType.CHECKBOX:
        return [] if field.multiple else False
    return ""


def build_presentation(schema: FormSchema, overrides: Optional[Dict] = None) -> Dict:
    presentation = dict(DEFAULT_PRESENTATION)
    if schema.settings is not None:
        presentation["showProgressBar"] = schema.settings.showProgressBar
    for key, value in (overrides or {}).items():
        if value is not None:
            presentation[key] = value
    if presentation["layout"] not in LAYOUTS:
        presentation["layout"] = DEFAULT_PRESENTATION["layout"]
    return presentation


def build_render_model(
    form_id: str,
    title: str,
    description: Optional[str],
    schema: FormSchema,
    reference: Optional[ReferenceData] = None,
    presentation: Optional[Dict] = None,
) -> Dict[str, Any]:
    reference = reference or ReferenceData()
    fields = []
    for field in schema.fields:
        rendered = field.model_dump(mode="json", exclude_none=True)
        if field.id == EMPLOYEE_FIELD:
            rendered["choices"] = [e.name for e in reference.employees]
        elif field.id == STORE_FIELD:
            rendered["choices"] = [s.display_name for s in reference.stores]
        fields.append(rendered)

    return {
        "formId": form_id,
        "title": title,
        "description": description,
        "presentation": build_presentation(schema, presentation),
        "fields": fields,
        "initialValues": {f.id: initial_value(f) for f in schema.fields},
    }


def needs_reference_data(schema: FormSchema) -> Dict[str, bool]:
    ids = {f.id for f in schema.fields}
    return {"employees": EMPLOYEE_FIELD in ids, "stores": STORE_FIELD in ids}
