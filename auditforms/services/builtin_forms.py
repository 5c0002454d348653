"""
Built-in store audit forms

These forms are not stored in MongoDB. They are addressed by slug, write
straight to the spreadsheet, and carry their own schema so the public
renderer and the submission pipeline treat them like any other form.
"""
from typing import Dict, Optional

from auditforms.models.form import FormSchema, FormSettings
from auditforms.services.row_layouts import (
    MERCHANDISING_VOL_2_LAYOUT,
    STORE_AUDIT_LAYOUT,
    RowLayout,
)

STORE_AUDIT_STOCK_ITEMS = [
    "Product A - Vitamin C 1000mg",
    "Product B - Multivitamin",
    "Product C - Omega 3",
    "Product D - Probiotics",
    "Product E - Calcium + D3",
    "Product F - Iron Supplement",
    "Product G - Magnesium",
    "Product H - Zinc",
    "Product I - B-Complex",
]

VOL_2_STOCK_ITEMS = [
    "Youvit Adult Multivitamin 7 Day",
    "Youvit Adult Apple Cider 7 Day",
    "Youvit Adult Ezzleep 7 Day",
    "Youvit Kids Multivitamin 7 Day",
    "Youvit Kids Multivitamin 30 Day",
    "Youvit Kids Omega 7 Day",
    "Youvit Kids Omega 30 Day",
    "Youvit Kids Curcuma 7 Day",
    "Youvit Female Beauti+ 7 Day",
    "Youvit Female Collagen 7 Day",
]

VISIBILITY_OPTIONS = [
    "COC Acrylic Adults (MAP Sport)",
    "COC Acrylic Kids (MAP Kids)",
    "Homeshelf Display (MAP Kids)",
    "Standee Kids (Kimia Farma)",
    "Carton Tray Kids (Kimia Farma)",
    "Homeshelf Display (Kimia Farma)",
    "Display COC (Kimia Farma)",
    "Carton Tray Kids (Raja Susu)",
]


class BuiltinForm:
    def __init__(self, slug: str, title: str, description: str, schema: FormSchema,
                 layout: RowLayout, presentation: Dict):
        self.slug = slug
        self.title = title
        self.description = description
        self.schema = schema
        self.layout = layout
        self.presentation = presentation


def _audit_schema(stock_items, with_visibility: bool) -> FormSchema:
    fields = [
        {"id": "audit_date", "type": "date", "label": "Audit Date", "required": True},
        {"id": "employee_name", "type": "text", "label": "Employee Name", "required": True,
         "placeholder": "Type to search employee..."},
        {"id": "store_location", "type": "text", "label": "Store Location", "required": True,
         "placeholder": "Type to search store..."},
    ]
    if with_visibility:
        fields.append({"id": "visibility", "type": "select", "label": "Visibility",
                       "required": True, "options": VISIBILITY_OPTIONS})
    fields += [
        {"id": "before_image", "type": "file", "label": "Before Image"},
        {"id": "after_image", "type": "file", "label": "After Image"},
        {"id": "out_of_stock", "type": "checkbox", "label": "Out of Stock Items",
         "multiple": True, "options": [{"value": item, "label": item} for item in stock_items]},
        {"id": "notes", "type": "textarea", "label": "Notes",
         "placeholder": "Maximum 200 characters"},
    ]
    return FormSchema.model_validate({
        "fields": fields,
        "settings": FormSettings(allowMultipleSubmissions=True, requireAuth=False).model_dump(),
    })


STORE_AUDIT = BuiltinForm(
    "merchandising-day",
    "Store Audit Form",
    "Merchandising day store audit",
    _audit_schema(STORE_AUDIT_STOCK_ITEMS, with_visibility=False),
    STORE_AUDIT_LAYOUT,
    {"layout": "card", "submitLabel": "Submit Audit"},
)

MERCHANDISING_VOL_2 = BuiltinForm(
    "merchandising-day-vol-2",
    "Merchandising Day Vol. 2",
    "Store visit report with visibility check",
    _audit_schema(VOL_2_STOCK_ITEMS, with_visibility=True),
    MERCHANDISING_VOL_2_LAYOUT,
    {"layout": "apple", "submitLabel": "Submit"},
)

BUILTIN_FORMS = {
    "store-audit": STORE_AUDIT,
    STORE_AUDIT.slug: STORE_AUDIT,
    MERCHANDISING_VOL_2.slug: MERCHANDISING_VOL_2,
}


def get_builtin_form(slug: str) -> Optional[BuiltinForm]:
    return BUILTIN_FORMS.get(slug)
