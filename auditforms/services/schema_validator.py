"""
Schema Validator

Compiles an ordered list of field definitions into a pydantic model and uses
it to decode submitted records. Each failing field yields exactly one message,
keyed by the field id.
"""
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
    ValidationError,
    create_model,
)

from auditforms.models.form import FieldType, FormField, FormSchema
from auditforms.utils.errors import ConfigurationError, SchemaValidationError
from auditforms.utils.helpers import flatten_file_url

REQUIRED_MESSAGE = "This field is required"
REQUIRED_CHOICE_MESSAGE = "At least one option must be selected"
EMAIL_MESSAGE = "Please enter a valid email address"
NUMBER_MESSAGE = "Please enter a valid number"
UNKNOWN_FIELD_MESSAGE = "Unknown field"

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def _annotation(field: FormField) -> Tuple[Any, Any]:
    """(type, default) pair for one field definition"""
    if field.type == FieldType.CHECKBOX:
        if field.multiple:
            if field.required:
                return Annotated[List[str], Field(min_length=1)], ...
            return List[str], []
        if field.required:
            return Literal[True], ...
        return bool, False

    if field.type == FieldType.EMAIL:
        base = EmailStr
    elif field.type == FieldType.NUMBER:
        base = Annotated[float, Field(allow_inf_nan=False)]
    else:
        base = NonEmptyStr if field.required else str

    if field.required:
        return base, ...
    return Optional[base], None


def _message(field: FormField, error: Dict[str, Any]) -> str:
    kind = error["type"]
    if kind == "missing":
        if field.type == FieldType.CHECKBOX and field.multiple:
            return REQUIRED_CHOICE_MESSAGE
        return REQUIRED_MESSAGE
    if field.type == FieldType.CHECKBOX:
        if kind == "too_short":
            return REQUIRED_CHOICE_MESSAGE
        if kind == "literal_error":
            return REQUIRED_MESSAGE
    if field.type == FieldType.EMAIL and kind == "value_error":
        return EMAIL_MESSAGE
    if field.type == FieldType.NUMBER and (kind.startswith("float") or kind == "finite_number"):
        return NUMBER_MESSAGE
    if kind == "string_too_short":
        return REQUIRED_MESSAGE
    return error["msg"]


def load_schema(raw_schema: Any) -> FormSchema:
    """Load a stored schema document; a malformed one is a configuration error"""
    if isinstance(raw_schema, FormSchema):
        return raw_schema
    try:
        return FormSchema.model_validate(raw_schema or {})
    except ValidationError as exc:
        raise ConfigurationError("Form schema is invalid", details=str(exc)) from exc


class SchemaValidator:
    """Validator derived from a form's field definitions"""

    def __init__(self, fields: List[FormField]):
        self.fields = list(fields)
        self._by_id = {f.id: f for f in self.fields}
        definitions = {}
        for index, field in enumerate(self.fields):
            annotation, default = _annotation(field)
            definitions[f"field_{index}"] = (annotation, Field(default, alias=field.id))
        self.model = create_model(
            "SubmissionRecord",
            __config__=ConfigDict(extra="forbid"),
            **definitions,
        )

    @classmethod
    def from_schema(cls, raw_schema: Any) -> "SchemaValidator":
        return cls(load_schema(raw_schema).fields)

    def _prepare(self, record: Dict[str, Any]) -> Dict[str, Any]:
        prepared = {}
        for key, value in record.items():
            field = self._by_id.get(key)
            if field is not None and field.type == FieldType.FILE:
                value = flatten_file_url(value)
            if field is not None and value in (None, ""):
                continue
            prepared[key] = value
        return prepared

    def validate(self, record: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, str]]:
        """Return (clean_record, errors); errors maps field id to a message"""
        try:
            instance: BaseModel = self.model.model_validate(self._prepare(record or {}))
        except ValidationError as exc:
            errors: Dict[str, str] = {}
            for error in exc.errors():
                key = str(error["loc"][0]) if error["loc"] else "__root__"
                if key in errors:
                    continue
                field = self._by_id.get(key)
                if field is None:
                    errors[key] = UNKNOWN_FIELD_MESSAGE
                else:
                    errors[key] = _message(field, error)
            return {}, errors
        return instance.model_dump(by_alias=True, exclude_none=True), {}

    def decode(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Like validate() but raises SchemaValidationError on any failure"""
        clean, errors = self.validate(record)
        if errors:
            raise SchemaValidationError(errors)
        return clean
