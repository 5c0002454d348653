"""
Form model and schemas for dynamic form builder
"""
from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Union
from datetime import datetime
from enum import Enum


class FieldType(str, Enum):
    TEXT = "text"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    FILE = "file"
    DATE = "date"
    EMAIL = "email"
    NUMBER = "number"


CHOICE_TYPES = (FieldType.SELECT, FieldType.RADIO)


class FieldOption(BaseModel):
    """Rich option used by multi-value checkbox groups"""
    value: str
    label: Optional[str] = None
    helperText: Optional[str] = None


class FieldValidation(BaseModel):
    # Stored with the schema, not enforced by SchemaValidator
    min: Optional[float] = None
    max: Optional[float] = None
    pattern: Optional[str] = None


class FormField(BaseModel):
    id: str = Field(..., min_length=1)
    type: FieldType
    label: str = Field(..., min_length=1)
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[Union[str, FieldOption]]] = None
    multiple: bool = False
    validation: Optional[FieldValidation] = None

    @model_validator(mode="after")
    def choice_fields_need_options(self):
        if self.type in CHOICE_TYPES and not self.options:
            raise ValueError(f"Field '{self.id}' of type {self.type.value} needs at least one option")
        return self


class FormSettings(BaseModel):
    allowMultipleSubmissions: bool = False
    requireAuth: bool = True
    showProgressBar: bool = False


class FormSchema(BaseModel):
    fields: List[FormField] = Field(default_factory=list)
    settings: Optional[FormSettings] = None

    @field_validator("fields")
    @classmethod
    def unique_field_ids(cls, fields: List[FormField]) -> List[FormField]:
        seen = set()
        for field in fields:
            if field.id in seen:
                raise ValueError(f"Duplicate field id '{field.id}'")
            seen.add(field.id)
        return fields


class FormBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    form_schema: FormSchema = Field(alias="schema")
    isActive: bool = True

    class Config:
        populate_by_name = True


class FormCreate(FormBase):
    pass


class FormUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    form_schema: Optional[FormSchema] = Field(None, alias="schema")
    isActive: Optional[bool] = None

    class Config:
        populate_by_name = True

    @field_validator("title", "form_schema", "isActive")
    @classmethod
    def not_null(cls, value, info):
        # description may be cleared; the rest can only be replaced
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return value


class FormResponse(FormBase):
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    createdById: Optional[str] = None
    submissions: int = 0
    created_at: datetime
    updated_at: datetime


class FormStats(BaseModel):
    totalForms: int
    activeForms: int
    totalSubmissions: int
    recentSubmissions: int
