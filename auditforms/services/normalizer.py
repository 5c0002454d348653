"""
Submission Normalizer

Trims free-text values and checks employee_name / store_location against the
spreadsheet allow-lists. Matching uses normalize_key(); the stored value is the
caller's own text, only trimmed.
"""
import logging
from typing import Any, Dict, Optional, Set

from auditforms.config.settings import settings
from auditforms.models.reference import ReferenceData
from auditforms.utils.errors import (
    AppError,
    FieldValidationError,
    ReferenceValidationUnavailable,
)
from auditforms.services.google_clients import GoogleApiError
from auditforms.utils.helpers import normalize_key

logger = logging.getLogger(__name__)

EMPLOYEE_FIELD = "employee_name"
STORE_FIELD = "store_location"
NOTES_FIELD = "notes"


def employee_keys(reference: ReferenceData) -> Set[str]:
    return {normalize_key(e.name) for e in reference.employees}


def store_keys(reference: ReferenceData) -> Set[str]:
    keys = set()
    for store in reference.stores:
        keys.add(normalize_key(store.name))
        if store.location:
            keys.add(normalize_key(f"{store.name} - {store.location}"))
    return keys


def _supplied(data: Dict[str, Any], field: str) -> bool:
    return data.get(field) is not None


def _trimmed_text(value: Any, field: str, label: str) -> str:
    if not isinstance(value, str):
        raise FieldValidationError(field, f"{label} must be text")
    trimmed = value.strip()
    if not trimmed:
        raise FieldValidationError(field, f"{label} is required")
    return trimmed


class SubmissionNormalizer:
    def __init__(self, gateway, notes_max_length: Optional[int] = None):
        self.gateway = gateway
        self.notes_max_length = notes_max_length or settings.NOTES_MAX_LENGTH

    async def _reference(self, need_employees: bool, need_stores: bool) -> ReferenceData:
        try:
            return await self.gateway.fetch(employees=need_employees, stores=need_stores)
        except (AppError, GoogleApiError) as e:
            logger.error("❌ Reference data lookup failed: %s", e)
            raise ReferenceValidationUnavailable(
                "Failed to validate employee and store details. Please try again."
            ) from e

    async def normalize(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of data with constrained fields checked and trimmed"""
        result = dict(data)
        need_employees = _supplied(data, EMPLOYEE_FIELD)
        need_stores = _supplied(data, STORE_FIELD)

        employee = store = None
        if need_employees:
            employee = _trimmed_text(data[EMPLOYEE_FIELD], EMPLOYEE_FIELD, "Employee name")
        if need_stores:
            store = _trimmed_text(data[STORE_FIELD], STORE_FIELD, "Store location")

        if need_employees or need_stores:
            reference = await self._reference(need_employees, need_stores)
            if employee is not None:
                if normalize_key(employee) not in employee_keys(reference):
                    raise FieldValidationError(
                        EMPLOYEE_FIELD,
                        "Employee name is not recognized. Please choose an employee from the list.",
                    )
                result[EMPLOYEE_FIELD] = employee
            if store is not None:
                if normalize_key(store) not in store_keys(reference):
                    raise FieldValidationError(
                        STORE_FIELD,
                        "Store location is not recognized. Please choose a store from the list.",
                    )
                result[STORE_FIELD] = store

        if _supplied(data, NOTES_FIELD):
            notes = data[NOTES_FIELD]
            if not isinstance(notes, str):
                raise FieldValidationError(NOTES_FIELD, "Notes must be text")
            notes = notes.strip()
            if len(notes) > self.notes_max_length:
                raise FieldValidationError(
                    NOTES_FIELD,
                    f"Notes must be {self.notes_max_length} characters or fewer",
                )
            result[NOTES_FIELD] = notes

        return result
