"""
Reference data routes - employee and store lists for form typeaheads
"""
from enum import Enum
from fastapi import APIRouter, Depends, HTTPException, status
from typing import Optional
import logging
from auditforms.services.container import Services, get_services
from auditforms.services.google_clients import GoogleApiError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reference-data", tags=["Reference Data"])


class ReferenceType(str, Enum):
    EMPLOYEES = "employees"
    STORES = "stores"


@router.get("")
async def get_reference_data(
    type: Optional[ReferenceType] = None,
    services: Services = Depends(get_services),
):
    """Employees, stores, or both when no type is given"""
    want_employees = type in (None, ReferenceType.EMPLOYEES)
    want_stores = type in (None, ReferenceType.STORES)
    try:
        data = await services.gateway.fetch(employees=want_employees, stores=want_stores)
    except GoogleApiError as e:
        logger.error("❌ Sheets API error: %s", e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch data from sheets"
        )

    body = {}
    if want_employees:
        body["employees"] = [e.model_dump() for e in data.employees]
    if want_stores:
        body["stores"] = [s.model_dump() for s in data.stores]
    return body
