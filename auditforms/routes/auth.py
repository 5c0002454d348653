"""
Auth routes - token introspection
"""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from auditforms.utils.auth import get_current_user

router = APIRouter(prefix="/auth", tags=["Auth"])


def _iso(epoch):
    return datetime.fromtimestamp(epoch, tz=timezone.utc).isoformat() if epoch else None


@router.get("/me")
async def token_info(current_user: dict = Depends(get_current_user)):
    """Who the bearer token belongs to"""
    return {
        "id": current_user["sub"],
        "email": current_user.get("email"),
        "name": current_user.get("name"),
        "role": current_user.get("role"),
        "iat": _iso(current_user.get("iat")),
        "exp": _iso(current_user.get("exp")),
    }
