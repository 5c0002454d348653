"""
Access rules for forms and submissions

A submission is visible to its author, to the owner of its form, and to
admins. Forms are edited or deleted only by their owner or an admin.
"""
from typing import Dict, List, Optional

ADMIN_ROLE = "ADMIN"


def is_admin(user: Optional[Dict]) -> bool:
    return bool(user) and user.get("role") == ADMIN_ROLE


def user_id(user: Optional[Dict]) -> Optional[str]:
    return user.get("sub") if user else None


def can_manage_form(user: Dict, form: Dict) -> bool:
    return is_admin(user) or (form.get("createdById") is not None and form.get("createdById") == user_id(user))


def can_view_submission(user: Dict, submission: Dict, form: Optional[Dict]) -> bool:
    if is_admin(user):
        return True
    uid = user_id(user)
    if uid is None:
        return False
    if submission.get("user_id") == uid:
        return True
    return form is not None and form.get("createdById") == uid


def submission_filter(user: Dict, form_id: Optional[str], owned_form_ids: List[str]) -> Dict:
    """Mongo filter selecting exactly the submissions the user may see"""
    uid = user_id(user)
    if form_id:
        if is_admin(user) or form_id in owned_form_ids:
            return {"form_id": form_id}
        return {"form_id": form_id, "user_id": uid}
    if is_admin(user):
        return {}
    return {"$or": [{"user_id": uid}, {"form_id": {"$in": owned_form_ids}}]}
