"""
Helper utility functions
"""
from bson import ObjectId
from typing import Any, Dict, List
from datetime import datetime
import random
import re
import string
import time
import pytz

_WHITESPACE = re.compile(r"\s+")
_BASE36 = string.digits + string.ascii_lowercase


def serialize_doc(doc: Dict) -> Dict:
    """Convert MongoDB document to JSON-serializable format"""
    if doc is None:
        return None

    for key, value in doc.items():
        if isinstance(value, ObjectId):
            doc[key] = str(value)
        elif isinstance(value, datetime):
            # Motor hands back naive UTC datetimes
            if value.tzinfo is None:
                doc[key] = pytz.utc.localize(value)
        elif isinstance(value, list):
            doc[key] = [serialize_doc(item) if isinstance(item, dict) else item for item in value]
        elif isinstance(value, dict):
            doc[key] = serialize_doc(value)

    return doc


def serialize_docs(docs: List[Dict]) -> List[Dict]:
    """Convert list of MongoDB documents to JSON-serializable format"""
    return [serialize_doc(doc) for doc in docs]


def normalize_key(value: str) -> str:
    """Comparison key: lowercase, trimmed, inner whitespace collapsed. Never stored."""
    return _WHITESPACE.sub(" ", value.strip().lower())


def flatten_file_url(value: Any) -> str:
    """Reduce an uploaded-file value (url, list of upload results, upload result) to one URL"""
    if not value:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        first = value[0]
        if isinstance(first, str):
            return first
        if isinstance(first, dict):
            return first.get("url") or ""
        return ""
    if isinstance(value, dict):
        return value.get("url") or ""
    return ""


def generate_submission_id() -> str:
    """Opaque id: millisecond timestamp plus a random base36 suffix"""
    suffix = "".join(random.choices(_BASE36, k=9))
    return f"sub_{int(time.time() * 1000)}_{suffix}"


def localized_timestamp(tz_name: str, now: datetime = None) -> str:
    """Sheet timestamp in the en-US 12-hour form, e.g. 10/17/2026, 02:03:09 PM"""
    now = now or datetime.now(pytz.utc)
    return now.astimezone(pytz.timezone(tz_name)).strftime("%m/%d/%Y, %I:%M:%S %p")


def utcnow() -> datetime:
    """Naive UTC, the form MongoDB returns datetimes in"""
    return datetime.now(pytz.utc).replace(tzinfo=None)
