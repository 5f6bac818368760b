import re
from datetime import datetime
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

USER_TYPES = ("creator", "brand")

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
NAME_RE = re.compile(r"^[a-zA-Z\s'-]+$")
HANDLE_RE = re.compile(r"^[a-zA-Z0-9_.]+$")

MAX_FOLLOWERS = 1_000_000_000
MAX_BUDGET = 10_000_000_000


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _valid_url(v: str) -> bool:
    try:
        p = urlparse(v)
        return bool(p.scheme and p.netloc)
    except ValueError:
        return False


def is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def parse_date(v: Any) -> Optional[datetime]:
    """Parse an ISO-8601 date or datetime string, None if it isn't one."""
    if not isinstance(v, str):
        return None
    try:
        return datetime.fromisoformat(v.replace("Z", "+00:00"))
    except ValueError:
        return None


def _check_name(name: Any, errors: List[str]) -> None:
    if not isinstance(name, str):
        errors.append("Field 'full_name' must be a string")
        return
    name = name.strip()
    if not 2 <= len(name) <= 100:
        errors.append("Name must be between 2 and 100 characters")
    elif not NAME_RE.match(name):
        errors.append("Name can only contain letters, spaces, hyphens, and apostrophes")


def _check_handle(handle: Any, errors: List[str]) -> None:
    if not isinstance(handle, str):
        errors.append("Field 'handle' must be a string")
        return
    handle = handle.strip()
    if not 2 <= len(handle) <= 50:
        errors.append("Handle must be between 2 and 50 characters")
        return
    clean = handle[1:] if handle.startswith("@") else handle
    if not HANDLE_RE.match(clean):
        errors.append("Handle can only contain letters, numbers, underscores, and dots")


def validate_signup(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    errors: List[str] = []

    email = data.get("email")
    if not _is_non_empty_str(email):
        errors.append("Missing required field: email")
    elif not EMAIL_RE.match(email.strip()):
        errors.append("Field 'email' must be a valid email address")

    password = data.get("password")
    if not isinstance(password, str) or not password:
        errors.append("Missing required field: password")
    else:
        if not 8 <= len(password) <= 128:
            errors.append("Password must be between 8 and 128 characters")
        if not re.search(r"[A-Z]", password):
            errors.append("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", password):
            errors.append("Password must contain at least one lowercase letter")
        if not re.search(r"[0-9]", password):
            errors.append("Password must contain at least one number")

    if data.get("user_type") not in USER_TYPES:
        errors.append("Field 'user_type' must be one of: creator, brand")

    if data.get("full_name") is not None:
        _check_name(data["full_name"], errors)
    if data.get("handle") is not None:
        _check_handle(data["handle"], errors)

    return errors


def validate_profile_update(data: Dict[str, Any]) -> List[str]:
    """
    Check the editable profile fields that are present in data.
    Absent or null fields are not errors; they clear or keep the value.
    """
    errors: List[str] = []

    if data.get("full_name") is not None:
        _check_name(data["full_name"], errors)
    if data.get("handle") is not None:
        _check_handle(data["handle"], errors)

    followers = data.get("follower_count")
    if followers is not None:
        if not is_int(followers) or not 0 <= followers <= MAX_FOLLOWERS:
            errors.append(f"Field 'follower_count' must be an integer between 0 and {MAX_FOLLOWERS}")

    budget = data.get("marketing_budget")
    if budget is not None:
        if not is_int(budget) or not 0 <= budget <= MAX_BUDGET:
            errors.append(f"Field 'marketing_budget' must be an integer between 0 and {MAX_BUDGET}")

    engagement = data.get("engagement_rate")
    if engagement is not None:
        if not _is_number(engagement) or not 0 <= engagement <= 100:
            errors.append("Field 'engagement_rate' must be a percentage between 0 and 100")

    for f in ("location", "niche", "bio", "avatar_url", "goal", "website"):
        if data.get(f) is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    website = data.get("website")
    if isinstance(website, str) and website.strip() and not _valid_url(website):
        errors.append("Field 'website' must be a valid absolute URL (scheme + host)")

    return errors


def validate_campaign(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages for a new campaign.
    """
    errors: List[str] = []

    title = data.get("title")
    if not _is_non_empty_str(title):
        errors.append("Missing required field: title")
    elif not 3 <= len(title.strip()) <= 100:
        errors.append("Title must be between 3 and 100 characters")

    budget = data.get("budget")
    if not is_int(budget) or not 0 < budget <= MAX_BUDGET:
        errors.append(f"Field 'budget' must be a positive integer up to {MAX_BUDGET}")

    deliverables = data.get("deliverables")
    if not _is_non_empty_str(deliverables):
        errors.append("Missing required field: deliverables")
    elif not 10 <= len(deliverables.strip()) <= 1000:
        errors.append("Deliverables must be between 10 and 1000 characters")

    start = parse_date(data.get("start_date"))
    end = parse_date(data.get("end_date"))
    if start is None:
        errors.append("Field 'start_date' must be an ISO date")
    if end is None:
        errors.append("Field 'end_date' must be an ISO date")
    if start is not None and end is not None:
        # Mixing aware and naive dates can't be compared
        if (start.tzinfo is None) != (end.tzinfo is None):
            errors.append("Fields 'start_date' and 'end_date' must use the same timezone style")
        elif end <= start:
            errors.append("End date must be after start date")

    return errors
