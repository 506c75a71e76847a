from __future__ import annotations

from typing import Any, Mapping

from ..common.datetime_utils import coerce_date
from ..common.validators import require_non_empty, require_number
from ..core.enums import Period
from ..core.exceptions import ValidationError


def validate_attendance_input(data: Mapping[str, Any]) -> dict:
    """Check a raw attendance payload before it reaches the store.

    Returns a cleaned copy. The store trusts its input; this is the place that doesn't.
    """

    cleaned = dict(data)
    cleaned["student_id"] = require_non_empty(data.get("student_id"), "student_id")
    cleaned["class_id"] = require_non_empty(data.get("class_id"), "class_id")
    cleaned["academic_year"] = require_non_empty(data.get("academic_year"), "academic_year")

    try:
        cleaned["date"] = coerce_date(data.get("date"))
    except (TypeError, ValueError):
        raise ValidationError("date must be an ISO date (YYYY-MM-DD)") from None

    try:
        period = Period(data.get("period"))
    except ValueError:
        raise ValidationError(f"Unknown period: {data.get('period')!r}") from None
    cleaned["period"] = period.value

    if period == Period.SEMESTER:
        cleaned["semester"] = require_non_empty(data.get("semester"), "semester")
    else:
        cleaned["semester"] = data.get("semester") or None

    for field in ("hours_present", "hours_absent", "total_hours"):
        cleaned[field] = require_number(data.get(field), field)

    return cleaned
