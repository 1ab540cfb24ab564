"""
Value validation run before the lifecycle engine.

Field rules live on the pydantic schemas; format_errors turns their failures into
the entries of one aggregated ValidationError. The checks here need engine context.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

from app.core.exceptions import ValidationError

REJECTION_REASON_MAX_LENGTH = 500
MAX_REQUESTED_DAYS = 365

# Locations FastAPI prefixes onto body/query errors
_REQUEST_LOCATIONS = {"body", "query", "path", "header"}


def field_error(field: str, message: str) -> Dict[str, str]:
    return {"field": field, "message": message}


def format_errors(errors: Iterable[Mapping[str, Any]]) -> List[Dict[str, str]]:
    """Map pydantic/FastAPI error dicts to ``{"field", "message"}`` entries."""
    details = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in _REQUEST_LOCATIONS]
        details.append(field_error(".".join(loc) or "__root__", err.get("msg", "Invalid value")))
    return details


def validate_rejection_reason(reason: Optional[str]) -> str:
    cleaned = (reason or "").strip()
    if not cleaned:
        raise ValidationError([field_error("motivoRechazo", "Rejection reason is required")])
    if len(cleaned) > REJECTION_REASON_MAX_LENGTH:
        raise ValidationError(
            [field_error("motivoRechazo", f"Rejection reason cannot exceed {REJECTION_REASON_MAX_LENGTH} characters")]
        )
    return cleaned


def validate_derived_days(requested_days: float) -> None:
    if requested_days > MAX_REQUESTED_DAYS:
        raise ValidationError(
            [field_error("diasSolicitados", f"A request cannot span more than {MAX_REQUESTED_DAYS} days")]
        )
