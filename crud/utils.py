import uuid

from core.errors import BadRequestError


def check_id(record_id: str, kind: str) -> str:
    """Reject ids that are not canonical UUID strings before touching storage."""
    try:
        parsed = uuid.UUID(str(record_id))
    except (ValueError, AttributeError, TypeError):
        raise BadRequestError(f"Invalid {kind} ID format")
    if str(parsed) != str(record_id).lower():
        raise BadRequestError(f"Invalid {kind} ID format")
    return str(parsed)
