from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from core.errors import ValidationError


class CamelModel(BaseModel):
    """Base for payloads exchanged with the admin client (camelCase keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def require_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


def clean_list(items: list[str]) -> list[str]:
    return [item.strip() for item in items if item and item.strip()]


def check_http_url(value: str | None) -> str | None:
    if value is None:
        return None
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be a valid http(s) URL")
    return value


def field_message(err: dict) -> tuple[str, str]:
    """Field name and message for one pydantic error.

    The field is the innermost named part of ``loc``, so list indexes and the
    ``body`` prefix FastAPI adds to request errors are skipped.
    """
    names = [part for part in err.get("loc") or () if isinstance(part, str)]
    field = names[-1] if names else "body"
    if err.get("type") == "missing" or ("input" in err and err["input"] is None):
        return field, f"{field} is required"
    msg = err.get("msg", "Invalid value")
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    return field, f"{field} {msg}" if not msg.startswith(field) else msg


def validate_fields(model_cls: type[BaseModel], fields: dict) -> BaseModel:
    """Validate ``fields`` against ``model_cls``.

    Pydantic errors are flattened into a ``{field: message}`` mapping keyed by
    the camelCase field name, first error per field wins.
    """
    try:
        return model_cls.model_validate(fields)
    except PydanticValidationError as exc:
        errors: dict[str, str] = {}
        for err in exc.errors():
            field, message = field_message(err)
            errors.setdefault(field, message)
        raise ValidationError(errors) from exc


def check_media_pairs(payload: BaseModel, pairs: list[tuple[str, str]]) -> None:
    """Each (url, public id) pair must be set or cleared together."""
    errors: dict[str, str] = {}
    for url_attr, id_attr in pairs:
        url = getattr(payload, url_attr)
        public_id = getattr(payload, id_attr)
        if url and not public_id:
            errors[to_camel(id_attr)] = f"{to_camel(id_attr)} is required when {to_camel(url_attr)} is set"
        elif public_id and not url:
            errors[to_camel(url_attr)] = f"{to_camel(url_attr)} is required when {to_camel(id_attr)} is set"
    if errors:
        raise ValidationError(errors)


def alias_keys(model_cls: type[BaseModel], fields: dict) -> dict:
    """Rename snake_case field names to their camelCase aliases, leave others as is."""
    renamed = {}
    for key, value in fields.items():
        if key in model_cls.model_fields:
            key = to_camel(key)
        renamed[key] = value
    return renamed


def record_fields(model_cls: type[BaseModel], record) -> dict:
    """Stored values of ``record`` for every field of ``model_cls``, keyed by alias."""
    values = {}
    for name in model_cls.model_fields:
        value = getattr(record, name, None)
        if isinstance(value, list):
            value = list(value)
        values[to_camel(name)] = value
    return values
