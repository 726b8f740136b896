"""Request body normalisation for project/skill writes.

The admin client sends either JSON (media already uploaded, URLs attached) or
multipart form data with indexed array fields such as ``features[0]``. Both are
resolved here into one ``RequestBody`` before any business logic runs.
"""

import json
import re
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Iterable, Literal

from fastapi import Request
from starlette.datastructures import UploadFile

from core.errors import BadRequestError

INDEXED_KEY = re.compile(r"^(?P<name>[A-Za-z_]\w*)\[(?P<index>\d+)\]$")

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


@dataclass
class RequestBody:
    source: Literal["json", "multipart"]
    fields: dict[str, Any] = field(default_factory=dict)
    files: dict[str, UploadFile] = field(default_factory=dict)

    def flag(self, name: str) -> bool:
        return is_true(self.fields.get(name))


def is_true(value) -> bool:
    if isinstance(value, bool):
        return value
    return isinstance(value, str) and value.strip().lower() == "true"


def coerce_array(value):
    """Turn a single form value into a list.

    Stringified JSON arrays are decoded; any other string becomes a
    one-element list.
    """
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        if not value.strip():
            return []
        try:
            decoded = json.loads(value)
        except ValueError:
            return [value]
        if isinstance(decoded, list):
            return decoded
        return [value]
    return value


def normalize_fields(
    items: Iterable[tuple[str, Any]],
    array_fields: Iterable[str] = (),
) -> tuple[dict[str, Any], dict[str, UploadFile]]:
    array_fields = set(array_fields)
    values: dict[str, list] = defaultdict(list)
    indexed: dict[str, dict[int, Any]] = defaultdict(dict)
    files: dict[str, UploadFile] = {}

    for key, value in items:
        if isinstance(value, UploadFile):
            if value.filename:
                files[key] = value
            continue
        match = INDEXED_KEY.match(key)
        if match and match.group("name") in array_fields:
            indexed[match.group("name")][int(match.group("index"))] = value
            continue
        values[key].append(value)

    fields: dict[str, Any] = {}
    for key, collected in values.items():
        if key in array_fields:
            fields[key] = coerce_array(collected[0]) if len(collected) == 1 else list(collected)
        else:
            fields[key] = collected[-1]

    # Indexed keys win over a plain value; order follows the index, not arrival
    for name, by_index in indexed.items():
        fields[name] = [by_index[i] for i in sorted(by_index) if by_index[i] not in (None, "")]

    return fields, files


async def read_body(request: Request, array_fields: Iterable[str] = ()) -> RequestBody:
    content_type = request.headers.get("content-type", "").lower()

    if any(ct in content_type for ct in FORM_CONTENT_TYPES):
        form = await request.form()
        fields, files = normalize_fields(form.multi_items(), array_fields)
        return RequestBody(source="multipart", fields=fields, files=files)

    raw = await request.body()
    if not raw.strip():
        return RequestBody(source="json")
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise BadRequestError("Request body is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise BadRequestError("Request body must be a JSON object")
    fields, _ = normalize_fields(payload.items(), array_fields)
    return RequestBody(source="json", fields=fields)
