"""Request body parsing shared by controllers and route gates.

Bodies may be JSON or form-encoded. Form fields follow the bracket
conventions of HTML forms:

    tags[]=a&tags[]=b     -> {"tags": ["a", "b"]}
    ids[5]=on&ids[7]=on   -> {"ids": {"5": "on", "7": "on"}}
    tags=a&tags=b         -> {"tags": ["a", "b"]}
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import Depends, Request

from crm_service.core.exceptions import ConflictException

if TYPE_CHECKING:
    from collections.abc import Iterable

_BRACKET_KEY = re.compile(r"^(?P<name>[^\[\]]+)\[(?P<key>[^\[\]]*)\]$")


def parse_form_items(items: Iterable[tuple[str, Any]]) -> dict[str, Any]:
    """Fold multi-dict form items into lists and nested mappings."""
    data: dict[str, Any] = {}
    for raw_key, value in items:
        match = _BRACKET_KEY.match(raw_key)
        if match is None:
            if raw_key in data:
                existing = data[raw_key]
                data[raw_key] = [*existing, value] if isinstance(existing, list) else [existing, value]
            else:
                data[raw_key] = value
            continue

        name, key = match["name"], match["key"]
        if key == "":
            bucket = data.setdefault(name, [])
            if not isinstance(bucket, list):
                bucket = data[name] = [bucket]
            bucket.append(value)
        else:
            bucket = data.setdefault(name, {})
            if isinstance(bucket, dict):
                bucket[key] = value
    return data


async def get_request_data(request: Request) -> Mapping[str, Any]:
    """Parse the request body into a read-only mapping.

    Empty bodies yield an empty mapping.

    Raises:
        ConflictException: If a JSON body is not a JSON object.
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return MappingProxyType(parse_form_items(form.multi_items()))

    body = await request.body()
    if not body.strip():
        return MappingProxyType({})

    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise ConflictException(type="malformed-request") from exc
    if not isinstance(payload, dict):
        raise ConflictException(type="malformed-request")
    return MappingProxyType(payload)


RequestDataDep = Annotated[Mapping[str, Any], Depends(get_request_data)]

__all__ = ["RequestDataDep", "get_request_data", "parse_form_items"]
