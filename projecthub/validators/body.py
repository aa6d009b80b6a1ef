from __future__ import annotations

import json
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

from fastapi import Request
from pydantic import BaseModel

from projecthub.errors import ValidationFailed
from projecthub.validators.rules import RuleSet, ValidationIssue

SchemaT = TypeVar("SchemaT", bound=BaseModel)


async def read_json_object(request: Request) -> dict[str, Any]:
    raw = await request.body()
    if not raw:
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        raise ValidationFailed.from_issues([ValidationIssue("body", "Request body must be valid JSON")]) from None
    if not isinstance(body, dict):
        raise ValidationFailed.from_issues([ValidationIssue("body", "Request body must be a JSON object")])
    return body


def validated_body(schema: type[SchemaT], rules: RuleSet) -> Callable[[Request], Coroutine[Any, Any, SchemaT]]:
    """Build a dependency that checks the JSON body against ``rules``.

    Every violation is collected before anything else runs; a non-empty
    list aborts the request with 422. A clean body is parsed into
    ``schema``, keeping the set of keys the client actually sent.
    """

    async def _dependency(request: Request) -> SchemaT:
        body = await read_json_object(request)
        issues = rules.check(body)
        if issues:
            raise ValidationFailed.from_issues(issues)
        known = {key: value for key, value in body.items() if key in schema.model_fields}
        return schema.model_validate(known)

    return _dependency
