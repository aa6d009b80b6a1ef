"""Declarative request-body rules.

A ``RuleSet`` is an ordered list of ``FieldRules`` followed by composite
rules. ``RuleSet.check`` runs every rule and returns every violation, so a
single response can report all problems with a payload at once.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from email_validator import EmailNotValidError, validate_email

_MISSING = object()


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class Rule:
    message: str = "Invalid value"

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message

    def passes(self, value: Any) -> bool:
        raise NotImplementedError

    def check(self, value: Any) -> str | None:
        return None if self.passes(value) else self.message


def _is_blank(value: Any) -> bool:
    if value is _MISSING or value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, dict)):
        return len(value) == 0
    return False


class NotEmpty(Rule):
    message = "Field is required"

    def passes(self, value: Any) -> bool:
        return not _is_blank(value)


class IsString(Rule):
    message = "Must be a string"

    def passes(self, value: Any) -> bool:
        return isinstance(value, str)


class Length(Rule):
    """Length bounds on the string form of a value."""

    def __init__(self, min: int | None = None, max: int | None = None, message: str | None = None):
        super().__init__(message)
        self.min = min
        self.max = max

    def passes(self, value: Any) -> bool:
        if value is _MISSING or value is None:
            return self.min is None or self.min <= 0
        length = len(value) if isinstance(value, str) else len(str(value))
        if self.min is not None and length < self.min:
            return False
        return self.max is None or length <= self.max


class OneOf(Rule):
    def __init__(self, choices: Iterable[str], message: str | None = None):
        super().__init__(message)
        self.choices = tuple(choices)

    def passes(self, value: Any) -> bool:
        return isinstance(value, str) and value in self.choices


class IsUUID(Rule):
    message = "Must be a valid UUID"

    def passes(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        try:
            uuid.UUID(value)
        except ValueError:
            return False
        return True


class IsEmail(Rule):
    message = "Invalid email format"

    def passes(self, value: Any) -> bool:
        if not isinstance(value, str):
            return False
        try:
            validate_email(value, check_deliverability=False)
        except EmailNotValidError:
            return False
        return True


class IsISODate(Rule):
    message = "Must be a valid date"

    def passes(self, value: Any) -> bool:
        return parse_iso_datetime(value) is not None


class IsBoolean(Rule):
    message = "Must be a boolean value"

    def passes(self, value: Any) -> bool:
        return isinstance(value, bool)


class Matches(Rule):
    def __init__(self, pattern: str, message: str | None = None):
        super().__init__(message)
        self.pattern = re.compile(pattern)

    def passes(self, value: Any) -> bool:
        return isinstance(value, str) and self.pattern.search(value) is not None


def parse_iso_datetime(value: Any) -> datetime | None:
    """Parse an ISO-8601 date or datetime string; ``None`` when it is not one."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        parsed = date.fromisoformat(text)
    except ValueError:
        return None
    return datetime(parsed.year, parsed.month, parsed.day)


class FieldRules:
    """Rules for one body field, applied in declaration order.

    ``optional`` fields are skipped when the key is absent from the body;
    a key that is present (even with an empty value) is always checked.
    ``trim`` strips surrounding whitespace from string values before the
    rules run and writes the trimmed value back into the body.
    """

    def __init__(self, field: str, *rules: Rule, optional: bool = False, trim: bool = False):
        self.field = field
        self.rules = rules
        self.optional = optional
        self.trim = trim

    def check(self, body: dict[str, Any]) -> list[ValidationIssue]:
        if self.field not in body:
            if self.optional:
                return []
            value: Any = _MISSING
        else:
            value = body[self.field]
            if self.trim and isinstance(value, str):
                value = value.strip()
                body[self.field] = value
        issues = []
        for rule in self.rules:
            message = rule.check(value)
            if message is not None:
                issues.append(ValidationIssue(self.field, message))
        return issues


class AtLeastOne:
    """Composite rule: at least one of ``fields`` carries a non-empty value."""

    def __init__(self, fields: Iterable[str], message: str = "At least one field must be provided for update"):
        self.fields = tuple(fields)
        self.message = message

    def check(self, body: dict[str, Any]) -> list[ValidationIssue]:
        if any(not _is_blank(body.get(name, _MISSING)) for name in self.fields):
            return []
        return [ValidationIssue("body", self.message)]


class RuleSet:
    def __init__(
        self,
        *fields: FieldRules,
        composite: Iterable[AtLeastOne | Callable[[dict[str, Any]], list[ValidationIssue]]] = (),
    ):
        self.fields = fields
        self.composite = tuple(composite)

    def check(self, body: dict[str, Any]) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        for field_rules in self.fields:
            issues.extend(field_rules.check(body))
        for rule in self.composite:
            if isinstance(rule, AtLeastOne):
                issues.extend(rule.check(body))
            else:
                issues.extend(rule(body))
        return issues
