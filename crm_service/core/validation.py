"""Request input validation with aggregated HTML messages.

Rules run field by field in declaration order. A field stops at its first
failing rule, so each failed field contributes exactly one message. All
messages are joined into one ``<li>`` blob and raised as a 409.

Example:
    rules = {
        "reminder_title": [required, no_html],
        "reminder_date": [required, is_date],
        "tags": [nullable, is_array, each_no_html("tags_no_html")],
    }
    Validator(rules).validate_or_abort(data, localizer)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

import bleach

from crm_service.core.exceptions import ConflictException

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from crm_service.core.i18n import Localizer


class StopValidation(Exception):
    """Raised by ``nullable`` to skip the remaining rules of a field."""


@dataclass(frozen=True, slots=True)
class RuleFailure:
    """A failed rule: catalog key of the message, formatted with the field label."""

    message_key: str
    with_attribute: bool = True


def has_html(value: str) -> bool:
    """Return True if ``value`` contains tags or comments.

    Stripping and escaping agree on plain text (including stray ``<`` and
    entities); they differ only where bleach found markup.
    """
    stripped = bleach.clean(value, tags=[], strip=True)
    escaped = bleach.clean(value, tags=[], strip=False, strip_comments=False)
    return stripped != escaped


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, list | tuple | dict):
        return not value
    return False


def required(value: Any) -> RuleFailure | None:
    return RuleFailure("validation.required") if _is_blank(value) else None


def nullable(value: Any) -> RuleFailure | None:
    if value is None or value == "":
        raise StopValidation
    return None


def no_html(value: Any) -> RuleFailure | None:
    if isinstance(value, str) and has_html(value):
        return RuleFailure("validation.no_tags")
    return None


def is_array(value: Any) -> RuleFailure | None:
    return None if isinstance(value, list | tuple) else RuleFailure("validation.array")


def parse_datetime(value: Any) -> datetime | None:
    """Parse an ISO date or datetime string; None if it does not parse."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.strip())
    except ValueError:
        return None


def is_date(value: Any) -> RuleFailure | None:
    if _is_blank(value):
        return None
    return None if parse_datetime(value) is not None else RuleFailure("validation.date")


def each_no_html(message_key: str) -> Callable[[Any], RuleFailure | None]:
    """Fail with one message as soon as any list item contains markup."""

    def rule(values: Any) -> RuleFailure | None:
        for item in values or ():
            if isinstance(item, str) and has_html(item):
                return RuleFailure(message_key, with_attribute=False)
        return None

    return rule


class Validator:
    """Ordered field rules producing localized, aggregated messages."""

    def __init__(self, rules: Mapping[str, Sequence[Callable[[Any], RuleFailure | None]]]) -> None:
        self.rules = rules

    def validate(self, data: Mapping[str, Any], localizer: Localizer) -> list[str]:
        """Return the localized messages of every failed field, in rule order."""
        messages: list[str] = []
        for field, field_rules in self.rules.items():
            value = data.get(field)
            try:
                for rule in field_rules:
                    failure = rule(value)
                    if failure is not None:
                        messages.append(self._message(field, failure, localizer))
                        break
            except StopValidation:
                continue
        return messages

    def validate_or_abort(self, data: Mapping[str, Any], localizer: Localizer) -> None:
        """Raise a 409 carrying every message as ``<li>`` items.

        Raises:
            ConflictException: If any rule failed.
        """
        messages = self.validate(data, localizer)
        if messages:
            raise ConflictException(
                detail=format_messages(messages),
                type="validation-error",
            )

    @staticmethod
    def _message(field: str, failure: RuleFailure, localizer: Localizer) -> str:
        if not failure.with_attribute:
            return localizer(failure.message_key)
        attribute = localizer(f"attribute.{field}")
        if attribute == f"attribute.{field}":
            attribute = field.replace("_", " ")
        return localizer(failure.message_key, attribute=attribute)


def format_messages(messages: Sequence[str]) -> str:
    return "".join(f"<li>{message}</li>" for message in messages)


__all__ = [
    "RuleFailure",
    "StopValidation",
    "Validator",
    "each_no_html",
    "format_messages",
    "has_html",
    "is_array",
    "is_date",
    "no_html",
    "nullable",
    "parse_datetime",
    "required",
]
