"""Client-side checks run before a mutation is applied or sent."""

from __future__ import annotations

import re

from listing_core.errors import ValidationError
from listing_core.resources.base import ResourceDescriptor, get_path

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def field_errors(fields: dict, descriptor: ResourceDescriptor, partial: bool = False) -> dict[str, str]:
    errors: dict[str, str] = {}

    if not partial:
        for name in descriptor.required_fields:
            if _blank(get_path(fields, name)):
                errors[name] = "required"
    else:
        for name in descriptor.required_fields:
            if name in fields and _blank(fields[name]):
                errors[name] = "cannot be blank"

    email = fields.get("email")
    if "email" in fields and not _blank(email) and not EMAIL_RE.match(str(email)):
        errors["email"] = "invalid email address"

    for name in descriptor.numeric_fields:
        if name not in fields or fields[name] is None:
            continue
        try:
            value = float(fields[name])
        except (TypeError, ValueError):
            errors[name] = "must be a number"
            continue
        if value < 0:
            errors[name] = "must not be negative"

    return errors


def validate(fields: dict, descriptor: ResourceDescriptor, partial: bool = False) -> None:
    errors = field_errors(fields, descriptor, partial=partial)
    if errors:
        summary = ", ".join(f"{k}: {v}" for k, v in sorted(errors.items()))
        raise ValidationError(f"invalid {descriptor.key} fields ({summary})", errors)
