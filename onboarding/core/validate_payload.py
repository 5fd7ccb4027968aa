"""Payload Validator — declarative per-field rules, evaluated without short-circuit.

Invariants:
    - Every field in the rule set is evaluated; the caller receives the complete error set
    - A missing value yields only the "required" message for that field
    - Validation is all-or-nothing: Ok carries the untouched payload, Err carries every violation
    - Unknown constraint names raise ValueError when the rule set is parsed

Design Decisions:
    - Pipe-separated rule strings ("required|email") keep rule sets readable as data
    - Dotted field names address nested keys ("user.email")
    - Pure functions only: no IO, no framework types
"""

import re
from collections.abc import Mapping
from typing import Any, Callable

from onboarding.core.errors import PayloadValidationError
from onboarding.core.result import Err, Ok, Result

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
INTEGER_PATTERN = re.compile(r"^-?\d+$")

_MISSING = object()

CREATE_USER_RULES: dict[str, str] = {
    "user": "required|array",
    "user.email": "required|email|max:255",
}

LIST_USERS_RULES: dict[str, str] = {
    "limit": "integer|min:1|max:100",
    "offset": "integer|min:0",
}


def as_integer(value: Any) -> int | None:
    """Integer form of an int or a decimal string (query parameters); None otherwise."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and INTEGER_PATTERN.match(value.strip()):
        return int(value)
    return None


def _check_array(field: str, value: Any, arg: str | None) -> str | None:
    if not isinstance(value, Mapping):
        return f"The {field} field must be an array."
    return None


def _check_list(field: str, value: Any, arg: str | None) -> str | None:
    if not isinstance(value, list):
        return f"The {field} field must be a list."
    return None


def _check_string(field: str, value: Any, arg: str | None) -> str | None:
    if not isinstance(value, str):
        return f"The {field} field must be a string."
    return None


def _check_email(field: str, value: Any, arg: str | None) -> str | None:
    if not isinstance(value, str) or not EMAIL_PATTERN.match(value.strip()):
        return f"The {field} field must be a valid email address."
    return None


def _check_integer(field: str, value: Any, arg: str | None) -> str | None:
    if as_integer(value) is None:
        return f"The {field} field must be an integer."
    return None


# min/max bound string length, or the numeric value when the field is integer
def _check_min(field: str, value: Any, arg: str | None) -> str | None:
    if isinstance(value, int) and value < int(arg):
        return f"The {field} field must be at least {arg}."
    if isinstance(value, str) and len(value) < int(arg):
        return f"The {field} field must be at least {arg} characters."
    return None


def _check_max(field: str, value: Any, arg: str | None) -> str | None:
    if isinstance(value, int) and value > int(arg):
        return f"The {field} field may not be greater than {arg}."
    if isinstance(value, str) and len(value) > int(arg):
        return f"The {field} field may not be greater than {arg} characters."
    return None


_CONSTRAINTS: dict[str, Callable[[str, Any, str | None], str | None]] = {
    "array": _check_array,
    "list": _check_list,
    "string": _check_string,
    "integer": _check_integer,
    "email": _check_email,
    "min": _check_min,
    "max": _check_max,
}

_NEEDS_ARGUMENT = {"min", "max"}


def parse_rule(rule: str) -> list[tuple[str, str | None]]:
    """Split "required|max:255" into [("required", None), ("max", "255")]."""
    parsed = []
    for part in rule.split("|"):
        name, _, arg = part.strip().partition(":")
        if name != "required" and name not in _CONSTRAINTS:
            raise ValueError(f"Unknown validation constraint: {name!r}")
        if name in _NEEDS_ARGUMENT and not arg.isdigit():
            raise ValueError(f"Constraint {name!r} needs an integer argument")
        parsed.append((name, arg or None))
    return parsed


def lookup(payload: Any, path: str) -> Any:
    """Resolve a dotted path; returns _MISSING when any segment is absent."""
    current = payload
    for key in path.split("."):
        if not isinstance(current, Mapping) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _is_empty(value: Any) -> bool:
    if value is _MISSING or value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return isinstance(value, (list, dict)) and not value


def check_field(field: str, value: Any, rule: str) -> list[str]:
    """Return every message for one field, in rule order."""
    constraints = parse_rule(rule)
    names = [name for name, _ in constraints]
    if _is_empty(value):
        if "required" in names:
            return [f"The {field} field is required."]
        return []
    if "integer" in names:
        if as_integer(value) is None:
            return [_check_integer(field, value, None)]
        value = as_integer(value)
    messages = []
    for name, arg in constraints:
        if name in ("required", "integer"):
            continue
        message = _CONSTRAINTS[name](field, value, arg)
        if message:
            messages.append(message)
    return messages


def validate(
    payload: Any, rules: Mapping[str, str],
) -> Result[dict, PayloadValidationError]:
    """Validate payload against rules, collecting errors for every field."""
    errors: dict[str, list[str]] = {}
    for field, rule in rules.items():
        messages = check_field(field, lookup(payload, field), rule)
        if messages:
            errors[field] = messages
    if errors:
        return Err(PayloadValidationError(errors))
    return Ok(payload)
