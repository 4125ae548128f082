"""
Service custom fields: definition rules and submission validation.

Admins configure per-service form fields; customers submit values for them
at checkout. Both sides are validated here so routes stay thin.
"""

import math
import re
from typing import Dict, Iterable, List, Optional

from .exceptions import ValidationError
from .value_objects.email import Email

FIELD_TYPES = (
    "text", "textarea", "select", "radio", "checkbox",
    "email", "phone", "date", "file", "number", "url",
)
FIELD_CATEGORIES = ("personal_info", "business_info", "service_specific", "preferences", "compliance")
FIELD_WIDTHS = ("full", "half", "third", "quarter")
CHOICE_TYPES = ("select", "radio")

FIELD_NAME_PATTERN = re.compile(r"^[a-z][a-z0-9_]*$")
PHONE_PATTERN = re.compile(r"^[0-9+()\-.\s]{7,20}$")
URL_PATTERN = re.compile(r"^https?://\S+$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}")
NUMERIC_RULES = ("min", "max", "minLength", "maxLength")


def validate_field_definition(data: dict) -> None:
    """Raises ValidationError when an admin-provided field definition is unusable."""
    field_name = data.get("fieldName")
    if not field_name:
        raise ValidationError("fieldName is required", "fieldName")
    if not FIELD_NAME_PATTERN.match(field_name):
        raise ValidationError("fieldName must be snake_case", "fieldName")

    if not data.get("fieldLabel"):
        raise ValidationError("fieldLabel is required", "fieldLabel")

    field_type = data.get("fieldType")
    if field_type not in FIELD_TYPES:
        raise ValidationError(f"fieldType must be one of: {', '.join(FIELD_TYPES)}", "fieldType")

    if field_type in CHOICE_TYPES and not data.get("options"):
        raise ValidationError(f"{field_type} fields need at least one option", "options")

    category = data.get("fieldCategory")
    if category is not None and category not in FIELD_CATEGORIES:
        raise ValidationError(f"fieldCategory must be one of: {', '.join(FIELD_CATEGORIES)}", "fieldCategory")

    width = data.get("width")
    if width is not None and width not in FIELD_WIDTHS:
        raise ValidationError(f"width must be one of: {', '.join(FIELD_WIDTHS)}", "width")

    _validate_rules(data.get("validationRules"))


def _validate_rules(rules) -> None:
    """Rules are checked at definition time so a bad rule never reaches checkout."""
    if rules is None:
        return
    if not isinstance(rules, dict):
        raise ValidationError("validationRules must be an object", "validationRules")

    for key in NUMERIC_RULES:
        if key in rules and _rule_number(rules[key]) is None:
            raise ValidationError(f"validationRules.{key} must be a number", "validationRules")

    pattern = rules.get("pattern")
    if pattern:
        if not isinstance(pattern, str):
            raise ValidationError("validationRules.pattern must be a string", "validationRules")
        try:
            re.compile(pattern)
        except re.error:
            raise ValidationError("validationRules.pattern is not a valid regular expression", "validationRules")


def _rule_number(value) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def option_values(options: Optional[Iterable]) -> List[str]:
    """Options are stored either as plain strings or as {value, label} objects."""
    values = []
    for option in options or []:
        if isinstance(option, dict):
            values.append(str(option.get("value")))
        else:
            values.append(str(option))
    return values


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip()) or value == []


def _validate_value(field, value) -> Optional[str]:
    """Returns an error message for a single non-blank value, or None."""
    label = field.field_label
    rules = field.validation_rules or {}

    if field.field_type == "email" and not Email.is_valid(value):
        return f"{label} must be a valid email address"
    if field.field_type == "phone" and not PHONE_PATTERN.match(str(value)):
        return f"{label} must be a valid phone number"
    if field.field_type == "url" and not URL_PATTERN.match(str(value)):
        return f"{label} must be a valid URL"
    if field.field_type == "date" and not DATE_PATTERN.match(str(value)):
        return f"{label} must be a date (YYYY-MM-DD)"

    if field.field_type in CHOICE_TYPES and str(value) not in option_values(field.options):
        return f"{label} must be one of the available options"

    if field.field_type == "number":
        try:
            number = float(value)
        except (TypeError, ValueError):
            return f"{label} must be a number"
        if "min" in rules and number < _rule_number(rules["min"]):
            return f"{label} must be at least {rules['min']}"
        if "max" in rules and number > _rule_number(rules["max"]):
            return f"{label} must be at most {rules['max']}"

    if isinstance(value, str):
        if "minLength" in rules and len(value) < _rule_number(rules["minLength"]):
            return f"{label} must be at least {rules['minLength']} characters"
        if "maxLength" in rules and len(value) > _rule_number(rules["maxLength"]):
            return f"{label} must be at most {rules['maxLength']} characters"
        if rules.get("pattern") and not re.fullmatch(rules["pattern"], value):
            return f"{label} has an invalid format"

    return None


def validate_submission(fields, data: Optional[dict]) -> Dict[str, str]:
    """
    Validates submitted custom field data against the active field definitions.

    Returns a mapping of field name -> error message (empty when valid).
    """
    data = data or {}
    errors: Dict[str, str] = {}

    for field in fields:
        if not field.is_active:
            continue
        value = data.get(field.field_name)

        if _is_blank(value) or (field.field_type == "checkbox" and value is False):
            if field.is_required:
                errors[field.field_name] = f"{field.field_label} is required"
            continue

        message = _validate_value(field, value)
        if message:
            errors[field.field_name] = message

    return errors
