from datetime import date

from marshmallow import ValidationError


def validate_not_future(d: date) -> None:
    if d and d > date.today():
        raise ValidationError("Date cannot be in the future.")


def validate_not_blank(value: str) -> None:
    if not value or not value.strip():
        raise ValidationError("Field may not be blank.")


def parse_bool(raw, default=None):
    """Interpret a query-string flag; None when absent or unrecognised."""
    if raw is None:
        return default
    lowered = raw.strip().lower()
    if lowered in ("1", "true", "yes"):
        return True
    if lowered in ("0", "false", "no"):
        return False
    return default
