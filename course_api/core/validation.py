"""Required-field checks shared by the route handlers.

Each endpoint declares the wire names of the fields it needs; every missing or
blank field yields one message so the client sees the whole list at once.
"""

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel

from course_api.core.errors import ValidationFailed

USER_REQUIRED_FIELDS = ("firstName", "lastName", "emailAddress", "password")
COURSE_REQUIRED_FIELDS = ("title", "description")
EMAIL_FIELDS = ("emailAddress",)


def is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def is_valid_email(value: str) -> bool:
    try:
        validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def collect_field_errors(payload: BaseModel, required_fields: tuple[str, ...]) -> list[str]:
    values = payload.model_dump(by_alias=True)
    errors: list[str] = []

    for field in required_fields:
        if is_blank(values.get(field)):
            errors.append(f'Please provide a value for "{field}"')
        elif field in EMAIL_FIELDS and not is_valid_email(values[field]):
            errors.append(f'Please provide a valid "{field}"')

    return errors


def require_fields(payload: BaseModel, required_fields: tuple[str, ...]) -> None:
    errors = collect_field_errors(payload, required_fields)
    if errors:
        raise ValidationFailed(errors)
