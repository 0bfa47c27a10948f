import logging

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from course_api.auth import security
from course_api.auth.dependencies import find_user_by_email, get_current_user
from course_api.auth.schemas import UserProfile
from course_api.core.errors import Conflict, ValidationFailed
from course_api.core.validation import USER_REQUIRED_FIELDS, require_fields
from course_api.database import get_db
from course_api.models.user import User

router = APIRouter(tags=['users'])

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = 'An account with this email address already exists.'


class CreateUserRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    first_name: str | None = None
    last_name: str | None = None
    email_address: str | None = None
    password: str | None = None


def normalize_email(value: str) -> str:
    return value.strip().lower()


@router.get('/users', response_model=UserProfile)
def get_authenticated_user(current_user: UserProfile = Depends(get_current_user)):
    return current_user


@router.post('/users', status_code=status.HTTP_201_CREATED)
def create_user(data: CreateUserRequest | None = None, db: Session = Depends(get_db)):
    data = data or CreateUserRequest()
    require_fields(data, USER_REQUIRED_FIELDS)

    email_address = normalize_email(data.email_address)
    existing_user = find_user_by_email(db, email_address)
    if existing_user:
        raise Conflict(DUPLICATE_EMAIL_MESSAGE)

    try:
        password_hash = security.hash_password(data.password)
    except security.PasswordHashError as exc:
        raise ValidationFailed([str(exc)]) from exc

    user = User(
        first_name=data.first_name.strip(),
        last_name=data.last_name.strip(),
        email_address=email_address,
        password=password_hash,
    )

    try:
        db.add(user)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise Conflict(DUPLICATE_EMAIL_MESSAGE) from exc

    logger.info('Created user %s', user.id)
    return Response(status_code=status.HTTP_201_CREATED, headers={'Location': '/'})
