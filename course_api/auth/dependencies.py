import binascii
import logging
from base64 import b64decode

from fastapi import Depends, Header
from fastapi.security.utils import get_authorization_scheme_param
from sqlalchemy.orm import Session

from course_api.auth import security
from course_api.auth.schemas import UserProfile
from course_api.core.errors import Unauthenticated
from course_api.database import get_db
from course_api.models.user import User

logger = logging.getLogger(__name__)


class CredentialsError(ValueError):
    pass


def parse_basic_credentials(authorization: str | None) -> tuple[str, str]:
    """Split a ``Basic`` Authorization header value into (name, secret)."""
    if not authorization or not authorization.strip():
        raise CredentialsError("Authorization header not found.")

    scheme, param = get_authorization_scheme_param(authorization.strip())
    if scheme.lower() != "basic" or not param:
        raise CredentialsError("Authorization header is not Basic credentials.")

    try:
        decoded = b64decode(param, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise CredentialsError("Authorization header is not valid base64.") from exc

    name, separator, secret = decoded.partition(":")
    if not separator:
        raise CredentialsError("Authorization header has no name:secret separator.")
    return name, secret


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email_address == email.strip().lower()).first()


def authenticate(db: Session, name: str, secret: str) -> User | None:
    user = find_user_by_email(db, name)
    # One bcrypt comparison on every path, found or not.
    password_ok = security.verify_password(secret, user.password if user is not None else None)

    if user is None:
        logger.warning("Authentication failure: no user for %s", name.strip().lower())
        return None
    if not password_ok:
        logger.warning("Authentication failure for user %s", user.id)
        return None

    return user


def get_current_user(
    authorization: str | None = Header(default=None),
    db: Session = Depends(get_db),
) -> UserProfile:
    try:
        name, secret = parse_basic_credentials(authorization)
    except CredentialsError as exc:
        logger.warning("Authentication failure: %s", exc)
        raise Unauthenticated() from exc

    user = authenticate(db, name, secret)
    if user is None:
        raise Unauthenticated()

    logger.info("Authentication successful for user %s", user.id)
    return UserProfile.model_validate(user)
