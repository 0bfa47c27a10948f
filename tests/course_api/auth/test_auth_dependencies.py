import base64

import pytest

from course_api.auth import security
from course_api.auth.dependencies import CredentialsError, get_current_user, parse_basic_credentials
from course_api.auth.schemas import UserProfile
from course_api.core.errors import Unauthenticated


def _encode(raw: str) -> str:
    return base64.b64encode(raw.encode('utf-8')).decode('ascii')


def test_parse_basic_credentials_splits_name_and_secret() -> None:
    assert parse_basic_credentials(f'Basic {_encode("joe@smith.com:pa:ss")}') == ('joe@smith.com', 'pa:ss')


def test_parse_basic_credentials_accepts_lowercase_scheme() -> None:
    assert parse_basic_credentials(f'basic {_encode("joe@smith.com:secret")}') == ('joe@smith.com', 'secret')


@pytest.mark.parametrize(
    'authorization',
    [
        None,
        '',
        '   ',
        'Bearer some-token',
        'Basic',
        'Basic not*base64',
        f'Basic {_encode("no-separator")}',
    ],
)
def test_parse_basic_credentials_rejects_malformed_headers(authorization) -> None:
    with pytest.raises(CredentialsError):
        parse_basic_credentials(authorization)


def test_get_current_user_returns_public_profile(db, make_user) -> None:
    user = make_user(email='joe@smith.com', password='joepassword', first_name='Joe', last_name='Smith')

    profile = get_current_user(authorization=f'Basic {_encode("joe@smith.com:joepassword")}', db=db)

    assert isinstance(profile, UserProfile)
    assert profile.model_dump() == {
        'id': user.id,
        'first_name': 'Joe',
        'last_name': 'Smith',
        'email_address': 'joe@smith.com',
    }


def test_get_current_user_matches_email_case_insensitively(db, make_user) -> None:
    user = make_user(email='joe@smith.com', password='joepassword')

    profile = get_current_user(authorization=f'Basic {_encode("Joe@Smith.com:joepassword")}', db=db)

    assert profile.id == user.id


@pytest.mark.parametrize(
    'credentials',
    [
        'joe@smith.com:wrongpassword',
        'nobody@smith.com:joepassword',
        'joe@smith.com:',
    ],
)
def test_get_current_user_rejects_bad_credentials_with_one_message(db, make_user, credentials) -> None:
    make_user(email='joe@smith.com', password='joepassword')

    with pytest.raises(Unauthenticated) as exception_info:
        get_current_user(authorization=f'Basic {_encode(credentials)}', db=db)

    assert exception_info.value.status_code == 401
    assert exception_info.value.to_dict() == {'message': 'Access Denied'}


def test_get_current_user_rejects_missing_header(db) -> None:
    with pytest.raises(Unauthenticated) as exception_info:
        get_current_user(authorization=None, db=db)

    assert exception_info.value.to_dict() == {'message': 'Access Denied'}
    assert exception_info.value.headers['WWW-Authenticate'].startswith('Basic')


def _count_bcrypt_calls(monkeypatch: pytest.MonkeyPatch, name: str) -> list[int]:
    calls: list[int] = []
    original = getattr(security.bcrypt, name)

    def counting(*args, **kwargs):
        calls.append(1)
        return original(*args, **kwargs)

    monkeypatch.setattr(security.bcrypt, name, counting)
    return calls


@pytest.mark.parametrize(
    ('known_credentials', 'unknown_credentials'),
    [
        ('joe@smith.com:', 'ghost@smith.com:'),
        ('joe@smith.com:wrongpassword', 'ghost@smith.com:wrongpassword'),
        ('joe@smith.com:' + 'x' * 100, 'ghost@smith.com:' + 'x' * 100),
    ],
)
def test_get_current_user_runs_one_bcrypt_check_for_known_and_unknown_emails(
    db,
    make_user,
    monkeypatch: pytest.MonkeyPatch,
    known_credentials: str,
    unknown_credentials: str,
) -> None:
    make_user(email='joe@smith.com', password='joepassword')
    calls = _count_bcrypt_calls(monkeypatch, 'checkpw')

    with pytest.raises(Unauthenticated):
        get_current_user(authorization=f'Basic {_encode(known_credentials)}', db=db)
    known_calls = len(calls)

    with pytest.raises(Unauthenticated):
        get_current_user(authorization=f'Basic {_encode(unknown_credentials)}', db=db)
    unknown_calls = len(calls) - known_calls

    assert known_calls == unknown_calls == 1


def test_unknown_email_does_not_hash_on_first_request(db, monkeypatch: pytest.MonkeyPatch) -> None:
    hash_calls = _count_bcrypt_calls(monkeypatch, 'hashpw')

    with pytest.raises(Unauthenticated):
        get_current_user(authorization=f'Basic {_encode("ghost@smith.com:joepassword")}', db=db)

    assert hash_calls == []
