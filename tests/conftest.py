import base64
import os

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('BCRYPT_ROUNDS', '4')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, event  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from course_api.auth.security import hash_password  # noqa: E402
from course_api.database import Base, enable_sqlite_foreign_keys, get_db  # noqa: E402
from course_api.main import app  # noqa: E402
from course_api.models.course import Course  # noqa: E402
from course_api.models.user import User  # noqa: E402


@pytest.fixture
def testing_session_local():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    event.listen(engine, 'connect', enable_sqlite_foreign_keys)
    Base.metadata.create_all(bind=engine, tables=[User.__table__, Course.__table__])
    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine, tables=[Course.__table__, User.__table__])
        engine.dispose()


@pytest.fixture
def db(testing_session_local):
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(testing_session_local):
    def override_get_db():
        session = testing_session_local()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_header():
    def build(email: str, password: str) -> dict[str, str]:
        token = base64.b64encode(f'{email}:{password}'.encode('utf-8')).decode('ascii')
        return {'Authorization': f'Basic {token}'}

    return build


@pytest.fixture
def make_user(db):
    def build(*, email: str, password: str = 'secret', first_name: str = 'Ada', last_name: str = 'Lovelace') -> User:
        user = User(
            first_name=first_name,
            last_name=last_name,
            email_address=email,
            password=hash_password(password),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return build


@pytest.fixture
def make_course(db):
    def build(*, owner: User, title: str = 'Build a Basic Bookcase', description: str = 'Shelves and screws.') -> Course:
        course = Course(user_id=owner.id, title=title, description=description, estimated_time='12 hours')
        db.add(course)
        db.commit()
        db.refresh(course)
        return course

    return build
