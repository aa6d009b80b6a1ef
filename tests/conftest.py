import pytest
from fastapi.testclient import TestClient

from projecthub.db import Base
from projecthub.main import create_app
from projecthub.models.user import UserRole
from tests.helpers import bearer, make_settings, make_user


@pytest.fixture()
def settings():
    return make_settings()


@pytest.fixture()
def app(settings):
    application = create_app(settings)
    Base.metadata.create_all(bind=application.state.engine)
    try:
        yield application
    finally:
        application.state.engine.dispose()


@pytest.fixture()
def client(app):
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture()
def db_session(app):
    session = app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def admin_user(db_session):
    return make_user(db_session, name="Alice Admin", role=UserRole.admin)


@pytest.fixture()
def member_user(db_session):
    return make_user(db_session, name="Bob Member", role=UserRole.member)


@pytest.fixture()
def admin_headers(settings, admin_user):
    return bearer(settings, admin_user)


@pytest.fixture()
def member_headers(settings, member_user):
    return bearer(settings, member_user)
