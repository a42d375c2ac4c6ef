"""
Pytest configuration and fixtures for testing the civic issue API.
"""

import os
import pytest
import jwt
from faker import Faker

os.environ['FLASK_ENV'] = 'testing'
os.environ['JWT_SECRET_KEY'] = 'test-secret-key-for-testing'

from civic_api import create_app, db, socketio as app_socketio
from civic_api.models import Issue, User
from civic_api.services.tracking import TrackerRegistry

fake = Faker()

TEST_SECRET = 'test-secret-key-for-testing'

# Salt Lake Sector V, Kolkata
WORKER_LOCATION = (22.5743, 88.4348)
STREET_LIGHT_LOCATION = (22.5760, 88.4348)
PIPELINE_LOCATION = (22.5720, 88.4370)
GARBAGE_LOCATION = (22.5695, 88.4280)


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app('testing')

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client for each test function."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create a fresh database session (and fresh location channels) for each test."""
    with app.app_context():
        for table in reversed(db.metadata.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()
        app.extensions['location_trackers'] = TrackerRegistry()
        app.extensions['socket_users'] = {}
        yield db.session
        db.session.rollback()


@pytest.fixture
def socketio():
    return app_socketio


def make_token(user_id, secret=TEST_SECRET):
    """Sign a token the way the identity provider does."""
    return jwt.encode({'user_id': user_id}, secret, algorithm='HS256')


def auth_header(user):
    return {'Authorization': f"Bearer {make_token(user['id'])}"}


def _create_user(role='citizen', **overrides):
    """Helper to create a user with sensible defaults."""
    data = {
        'email': fake.unique.email(),
        'full_name': fake.name(),
        'role': role,
    }
    data.update(overrides)
    user = User(**data)
    db.session.add(user)
    db.session.commit()
    return {
        'id': user.id,
        'email': user.email,
        'full_name': user.full_name,
        'role': user.role,
    }


def _create_issue(reporter_id, location, assigned_to_id=None, **overrides):
    data = {
        'issue_number': f'CIV-2025-{fake.unique.random_int(min=0, max=9999):04d}',
        'title': fake.sentence(nb_words=4)[:100],
        'description': fake.paragraph(),
        'category': 'street-lighting',
        'priority': 'medium',
        'latitude': location[0],
        'longitude': location[1],
        'address': fake.address(),
        'reporter_id': reporter_id,
        'assigned_to_id': assigned_to_id,
    }
    data.update(overrides)
    issue = Issue(**data)
    db.session.add(issue)
    db.session.commit()
    return {
        'id': issue.id,
        'issue_number': issue.issue_number,
        'title': issue.title,
        'status': issue.status,
    }


@pytest.fixture
def create_user(app, db_session):
    """Factory fixture: create_user(role='worker', **fields) -> dict."""
    def factory(role='citizen', **overrides):
        return _create_user(role, **overrides)
    return factory


@pytest.fixture
def create_issue(app, db_session):
    """Factory fixture: create_issue(reporter_id, (lat, lng), assigned_to_id=None, **fields) -> dict."""
    def factory(reporter_id, location, assigned_to_id=None, **overrides):
        return _create_issue(reporter_id, location, assigned_to_id, **overrides)
    return factory


@pytest.fixture
def citizen(create_user):
    return create_user('citizen')


@pytest.fixture
def worker(create_user):
    return create_user('worker', department='Public Works', speciality='Electrical')


@pytest.fixture
def other_worker(create_user):
    return create_user('worker')


@pytest.fixture
def admin(create_user):
    return create_user('admin')


@pytest.fixture
def citizen_headers(citizen):
    return auth_header(citizen)


@pytest.fixture
def worker_headers(worker):
    return auth_header(worker)


@pytest.fixture
def other_worker_headers(other_worker):
    return auth_header(other_worker)


@pytest.fixture
def admin_headers(admin):
    return auth_header(admin)


@pytest.fixture
def assigned_task(create_issue, citizen, worker):
    """Street light task 0.19 km north of the worker's default location."""
    return create_issue(
        citizen['id'], STREET_LIGHT_LOCATION, worker['id'],
        title='Fix Street Light near DLF IT Park'
    )


@pytest.fixture
def worker_tasks(create_issue, citizen, worker):
    """Three tasks around Sector V, created farthest-first."""
    garbage = create_issue(citizen['id'], GARBAGE_LOCATION, worker['id'],
                           title='Garbage Collection Issue', category='waste-management')
    pipeline = create_issue(citizen['id'], PIPELINE_LOCATION, worker['id'],
                            title='Water Pipeline Leakage', category='water-supply')
    light = create_issue(citizen['id'], STREET_LIGHT_LOCATION, worker['id'],
                         title='Fix Street Light')
    return {'garbage': garbage, 'pipeline': pipeline, 'light': light}
