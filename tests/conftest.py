import pytest

from app import create_app
from app.config import TestConfig
from app.extensions import db as _db
from app.schemas import ResourceCreate
from app.services import auth as auth_service
from app.services import resources as resource_service


SAMPLE_SEARCH_PAYLOAD = {
    'searchInformation': {'totalResults': '1234'},
    'items': [
        {
            'title': 'Calculus 1 | Khan Academy',
            'snippet': 'Limits, derivatives and integrals.',
            'link': 'https://www.khanacademy.org/math/calculus-1',
            'pagemap': {
                'cse_thumbnail': [{'src': 'https://img.example.org/calc.png'}],
                'metatags': [{'date.published': '2023-01-15'}],
            },
        },
        {
            'title': 'Broken link',
            'snippet': 'An item whose link is not a URL.',
            'link': 'not-a-url',
        },
    ],
}


class FakeSearchClient:
    """Stands in for CustomSearchClient and records every call."""

    def __init__(self, payload=None):
        self.payload = payload if payload is not None else SAMPLE_SEARCH_PAYLOAD
        self.calls = []
        self.error = None

    def list(self, query, start, num):
        self.calls.append({'query': query, 'start': start, 'num': num})
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def app():
    """Create a test Flask application with SQLite in-memory database."""
    application = create_app(TestConfig)

    with application.app_context():
        _db.create_all()

        yield application

        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def search_client(app):
    fake = FakeSearchClient()
    app.extensions['search_client'] = fake
    return fake


@pytest.fixture
def make_user(app):
    """Register a user directly and return ``(user, auth_headers)``."""
    def _make(email='student@learnhub.io', role='STUDENT', name='Test User', password='pw123456'):
        user = auth_service.register(email, password, name)
        if role != 'STUDENT':
            auth_service.set_role(email, role)
        token = auth_service.issue_token(user.id)
        return user, {'Authorization': f'Bearer {token}'}
    return _make


@pytest.fixture
def student_headers(make_user):
    return make_user()[1]


@pytest.fixture
def teacher_headers(make_user):
    return make_user('teacher@learnhub.io', role='TEACHER', name='Teacher')[1]


@pytest.fixture
def admin_headers(make_user):
    return make_user('admin@learnhub.io', role='ADMIN', name='Admin')[1]


@pytest.fixture
def make_resource(app):
    """Create a catalogued resource through the service layer."""
    def _make(**overrides):
        fields = {
            'title': 'Intro to Calculus',
            'url': 'https://www.coursera.org/learn/calculus',
            'type': 'COURSE',
            'difficulty': 'BEGINNER',
            'subject': 'Mathematics',
        }
        fields.update(overrides)
        return resource_service.create_resource(ResourceCreate(**fields))
    return _make
