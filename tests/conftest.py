"""
Shared fixtures.

The backend is never contacted: ``backend`` replaces
``BackendClient.request`` with a router that answers from canned
responses and records every call. ``login_as`` seeds a role's cached
credentials into the test client's session.
"""
from unittest import mock

import pytest
from django.conf import settings as django_settings

from apps.core.backend import BackendClient
from apps.core.session import AUTH_SESSION_KEY

from .helpers import ADMIN_ID, APPLICANT_ID, ASSESSOR_ID, FakeBackend, session_store


@pytest.fixture(autouse=True)
def portal_settings(settings):
    settings.BACKEND_API_URL = 'http://backend.test/frontend/api'
    settings.BACKEND_TIMEOUT = 5
    settings.SESSION_ENGINE = 'django.contrib.sessions.backends.signed_cookies'
    return settings


@pytest.fixture
def backend():
    fake = FakeBackend()
    with mock.patch.object(BackendClient, 'request', autospec=True, side_effect=fake):
        yield fake


@pytest.fixture
def login_as(client, backend):
    """Cache credentials for ``role`` in the client session and accept them at auth-status"""
    def _login(role, user=None):
        user = user or {}
        session = session_store()
        session[AUTH_SESSION_KEY] = {
            role: {'user': user, 'token': 'test-token', 'cookies': {}},
        }
        session.save()
        client.cookies[django_settings.SESSION_COOKIE_NAME] = session.session_key
        backend.route('GET', f'/{role}/auth-status', {'authenticated': True, 'user': user})
        return user
    return _login


@pytest.fixture
def admin_client(client, login_as):
    login_as('admin', {'_id': ADMIN_ID, 'fullName': 'Ada Admin', 'email': 'ada@eteeap.test'})
    return client


@pytest.fixture
def assessor_client(client, login_as):
    login_as('assessor', {
        '_id': ASSESSOR_ID,
        'fullName': 'Sam Assessor',
        'email': 'sam@eteeap.test',
        'assessorId': 'AS-0001',
        'isApproved': True,
    })
    return client


@pytest.fixture
def applicant_client(client, login_as):
    login_as('applicant', {'userId': APPLICANT_ID, 'email': 'juan@eteeap.test', 'status': 'Pending Review'})
    return client


@pytest.fixture
def applicant_record():
    return {
        '_id': APPLICANT_ID,
        'applicantId': 'APP-2024-0001',
        'email': 'juan@eteeap.test',
        'status': 'Under Assessment',
        'personalInfo': {
            'firstname': 'Juan',
            'middlename': 'M.',
            'lastname': 'Dela Cruz',
            'firstPriorityCourse': 'BS Information Technology',
            'emailAddress': 'juan@eteeap.test',
        },
        'files': [
            {'_id': 'f1', 'filename': 'resume.pdf', 'category': 'resume', 'status': 'pending'},
            {'_id': 'f2', 'filename': 'photo.png', 'category': 'misc'},
        ],
        'evaluations': [],
    }
