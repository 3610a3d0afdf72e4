"""Test doubles and session helpers shared across the suite"""
import json
from collections import namedtuple
from importlib import import_module

from django.conf import settings
from django.contrib.messages.storage.cookie import MessageDecoder
from django.contrib.messages.storage.session import SessionStorage

from apps.core.backend import BackendError

ADMIN_ID = '64b7f0c2a1e4d3b2c1a09f01'
ASSESSOR_ID = '64b7f0c2a1e4d3b2c1a09f02'
APPLICANT_ID = '64b7f0c2a1e4d3b2c1a09f03'
COURSE_ID = '64b7f0c2a1e4d3b2c1a09f04'

BackendCall = namedtuple('BackendCall', ['method', 'endpoint', 'json', 'params', 'data', 'files'])


class FakeBackend:
    """Answers ``BackendClient`` calls from a ``(method, endpoint)`` table"""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def route(self, method, endpoint, response):
        """``response`` may be a payload or an exception instance to raise"""
        self.routes[(method, endpoint)] = response

    def __call__(self, client, method, endpoint, json=None, params=None, data=None, files=None):
        self.calls.append(BackendCall(method, endpoint, json, params, data, files))
        if (method, endpoint) not in self.routes:
            raise BackendError(f'No route for {method} {endpoint}', status=404)
        response = self.routes[(method, endpoint)]
        if isinstance(response, Exception):
            raise response
        return response

    def called(self, method, endpoint):
        return [call for call in self.calls if call.method == method and call.endpoint == endpoint]


def session_store(session_key=None):
    engine = import_module(settings.SESSION_ENGINE)
    return engine.SessionStore(session_key)


def session_data(client):
    cookie = client.cookies.get(settings.SESSION_COOKIE_NAME)
    return session_store(cookie.value if cookie else None)


def flashed_messages(client):
    """Texts of the messages queued in the client's session"""
    raw = session_data(client).get(SessionStorage.session_key)
    if not raw:
        return []
    if isinstance(raw, str):
        raw = json.loads(raw, cls=MessageDecoder)
    return [str(message.message) for message in raw]
