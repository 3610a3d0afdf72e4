# apps/core/backend.py
"""
HTTP client for the ETEEAP backend API.

Every page in the portal reads and writes its data through this module.
Responses use the backend's ``{success, data, error}`` envelope; failures
are raised as ``BackendError`` so views can turn them into messages.
"""
import logging

import requests
from django.conf import settings

from . import session as portal_session

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """Raised when a backend call fails or answers with a non-2xx status"""

    def __init__(self, message='API request failed', status=500, data=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data

    def __str__(self):
        return f'{self.message} (status {self.status})'


class BackendUnauthorized(Exception):
    """
    The backend rejected the stored credentials (HTTP 401).

    Kept outside the ``BackendError`` hierarchy: page views handle
    ``BackendError`` themselves, while this one must reach
    ``BackendAuthMiddleware``.
    """

    def __init__(self, message='Not authenticated', status=401, data=None, role=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data
        self.role = role


def error_message(payload, default='API request failed'):
    """Pull a human readable message out of an error payload"""
    if isinstance(payload, dict):
        return payload.get('error') or payload.get('message') or default
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return default


def unwrap(payload, key='data', default=None):
    """Return ``payload[key]`` for enveloped responses, else the payload itself"""
    if isinstance(payload, dict) and key in payload:
        value = payload[key]
        return default if value is None else value
    if payload is None:
        return default
    return payload


class BackendClient:
    """
    Thin wrapper around ``requests.Session`` bound to one portal role.

    The bearer token and cookies handed out by the backend at login are
    replayed on every call, so the backend sees the same session the
    browser would have had.
    """

    def __init__(self, role=None, token=None, cookies=None, base_url=None, timeout=None):
        self.role = role
        self.token = token
        self.base_url = (base_url or settings.BACKEND_API_URL).rstrip('/')
        self.timeout = timeout or settings.BACKEND_TIMEOUT
        self.session = requests.Session()
        if cookies:
            self.session.cookies.update(cookies)

    @classmethod
    def for_role(cls, request, role):
        """Build a client carrying the credentials cached for ``role``"""
        auth = portal_session.get_auth(request, role) or {}
        return cls(role=role, token=auth.get('token'), cookies=auth.get('cookies'))

    def build_url(self, endpoint):
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def cookies(self):
        return self.session.cookies.get_dict()

    def request(self, method, endpoint, json=None, params=None, data=None, files=None):
        url = self.build_url(endpoint)
        headers = {'Accept': 'application/json'}
        if self.token:
            headers['Authorization'] = f'Bearer {self.token}'

        try:
            response = self.session.request(
                method,
                url,
                json=json,
                params=params,
                data=data,
                files=files,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            logger.error('Backend %s %s timed out', method, endpoint)
            raise BackendError('Request timed out', status=503) from exc
        except requests.RequestException as exc:
            logger.error('Backend %s %s failed: %s', method, endpoint, exc)
            raise BackendError('Network error', status=503) from exc

        return self._handle_response(method, endpoint, response)

    def _handle_response(self, method, endpoint, response):
        try:
            payload = response.json()
        except ValueError:
            payload = response.text

        if not response.ok:
            message = error_message(payload)
            logger.warning(
                'Backend %s %s returned %s: %s',
                method, endpoint, response.status_code, message,
            )
            if response.status_code == 401:
                raise BackendUnauthorized(message, data=payload, role=self.role)
            raise BackendError(message, status=response.status_code, data=payload)

        if isinstance(payload, dict) and payload.get('success') is False:
            message = error_message(payload, default='Request failed')
            logger.warning('Backend %s %s reported failure: %s', method, endpoint, message)
            raise BackendError(message, status=response.status_code, data=payload)

        return payload

    # ========== HTTP METHOD SHORTCUTS ==========

    def get(self, endpoint, params=None):
        return self.request('GET', endpoint, params=params)

    def post(self, endpoint, json=None, data=None, files=None):
        return self.request('POST', endpoint, json=json, data=data, files=files)

    def put(self, endpoint, json=None):
        return self.request('PUT', endpoint, json=json)

    def delete(self, endpoint):
        return self.request('DELETE', endpoint)
