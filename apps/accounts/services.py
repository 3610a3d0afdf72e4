# apps/accounts/services.py
"""Login, registration and logout against the backend, per portal role"""
import logging

from apps.core.backend import BackendClient, BackendError, BackendUnauthorized, unwrap
from apps.core.choices import ROLE_ADMIN, ROLE_APPLICANT, ROLE_ASSESSOR
from apps.core.session import clear_auth, get_auth, store_auth

logger = logging.getLogger(__name__)

ROLE_ENDPOINTS = {
    ROLE_APPLICANT: {
        'login': '/api/login',
        'register': '/api/register',
        'logout': '/applicant/logout',
        'auth_status': '/applicant/auth-status',
    },
    ROLE_ADMIN: {
        'login': '/admin/login',
        'register': '/admin/register',
        'logout': '/admin/logout',
        'auth_status': '/admin/auth-status',
    },
    ROLE_ASSESSOR: {
        'login': '/assessor/login',
        'register': '/assessor/register',
        'logout': '/assessor/logout',
        'auth_status': '/assessor/auth-status',
    },
}


def _extract_user(role, payload, email):
    """The user record a login response describes"""
    user = None
    if isinstance(payload, dict):
        user = payload.get('user') or payload.get(role)
    if not isinstance(user, dict):
        data = unwrap(payload, default={})
        user = {k: v for k, v in data.items() if k != 'token'} if isinstance(data, dict) else {}
    user = dict(user)
    user.setdefault('email', email)
    return user


def _extract_token(payload):
    if not isinstance(payload, dict):
        return None
    data = payload.get('data')
    if isinstance(data, dict) and data.get('token'):
        return data['token']
    return payload.get('token')


def login(request, role, email, password, extra=None):
    """
    Log in to the backend as ``role`` and cache the session.

    Returns the cached user. Bad credentials surface as ``BackendError``.
    """
    client = BackendClient(role=role)
    body = {'email': email, 'password': password}
    body.update(extra or {})
    try:
        payload = client.post(ROLE_ENDPOINTS[role]['login'], json=body)
    except BackendUnauthorized as exc:
        raise BackendError(exc.message or 'Invalid email or password', status=401, data=exc.data) from exc

    user = _extract_user(role, payload, email)
    store_auth(request, role, user, token=_extract_token(payload), cookies=client.cookies())
    logger.info('%s %s logged in', role.capitalize(), email)
    return user


def register(role, payload):
    """Create an account; returns the backend's ``data`` block"""
    client = BackendClient(role=role)
    response = client.post(ROLE_ENDPOINTS[role]['register'], json=payload)
    logger.info('Registered new %s account for %s', role, payload.get('email'))
    return unwrap(response, default={})


def logout(request, role):
    """End the backend session; the local cache is cleared either way"""
    if get_auth(request, role) is None:
        return
    client = BackendClient.for_role(request, role)
    try:
        client.post(ROLE_ENDPOINTS[role]['logout'])
    except BackendError as exc:
        logger.warning('Backend logout for %s failed: %s', role, exc.message)
    finally:
        clear_auth(request, role)


def check_auth_status(request, role):
    """
    Ask the backend whether the cached ``role`` session is still valid.

    Returns ``(authenticated, user)``. When the backend cannot be reached
    the cached user is reported as authenticated.
    """
    auth = get_auth(request, role)
    if auth is None:
        return False, None

    client = BackendClient.for_role(request, role)
    try:
        status_data = client.get(ROLE_ENDPOINTS[role]['auth_status'])
    except BackendUnauthorized:
        clear_auth(request, role)
        return False, None
    except BackendError as exc:
        logger.warning('Auth status for %s unavailable, using cached user: %s', role, exc.message)
        return True, auth.get('user')

    if not status_data.get('authenticated'):
        clear_auth(request, role)
        return False, None
    user = {**auth.get('user', {}), **(status_data.get('user') or {})}
    store_auth(request, role, user, token=auth.get('token'), cookies=auth.get('cookies'))
    return True, user
