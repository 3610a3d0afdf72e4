# apps/core/session.py
"""Per-role auth state cached in the Django session"""

AUTH_SESSION_KEY = 'portal_auth'


def _auth_store(request):
    return request.session.setdefault(AUTH_SESSION_KEY, {})


def store_auth(request, role, user, token=None, cookies=None):
    store = _auth_store(request)
    store[role] = {
        'user': user or {},
        'token': token,
        'cookies': cookies or {},
    }
    request.session.modified = True


def get_auth(request, role):
    return request.session.get(AUTH_SESSION_KEY, {}).get(role)


def get_user(request, role):
    auth = get_auth(request, role)
    return auth['user'] if auth else None


def update_user(request, role, user):
    auth = get_auth(request, role)
    if auth is None or not user:
        return
    auth['user'] = {**auth.get('user', {}), **user}
    request.session.modified = True


def clear_auth(request, role=None):
    """Forget one role's credentials, or every role's when ``role`` is None"""
    store = request.session.get(AUTH_SESSION_KEY)
    if not store:
        return
    if role is None:
        del request.session[AUTH_SESSION_KEY]
    else:
        store.pop(role, None)
    request.session.modified = True


def user_id(user):
    """Backend id of a cached user; applicants log in with ``userId``"""
    if not user:
        return None
    return user.get('_id') or user.get('userId') or user.get('id')
