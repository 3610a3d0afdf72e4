# apps/core/decorators.py
import logging
from functools import wraps

from django.contrib import messages
from django.shortcuts import redirect

from .backend import BackendClient, BackendError, BackendUnauthorized
from .session import clear_auth, get_auth, update_user
from .utils import login_url

logger = logging.getLogger(__name__)


def portal_login_required(role):
    """
    Protect a page for one role.

    The cached session is checked first, then confirmed against the
    backend's ``/<role>/auth-status``. When the backend cannot be reached
    the cached user is trusted; when it says the session is gone the cache
    is cleared and the user is sent to the role's login page.

    The wrapped view gets ``request.portal_user`` and ``request.backend``.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            auth = get_auth(request, role)
            if not auth:
                return redirect(login_url(role))

            client = BackendClient.for_role(request, role)
            user = auth.get('user') or {}
            try:
                status_data = client.get(f'/{role}/auth-status')
            except BackendUnauthorized:
                status_data = {'authenticated': False}
            except BackendError as exc:
                logger.warning('Auth check for %s failed, using cached user: %s', role, exc.message)
                status_data = None

            if status_data is not None:
                if not status_data.get('authenticated'):
                    clear_auth(request, role)
                    messages.info(request, 'Please log in to continue.')
                    return redirect(login_url(role))
                update_user(request, role, status_data.get('user'))
                user = get_auth(request, role)['user']

            request.portal_user = user
            request.backend = client
            return view_func(request, *args, **kwargs)
        return _wrapped
    return decorator


applicant_required = portal_login_required('applicant')
admin_required = portal_login_required('admin')
assessor_required = portal_login_required('assessor')
