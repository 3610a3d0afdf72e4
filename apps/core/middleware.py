# apps/core/middleware.py
import logging

from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import redirect

from .backend import BackendUnauthorized
from .session import clear_auth
from .utils import login_url, role_from_path

logger = logging.getLogger(__name__)


class BackendAuthMiddleware:
    """
    Send users back to their login page when the backend rejects their session.

    Any view may let ``BackendUnauthorized`` escape; the cached credentials
    for that role are dropped here. JSON endpoints get a 401 body instead
    of a redirect.
    """
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not isinstance(exception, BackendUnauthorized):
            return None

        role = exception.role or role_from_path(request.path)
        logger.info('Backend session expired for %s on %s', role, request.path)
        clear_auth(request, role)

        if '/api/' in request.path:
            return JsonResponse({
                'success': False,
                'error': 'Your session has expired. Please log in again.',
            }, status=401)

        messages.error(request, 'Your session has expired. Please log in again.')
        return redirect(login_url(role))
