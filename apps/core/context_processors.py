# apps/core/context_processors.py
from .session import get_user
from .utils import role_from_path


def portal(request):
    """Expose the current page set's role and cached user to every template"""
    role = role_from_path(request.path)
    return {
        'portal_role': role,
        'portal_user': get_user(request, role) if hasattr(request, 'session') else None,
    }
