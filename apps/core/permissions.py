# apps/core/permissions.py
from rest_framework.permissions import BasePermission

from .choices import ROLE_ADMIN, ROLE_ASSESSOR
from .session import get_auth


class HasPortalRole(BasePermission):
    """Allow requests whose session holds credentials for ``role``"""
    role = None
    message = 'Authentication required'

    def has_permission(self, request, view):
        return get_auth(request, self.role) is not None


class IsPortalAdmin(HasPortalRole):
    role = ROLE_ADMIN
    message = 'Admin access required'


class IsPortalAssessor(HasPortalRole):
    role = ROLE_ASSESSOR
    message = 'Assessor access required'
