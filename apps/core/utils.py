# apps/core/utils.py
import re

from django.urls import reverse

from .choices import LOGIN_URL_NAMES, ROLE_ADMIN, ROLE_APPLICANT, ROLE_ASSESSOR

OBJECT_ID_RE = re.compile(r'[0-9a-fA-F]{24}')


def is_object_id(value):
    """Backend record ids are 24-character hex strings"""
    return bool(value) and bool(OBJECT_ID_RE.fullmatch(str(value)))


def login_url(role):
    return reverse(LOGIN_URL_NAMES.get(role, LOGIN_URL_NAMES[ROLE_APPLICANT]))


def role_from_path(path):
    """Which role's page set a URL path belongs to"""
    if path.startswith('/admin/'):
        return ROLE_ADMIN
    if path.startswith('/assessor/'):
        return ROLE_ASSESSOR
    return ROLE_APPLICANT


def first_error(errors, default='Please check the form and try again'):
    """Flatten DRF serializer errors down to the first message"""
    if isinstance(errors, dict):
        for value in errors.values():
            message = first_error(value, default=None)
            if message:
                return message
        return default
    if isinstance(errors, (list, tuple)):
        for value in errors:
            message = first_error(value, default=None)
            if message:
                return message
        return default
    return str(errors) if errors else default


def record_id(record):
    if not isinstance(record, dict):
        return None
    return record.get('_id') or record.get('id')
