# apps/core/templatetags/portal_tags.py
from django import template

from apps.core import formatting
from apps.core.utils import record_id as _record_id

register = template.Library()


@register.filter
def record_id(record):
    """Backend ids start with an underscore, which templates cannot reach"""
    return _record_id(record) or ''


@register.filter
def status_label(status):
    return formatting.format_status(status)


@register.filter
def status_class(status):
    return formatting.status_class(status)


@register.filter
def file_status_class(status):
    return formatting.file_status_class(status)


@register.filter
def portal_date(value, style='long'):
    return formatting.format_date(value, style)


@register.filter
def expertise(value):
    return formatting.format_expertise(value)


@register.filter
def capfirst_word(value):
    return formatting.capitalize_first(value)


@register.filter
def applicant_name(applicant, style=''):
    info = (applicant or {}).get('personalInfo')
    if info:
        return formatting.full_name(info, last_first=(style == 'last_first')) or 'N/A'
    return (applicant or {}).get('name') or 'N/A'


@register.filter
def applicant_id(applicant):
    return formatting.display_applicant_id(applicant)


@register.filter
def file_name(file_record):
    return formatting.file_name(file_record)


@register.filter
def file_icon(file_record):
    return formatting.file_icon(formatting.file_name(file_record))


@register.filter
def file_count(count):
    return formatting.pluralize_files(count)
