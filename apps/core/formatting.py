# apps/core/formatting.py
"""Display helpers shared by the portal's tables and profile pages"""
import re
from datetime import date, datetime

from django.utils.dateparse import parse_date, parse_datetime

from .choices import EXPERTISE_CHOICES, FILE_CATEGORIES, OTHER_FILES

EXPERTISE_LABELS = dict(EXPERTISE_CHOICES)

FILE_ICONS = {
    'pdf': 'fa-file-pdf',
    'doc': 'fa-file-word',
    'docx': 'fa-file-word',
    'xls': 'fa-file-excel',
    'xlsx': 'fa-file-excel',
    'jpg': 'fa-file-image',
    'jpeg': 'fa-file-image',
    'png': 'fa-file-image',
    'gif': 'fa-file-image',
}

FILE_STATUS_CLASSES = {
    'approved': 'status-approved',
    'rejected': 'status-rejected',
    'reviewed': 'status-viewed',
    'pending': 'status-pending',
}


def format_status(status):
    """'under_assessment' -> 'Under Assessment'; hyphenated statuses keep their dash"""
    if not status:
        return 'Pending'
    words = [word for word in re.split(r'[_\s]+', str(status).strip()) if word]
    return ' '.join(word if word == '-' else word[:1].upper() + word[1:].lower() for word in words)


def status_class(status):
    """CSS badge class for an applicant status"""
    if not status:
        return 'status-pending'
    slug = re.sub(r'[^a-z0-9]+', '-', str(status).lower()).strip('-')
    return f'status-{slug}'


def file_status_class(status):
    return FILE_STATUS_CLASSES.get(str(status or 'pending').lower(), 'status-pending')


def _to_date(value):
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return value
    if not value:
        return None
    text = str(value).strip()
    try:
        return parse_datetime(text) or parse_date(text)
    except ValueError:
        return None


def format_date(value, style='long'):
    """'2024-01-05T08:00:00Z' -> 'January 5, 2024' ('Jan 5, 2024' with style='short')"""
    parsed = _to_date(value)
    if parsed is None:
        return 'N/A'
    month = parsed.strftime('%b' if style == 'short' else '%B')
    return f'{month} {parsed.day}, {parsed.year}'


def format_expertise(expertise):
    if not expertise:
        return 'N/A'
    if expertise in EXPERTISE_LABELS:
        return EXPERTISE_LABELS[expertise]
    return ' '.join(word.capitalize() for word in str(expertise).split('_'))


def capitalize_first(value):
    if not value:
        return ''
    value = str(value)
    return value[:1].upper() + value[1:]


def full_name(personal_info, last_first=False):
    """Join an applicant's name parts; ``last_first`` gives 'Dela Cruz, Juan M.'"""
    info = personal_info or {}
    first = (info.get('firstname') or '').strip()
    middle = (info.get('middlename') or '').strip()
    last = (info.get('lastname') or '').strip()
    suffix = (info.get('suffix') or '').strip()

    if last_first:
        name = last
        if first:
            name = f'{name}, {first}' if name else first
        rest = [part for part in (middle, suffix) if part]
        return ' '.join([name] + rest).strip() if name or rest else ''

    return ' '.join(part for part in (first, middle, last, suffix) if part)


def display_applicant_id(applicant):
    """The human facing applicant id, derived from ``_id`` when missing"""
    if not applicant:
        return 'N/A'
    if applicant.get('applicantId'):
        return applicant['applicantId']
    raw_id = applicant.get('_id')
    if not raw_id:
        return 'N/A'
    return f'APP{str(raw_id)[:8].upper()}'


def file_name(file_record):
    record = file_record or {}
    if record.get('filename'):
        return record['filename']
    path = record.get('path') or ''
    return path.split('/')[-1] if path else 'Unknown'


def file_icon(filename):
    name = str(filename or '')
    extension = name.rsplit('.', 1)[-1].lower() if '.' in name else ''
    return FILE_ICONS.get(extension, 'fa-file')


def group_files(files):
    """
    Split an applicant's files into the document table categories.

    Returns a list of ``{'key', 'slug', 'label', 'files'}`` in display order;
    anything without a known category lands in 'Others'.
    """
    files = files or []
    known = {key for key, _, _ in FILE_CATEGORIES}
    groups = []
    for key, slug, label in FILE_CATEGORIES:
        groups.append({
            'key': key,
            'slug': slug,
            'label': label,
            'files': [f for f in files if f.get('category') == key],
        })
    other_key, other_slug, other_label = OTHER_FILES
    groups.append({
        'key': other_key,
        'slug': other_slug,
        'label': other_label,
        'files': [f for f in files if f.get('category') not in known],
    })
    return groups


def pluralize_files(count):
    return f"{count} file{'' if count == 1 else 's'}"
