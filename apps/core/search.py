# apps/core/search.py
"""Case-insensitive substring search over lists fetched from the backend"""


def lookup(record, path):
    """Resolve a dotted path such as ``personalInfo.firstname`` in nested dicts"""
    value = record
    for part in path.split('.'):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def matches(record, term, fields):
    for field in fields:
        value = lookup(record, field)
        if value is not None and term in str(value).lower():
            return True
    return False


def filter_records(records, term, fields):
    """Keep the records where any of ``fields`` contains ``term``; a blank term keeps all"""
    records = list(records or [])
    term = (term or '').strip().lower()
    if not term:
        return records
    return [record for record in records if matches(record, term, fields)]


def filter_by_status(records, status):
    if not status:
        return list(records or [])
    status = status.lower()
    return [r for r in records or [] if str(r.get('status') or '').lower() == status]
