# apps/dashboard/admin_views.py
"""Admin management pages for assessors, courses and admin accounts"""
import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from apps.core.backend import BackendError, unwrap
from apps.core.choices import ASSESSOR_TYPE_CHOICES, COURSE_STATUS_CHOICES, EXPERTISE_CHOICES
from apps.core.decorators import admin_required
from apps.core.search import filter_records
from apps.core.utils import first_error, is_object_id

from .serializers import AdminAccountSerializer, AssessorSerializer, CourseSerializer

logger = logging.getLogger(__name__)

ASSESSOR_SEARCH_FIELDS = ('assessorId', 'fullName', 'email', 'expertise', 'assessorType')
COURSE_SEARCH_FIELDS = ('name', 'description', 'status')
ADMIN_SEARCH_FIELDS = ('fullName', 'email', 'adminId')


def _list_page(request, endpoint, fields, template, context_name, extra_context=None, method='get'):
    """Fetch a collection, filter it by ``?q=`` and render the table page"""
    query = request.GET.get('q', '')
    records = []
    try:
        call = request.backend.post if method == 'post' else request.backend.get
        records = unwrap(call(endpoint), default=[])
    except BackendError as exc:
        logger.error('Failed to load %s: %s', endpoint, exc.message)
        messages.error(request, f'Error loading {context_name}')

    context = {
        context_name: filter_records(records, query, fields),
        'query': query,
    }
    context.update(extra_context or {})
    return render(request, template, context)


def _save_record(request, serializer_class, create, update, record_id, label):
    """Validate a posted form, then create or update through the backend"""
    editing = bool(record_id)
    serializer = serializer_class(data=request.POST, context={'editing': editing})
    if not serializer.is_valid():
        messages.error(request, first_error(serializer.errors))
        return False

    try:
        if editing:
            update(record_id, serializer.validated_data)
        else:
            create(serializer.validated_data)
    except BackendError as exc:
        logger.error('Saving %s failed: %s', label, exc.message)
        messages.error(request, exc.message or f'Error saving {label} data')
        return False

    messages.success(request, f"{label.capitalize()} {'updated' if editing else 'created'} successfully")
    return True


def _delete_record(request, endpoint, label):
    try:
        request.backend.delete(endpoint)
    except BackendError as exc:
        logger.error('Deleting %s via %s failed: %s', label, endpoint, exc.message)
        messages.error(request, exc.message or f'Failed to delete {label}')
        return False
    messages.success(request, f'{label.capitalize()} deleted successfully')
    return True


def _checked_id(request, record_id, label):
    if record_id and not is_object_id(record_id):
        messages.error(request, f'Invalid {label} ID')
        return False
    return True


# ========== ASSESSORS ==========

ASSESSOR_FORM_CONTEXT = {
    'expertise_choices': EXPERTISE_CHOICES,
    'assessor_type_choices': ASSESSOR_TYPE_CHOICES,
}


@admin_required
def assessor_list(request):
    # The backend serves the assessor list on POST
    return _list_page(
        request, '/assessor/all', ASSESSOR_SEARCH_FIELDS,
        'dashboard/assessors.html', 'assessors', ASSESSOR_FORM_CONTEXT, method='post',
    )


@admin_required
@require_POST
def save_assessor(request, assessor_id=None):
    if _checked_id(request, assessor_id, 'assessor'):
        _save_record(
            request,
            AssessorSerializer,
            lambda data: request.backend.post('/assessor/register', json=data),
            lambda pk, data: request.backend.put(f'/assessor/{pk}', json=data),
            assessor_id,
            'assessor',
        )
    return redirect('dashboard:assessors')


@admin_required
@require_POST
def delete_assessor(request, assessor_id):
    if _checked_id(request, assessor_id, 'assessor'):
        _delete_record(request, f'/assessor/{assessor_id}', 'assessor')
    return redirect('dashboard:assessors')


def assigned_applicant_rows(assessor):
    """
    Normalise an assessor's assigned applicants.

    Entries may hold a populated applicant under ``applicantId`` or just
    its id, depending on how the backend loaded them.
    """
    rows = []
    for entry in assessor.get('assignedApplicants') or []:
        applicant = entry.get('applicantId')
        populated = isinstance(applicant, dict) and applicant.get('_id')
        info = (applicant or {}).get('personalInfo') if populated else None
        if info:
            name = f"{info.get('lastname') or ''}, {info.get('firstname') or ''}".strip(', ')
        else:
            name = entry.get('fullName') or 'No name provided'
        rows.append({
            '_id': applicant['_id'] if populated else entry.get('_id') or applicant,
            'applicantId': (applicant.get('applicantId') if populated else applicant) or 'N/A',
            'name': name or 'No name provided',
            'course': (info or {}).get('firstPriorityCourse') or entry.get('course') or 'Not specified',
            'status': (applicant.get('status') if populated else None) or entry.get('status') or 'Under Assessment',
            'dateAssigned': entry.get('dateAssigned'),
        })
    return rows


@admin_required
def assessor_profile(request, assessor_id):
    if not is_object_id(assessor_id):
        messages.error(request, 'Invalid assessor ID')
        return redirect('dashboard:assessors')

    try:
        assessor = unwrap(request.backend.get(f'/assessor/{assessor_id}'), default={})
    except BackendError as exc:
        logger.error('Failed to load assessor %s: %s', assessor_id, exc.message)
        messages.error(request, exc.message or 'Failed to load profile data. Please try again.')
        return redirect('dashboard:assessors')

    return render(request, 'dashboard/assessor_profile.html', {
        'assessor': assessor,
        'assigned_applicants': assigned_applicant_rows(assessor),
        **ASSESSOR_FORM_CONTEXT,
    })


# ========== COURSES ==========

@admin_required
def course_list(request):
    stats = {}
    try:
        stats = unwrap(request.backend.get('/api/dashboard/stats'), default={})
    except BackendError as exc:
        logger.warning('Course stats unavailable: %s', exc.message)
    return _list_page(
        request, '/api/courses', COURSE_SEARCH_FIELDS,
        'dashboard/courses.html', 'courses',
        {'stats': stats, 'course_status_choices': COURSE_STATUS_CHOICES},
    )


@admin_required
@require_POST
def save_course(request, course_id=None):
    if _checked_id(request, course_id, 'course'):
        _save_record(
            request,
            CourseSerializer,
            lambda data: request.backend.post('/api/courses', json=data),
            lambda pk, data: request.backend.put(f'/api/courses/{pk}', json=data),
            course_id,
            'course',
        )
    return redirect('dashboard:courses')


@admin_required
@require_POST
def delete_course(request, course_id):
    if _checked_id(request, course_id, 'course'):
        _delete_record(request, f'/api/courses/{course_id}', 'course')
    return redirect('dashboard:courses')


# ========== ADMINS ==========

@admin_required
def admin_list(request):
    return _list_page(
        request, '/api/admin/admins', ADMIN_SEARCH_FIELDS, 'dashboard/admins.html', 'admins',
    )


@admin_required
@require_POST
def save_admin(request, admin_id=None):
    if _checked_id(request, admin_id, 'admin'):
        _save_record(
            request,
            AdminAccountSerializer,
            lambda data: request.backend.post('/admin/register', json=data),
            lambda pk, data: request.backend.put(f'/admin/{pk}', json=data),
            admin_id,
            'admin',
        )
    return redirect('dashboard:admins')


@admin_required
@require_POST
def delete_admin(request, admin_id):
    if not _checked_id(request, admin_id, 'admin'):
        return redirect('dashboard:admins')
    if admin_id == str(request.portal_user.get('_id') or request.portal_user.get('id') or ''):
        messages.error(request, 'You cannot delete your own account')
        return redirect('dashboard:admins')
    _delete_record(request, f'/admin/{admin_id}', 'admin')
    return redirect('dashboard:admins')
