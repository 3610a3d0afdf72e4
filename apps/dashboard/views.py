# apps/dashboard/views.py
import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.backend import BackendClient, BackendError, unwrap
from apps.core.choices import ROLE_ADMIN
from apps.core.decorators import admin_required
from apps.core.formatting import group_files
from apps.core.permissions import IsPortalAdmin
from apps.core.search import filter_by_status, filter_records
from apps.core.utils import first_error, is_object_id
from apps.evaluations.scoring import evaluate, latest_evaluation, score_rows
from apps.evaluations.workflow import (
    ALL_STATUSES, ApplicantStatus, InvalidTransition, allowed_targets, manual_targets, status_counts,
    transition,
)

from .serializers import AssignAssessorSerializer, StatusUpdateSerializer

logger = logging.getLogger(__name__)

APPLICANT_SEARCH_FIELDS = (
    'applicantId',
    'email',
    'status',
    'personalInfo.firstname',
    'personalInfo.middlename',
    'personalInfo.lastname',
    'personalInfo.firstPriorityCourse',
)

RECENT_APPLICANTS = 5


def fetch_applicants(client):
    return unwrap(client.get('/api/admin/applicants'), default=[])


def has_assessor(applicant):
    return bool(applicant.get('assignedAssessor') or applicant.get('assessorId'))


def dashboard_summary(applicants, stats=None):
    """Counter cards for the admin dashboard"""
    counts = status_counts(applicants)
    summary = {
        'total_applicants': counts['total'],
        'new_applicants': counts[ApplicantStatus.PENDING_REVIEW],
        'without_assessor': sum(1 for a in applicants if not has_assessor(a)),
        'rejected': counts[ApplicantStatus.REJECTED],
        'under_assessment': counts[ApplicantStatus.UNDER_ASSESSMENT],
        'passed': counts[ApplicantStatus.EVALUATED_PASSED],
        'failed': counts[ApplicantStatus.EVALUATED_FAILED],
        'status_counts': counts,
    }
    for key, value in (stats or {}).items():
        summary.setdefault(key, value)
    return summary


# ========== DASHBOARD ==========

@admin_required
def dashboard(request):
    applicants = []
    try:
        applicants = fetch_applicants(request.backend)
    except BackendError as exc:
        logger.error('Failed to fetch applicants for dashboard: %s', exc.message)
        messages.error(request, exc.message or 'Failed to fetch applicants')

    stats = {}
    try:
        stats = unwrap(request.backend.get('/api/dashboard/stats'), default={})
    except BackendError as exc:
        logger.warning('Dashboard stats unavailable: %s', exc.message)

    return render(request, 'dashboard/dashboard.html', {
        'summary': dashboard_summary(applicants, stats if isinstance(stats, dict) else {}),
        'recent_applicants': applicants[:RECENT_APPLICANTS],
    })


@api_view(['GET'])
@permission_classes([IsPortalAdmin])
def dashboard_stats(request):
    """Dashboard counters as JSON"""
    client = BackendClient.for_role(request, ROLE_ADMIN)
    try:
        applicants = fetch_applicants(client)
    except BackendError as exc:
        return Response({
            'success': False,
            'error': exc.message,
        }, status=status.HTTP_502_BAD_GATEWAY)

    return Response({
        'success': True,
        'data': dashboard_summary(applicants),
    }, status=status.HTTP_200_OK)


# ========== APPLICANTS ==========

@admin_required
def applicant_list(request):
    query = request.GET.get('q', '')
    status_filter = request.GET.get('status', '')
    applicants = []
    try:
        applicants = fetch_applicants(request.backend)
    except BackendError as exc:
        logger.error('Failed to fetch applicants: %s', exc.message)
        messages.error(request, exc.message or 'Failed to fetch applicants')

    applicants = filter_by_status(applicants, status_filter)
    applicants = filter_records(applicants, query, APPLICANT_SEARCH_FIELDS)
    return render(request, 'dashboard/applicants.html', {
        'applicants': applicants,
        'query': query,
        'status_filter': status_filter,
        'statuses': ALL_STATUSES,
    })


def _load_applicant(client, applicant_id):
    return unwrap(client.get(f'/api/admin/applicants/{applicant_id}'), default={})


def _change_status(request, applicant_id, target, action, success_message):
    """
    Move an applicant to ``target`` through ``action`` on the backend.

    The move is checked against the lifecycle first so illegal transitions
    never reach the backend. Returns True on success.
    """
    if not is_object_id(applicant_id):
        messages.error(request, 'Invalid applicant ID')
        return False
    try:
        applicant = _load_applicant(request.backend, applicant_id)
        transition(applicant.get('status'), target)
        action(applicant)
    except InvalidTransition as exc:
        messages.error(request, str(exc))
        return False
    except BackendError as exc:
        logger.error('Status change to %s for %s failed: %s', target, applicant_id, exc.message)
        messages.error(request, exc.message)
        return False

    logger.info('Applicant %s moved to %s', applicant_id, target)
    messages.success(request, success_message)
    return True


@admin_required
@require_POST
def reject_applicant(request, applicant_id):
    _change_status(
        request,
        applicant_id,
        ApplicantStatus.REJECTED,
        lambda applicant: request.backend.post(f'/api/admin/applicants/{applicant_id}/reject'),
        'Applicant rejected successfully',
    )
    if request.POST.get('next') == 'detail':
        return redirect('dashboard:applicant-detail', applicant_id=applicant_id)
    return redirect('dashboard:applicants')


@admin_required
def applicant_detail(request, applicant_id):
    """Applicant profile; approved applicants also get the assessor picker"""
    if not is_object_id(applicant_id):
        messages.error(request, 'Invalid applicant ID')
        return redirect('dashboard:applicants')

    try:
        applicant = _load_applicant(request.backend, applicant_id)
    except BackendError as exc:
        logger.error('Failed to load applicant %s: %s', applicant_id, exc.message)
        messages.error(request, exc.message or 'Failed to load applicant data')
        return redirect('dashboard:applicants')

    current = applicant.get('status')
    assessors = []
    if ApplicantStatus.UNDER_ASSESSMENT in allowed_targets(current):
        try:
            assessors = unwrap(request.backend.get('/api/admin/available-assessors'), default=[])
        except BackendError as exc:
            logger.warning('Could not load available assessors: %s', exc.message)
            messages.error(request, exc.message or 'No assessors available')

    evaluation = latest_evaluation(applicant.get('evaluations'))
    result = evaluate(evaluation) if evaluation else None
    return render(request, 'dashboard/applicant_detail.html', {
        'applicant': applicant,
        'info': applicant.get('personalInfo') or {},
        'file_groups': group_files(applicant.get('files')),
        'assessors': assessors,
        'allowed_statuses': manual_targets(current),
        'can_approve': ApplicantStatus.APPROVED in allowed_targets(current),
        'can_assign': ApplicantStatus.UNDER_ASSESSMENT in allowed_targets(current),
        'can_reject': ApplicantStatus.REJECTED in allowed_targets(current),
        'evaluation': evaluation,
        'result': result,
        'rows': score_rows(result) if result else [],
    })


@admin_required
@require_POST
def approve_applicant(request, applicant_id):
    _change_status(
        request,
        applicant_id,
        ApplicantStatus.APPROVED,
        lambda applicant: request.backend.post(f'/api/admin/applicants/{applicant_id}/approve'),
        'Application approved. Please assign an assessor.',
    )
    return redirect('dashboard:applicant-detail', applicant_id=applicant_id)


@admin_required
@require_POST
def assign_assessor(request, applicant_id):
    serializer = AssignAssessorSerializer(data=request.POST)
    if not serializer.is_valid():
        messages.error(request, first_error(serializer.errors, 'Please select an assessor'))
        return redirect('dashboard:applicant-detail', applicant_id=applicant_id)

    assessor_id = serializer.validated_data['assessorId']
    _change_status(
        request,
        applicant_id,
        ApplicantStatus.UNDER_ASSESSMENT,
        lambda applicant: request.backend.post(
            f'/api/admin/applicants/{applicant_id}/assign-assessor',
            json={'assessorId': assessor_id, 'applicantId': applicant_id},
        ),
        'Assessor assigned successfully!',
    )
    return redirect('dashboard:applicant-detail', applicant_id=applicant_id)


@admin_required
@require_POST
def update_status(request, applicant_id):
    serializer = StatusUpdateSerializer(data=request.POST)
    if not serializer.is_valid():
        messages.error(request, first_error(serializer.errors))
        return redirect('dashboard:applicant-detail', applicant_id=applicant_id)

    target = serializer.validated_data['status']
    _change_status(
        request,
        applicant_id,
        target,
        lambda applicant: request.backend.post(
            f'/api/admin/applicants/{applicant_id}/status',
            json={'status': target},
        ),
        f'Status updated to {target}',
    )
    return redirect('dashboard:applicant-detail', applicant_id=applicant_id)


# ========== DOCUMENTS ==========

@admin_required
def documents(request):
    """Every applicant's files, grouped by document category"""
    query = request.GET.get('q', '')
    applicants = []
    try:
        applicants = fetch_applicants(request.backend)
    except BackendError as exc:
        logger.error('Failed to fetch applicants for documents: %s', exc.message)
        messages.error(request, exc.message or 'Failed to fetch documents')

    applicants = filter_records(applicants, query, APPLICANT_SEARCH_FIELDS)
    rows = [
        {
            'applicant': applicant,
            'groups': group_files(applicant.get('files')),
            'file_total': len(applicant.get('files') or []),
        }
        for applicant in applicants
    ]
    return render(request, 'dashboard/documents.html', {'rows': rows, 'query': query})
