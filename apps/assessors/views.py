# apps/assessors/views.py
import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_POST

from apps.core.backend import BackendError, unwrap
from apps.core.choices import ROLE_ASSESSOR
from apps.core.decorators import assessor_required
from apps.core.formatting import display_applicant_id, group_files
from apps.core.search import filter_records
from apps.core.session import update_user
from apps.core.utils import first_error, is_object_id
from apps.evaluations import drafts, services
from apps.evaluations.scoring import (
    CATEGORIES, CATEGORIES_BY_KEY, MAX_TOTAL, PASSING_SCORE,
    add_points as accumulate, evaluate, final_status, scores_from_evaluation,
)
from apps.evaluations.serializers import AddPointsSerializer, CommentsSerializer, FinalizeSerializer
from apps.evaluations.workflow import ApplicantStatus, status_counts

logger = logging.getLogger(__name__)

APPLICANT_SEARCH_FIELDS = ('name', 'email', 'course', 'applicantId')


def fetch_assigned(client):
    return unwrap(client.get('/api/assessor/applicants'), default=[])


def assessor_summary(applicants):
    """Counter cards on the assessor dashboard"""
    counts = status_counts(applicants)
    total = counts['total']
    failed = counts[ApplicantStatus.EVALUATED_FAILED] + counts[ApplicantStatus.REJECTED]
    return {
        'total': total,
        'in_progress': counts[ApplicantStatus.UNDER_ASSESSMENT],
        'evaluated': counts[ApplicantStatus.EVALUATED_PASSED],
        'failed': failed,
        'failure_rate': round(failed * 100 / total) if total else 0,
    }


def _invalid_id(request, applicant_id):
    if is_object_id(applicant_id):
        return None
    messages.error(request, 'Invalid or missing applicant ID')
    return redirect('assessors:applicants')


# ========== DASHBOARD & APPLICANTS ==========

@assessor_required
def dashboard(request):
    applicants = []
    try:
        applicants = fetch_assigned(request.backend)
    except BackendError as exc:
        logger.error('Failed to load assigned applicants: %s', exc.message)
        messages.error(request, 'Error updating statistics')

    return render(request, 'assessors/dashboard.html', {
        'summary': assessor_summary(applicants),
        'applicants': applicants[:5],
    })


@assessor_required
def applicant_list(request):
    query = request.GET.get('q', '')
    applicants = []
    try:
        applicants = fetch_assigned(request.backend)
    except BackendError as exc:
        logger.error('Failed to load assigned applicants: %s', exc.message)
        messages.error(request, exc.message or 'Failed to load applicants')

    return render(request, 'assessors/applicants.html', {
        'applicants': filter_records(applicants, query, APPLICANT_SEARCH_FIELDS),
        'query': query,
    })


@assessor_required
@require_POST
def reject_applicant(request, applicant_id):
    invalid = _invalid_id(request, applicant_id)
    if invalid:
        return invalid

    label = request.POST.get('applicant_label') or applicant_id
    try:
        services.reject_assigned_applicant(request.backend, applicant_id)
    except BackendError as exc:
        logger.error('Assessor reject of %s failed: %s', applicant_id, exc.message)
        messages.error(request, exc.message or 'Failed to reject applicant')
    else:
        drafts.discard_draft(request, applicant_id)
        messages.success(request, f'Applicant {label} rejected successfully')

    if request.POST.get('next') == 'evaluation':
        return redirect('assessors:evaluation', applicant_id=applicant_id)
    return redirect('assessors:applicants')


@assessor_required
def evaluation(request, applicant_id):
    """An assigned applicant's details and submitted documents"""
    invalid = _invalid_id(request, applicant_id)
    if invalid:
        return invalid

    try:
        applicant = services.fetch_assigned_applicant(request.backend, applicant_id)
    except BackendError as exc:
        messages.error(request, exc.message)
        return redirect('assessors:applicants')

    return render(request, 'assessors/evaluation.html', {
        'applicant': applicant,
        'applicant_label': display_applicant_id(applicant),
        'info': applicant.get('personalInfo') or {},
        'file_groups': group_files(applicant.get('files')),
    })


# ========== SCORING ==========

def _scoring_state(request, applicant_id):
    """
    Load the applicant and its evaluation for display.

    Returns ``(applicant, evaluation, scores, locked)``. Scores come from
    the session draft when the assessor has unsaved changes, otherwise
    straight from the saved evaluation; a finalized evaluation is locked.
    """
    applicant = services.fetch_assigned_applicant(request.backend, applicant_id)
    evaluation = None
    try:
        evaluation = services.fetch_evaluation(request.backend, applicant_id)
    except BackendError as exc:
        logger.warning('Could not load evaluation for %s: %s', applicant_id, exc.message)
        messages.error(request, 'Failed to load existing evaluation')

    locked = bool(evaluation and evaluation.get('status') == 'finalized')
    if locked:
        drafts.discard_draft(request, applicant_id)
        return applicant, evaluation, scores_from_evaluation(evaluation), locked
    scores = drafts.get_draft(request, applicant_id) or scores_from_evaluation(evaluation)
    return applicant, evaluation, scores, locked


@assessor_required
def scoring(request, applicant_id):
    invalid = _invalid_id(request, applicant_id)
    if invalid:
        return invalid

    try:
        applicant, evaluation, scores, locked = _scoring_state(request, applicant_id)
    except BackendError as exc:
        messages.error(request, exc.message or 'Failed to initialize page')
        return redirect('assessors:applicants')

    result = evaluate(scores)
    categories = [
        {
            'key': category.key,
            'label': category.label,
            'slug': category.slug,
            'cap': category.cap,
            'score': result.scores[category.key],
            'comments': scores[category.key].get('comments', ''),
        }
        for category in CATEGORIES
    ]
    return render(request, 'assessors/scoring.html', {
        'applicant': applicant,
        'applicant_id': applicant_id,
        'info': applicant.get('personalInfo') or {},
        'file_groups': group_files(applicant.get('files')),
        'evaluation': evaluation,
        'categories': categories,
        'result': result,
        'locked': locked,
        'max_total': MAX_TOTAL,
        'passing_score': PASSING_SCORE,
        'has_unsaved_changes': not locked and drafts.has_draft(request, applicant_id),
    })


def _editable_draft(request, applicant_id):
    """
    The session draft, seeded from the saved evaluation on the first change.

    Returns None, with a message, when the saved evaluation cannot be
    loaded or has already been finalized.
    """
    draft = drafts.get_draft(request, applicant_id)
    if draft is not None:
        return draft

    try:
        evaluation = services.fetch_evaluation(request.backend, applicant_id)
    except BackendError as exc:
        logger.warning('Could not load evaluation for %s: %s', applicant_id, exc.message)
        messages.error(request, 'Failed to load existing evaluation')
        return None
    if evaluation and evaluation.get('status') == 'finalized':
        messages.error(request, 'This evaluation has been finalized and can no longer be changed.')
        return None
    return scores_from_evaluation(evaluation)


def _apply_comments(draft, data):
    for key, comments in data.items():
        if key in CATEGORIES_BY_KEY:
            draft[key]['comments'] = comments


@assessor_required
@require_POST
def add_points(request, applicant_id):
    invalid = _invalid_id(request, applicant_id)
    if invalid:
        return invalid

    serializer = AddPointsSerializer(data=request.POST)
    if not serializer.is_valid():
        messages.error(request, first_error(serializer.errors))
        return redirect('assessors:scoring', applicant_id=applicant_id)

    draft = _editable_draft(request, applicant_id)
    if draft is None:
        return redirect('assessors:scoring', applicant_id=applicant_id)

    data = serializer.validated_data
    key = data['category']
    block = draft[key]
    block['score'] = accumulate(block.get('score', 0), data['points'], key)
    if data['comments']:
        block['comments'] = data['comments']
    drafts.store_draft(request, applicant_id, draft)

    if not services.record_points(request.backend, applicant_id, key, data['points'], block.get('comments', '')):
        messages.warning(request, 'Points added, but they could not be recorded on the server yet.')
    messages.success(
        request,
        f"Added {data['points']} point(s) to {CATEGORIES_BY_KEY[key].label}",
    )
    return redirect('assessors:scoring', applicant_id=applicant_id)


@assessor_required
@require_POST
def save_scores(request, applicant_id):
    invalid = _invalid_id(request, applicant_id)
    if invalid:
        return invalid

    draft = _editable_draft(request, applicant_id)
    if draft is None:
        return redirect('assessors:scoring', applicant_id=applicant_id)

    comments = CommentsSerializer(data=request.POST)
    if comments.is_valid():
        _apply_comments(draft, comments.validated_data)

    try:
        services.save_evaluation(request.backend, applicant_id, draft)
    except BackendError as exc:
        logger.error('Saving evaluation for %s failed: %s', applicant_id, exc.message)
        drafts.store_draft(request, applicant_id, draft)
        messages.error(request, exc.message or 'Failed to save evaluation')
    else:
        drafts.discard_draft(request, applicant_id)
        messages.success(request, 'Evaluation saved successfully')
    return redirect('assessors:scoring', applicant_id=applicant_id)


@assessor_required
@require_POST
def finalize(request, applicant_id):
    invalid = _invalid_id(request, applicant_id)
    if invalid:
        return invalid

    serializer = FinalizeSerializer(data=request.POST)
    if not serializer.is_valid():
        messages.error(request, first_error(serializer.errors))
        return redirect('assessors:scoring', applicant_id=applicant_id)

    draft = _editable_draft(request, applicant_id)
    if draft is None:
        return redirect('assessors:scoring', applicant_id=applicant_id)

    comments = CommentsSerializer(data=request.POST)
    if comments.is_valid():
        _apply_comments(draft, comments.validated_data)

    try:
        result = services.finalize_evaluation(
            request.backend, applicant_id, draft, serializer.validated_data['comments'],
        )
    except BackendError as exc:
        logger.error('Finalizing evaluation for %s failed: %s', applicant_id, exc.message)
        drafts.store_draft(request, applicant_id, draft)
        messages.error(request, exc.message or 'Failed to finalize evaluation')
        return redirect('assessors:scoring', applicant_id=applicant_id)

    drafts.discard_draft(request, applicant_id)
    messages.success(
        request,
        f'Evaluation finalized successfully! Total score {result.total}/{MAX_TOTAL} '
        f'({final_status(result)})',
    )
    return redirect('assessors:applicants')


# ========== PROFILE ==========

@assessor_required
def profile(request):
    """Assessor profile, falling back to the cached login data"""
    assessor = None
    try:
        payload = request.backend.get('/assessor/profile')
        assessor = payload.get('assessor') or unwrap(payload)
    except BackendError as exc:
        logger.warning('Assessor profile unavailable, using cached data: %s', exc.message)

    if isinstance(assessor, dict) and assessor:
        update_user(request, ROLE_ASSESSOR, assessor)
    else:
        assessor = request.portal_user
        if not assessor:
            messages.error(request, 'Failed to load profile data. Please try again.')

    return render(request, 'assessors/profile.html', {'assessor': assessor or {}})


@assessor_required
def approval(request):
    """Whether an admin has approved this assessor account yet"""
    assessor = request.portal_user or {}
    return render(request, 'assessors/approval.html', {
        'assessor': assessor,
        'is_approved': bool(assessor.get('isApproved')),
    })
