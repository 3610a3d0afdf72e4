# apps/applicants/views.py
import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods

from apps.core.backend import BackendError, unwrap
from apps.core.choices import CIVIL_STATUS_CHOICES, GENDER_CHOICES, PORTFOLIO_SECTIONS
from apps.core.decorators import applicant_required
from apps.core.search import filter_records
from apps.core.session import user_id
from apps.core.utils import first_error
from apps.dashboard import reports_views
from apps.evaluations.scoring import evaluate, latest_evaluation, score_rows
from apps.evaluations.workflow import result_remarks, timeline as build_timeline

from .serializers import DocumentUploadSerializer, PersonalInfoSerializer

logger = logging.getLogger(__name__)

PORTFOLIO_SEARCH_FIELDS = ('filename', 'contentType', '_id')


def _active_courses(client):
    """Course names for the priority dropdowns; empty when unavailable"""
    try:
        courses = unwrap(client.get('/api/courses'), default=[])
    except BackendError as exc:
        logger.warning('Could not load courses for the information form: %s', exc.message)
        return []
    return [c for c in courses if c.get('status', 'active') == 'active']


def _load_profile(request):
    """The logged-in applicant's full record, or the cached user if that fails"""
    applicant_id = user_id(request.portal_user)
    try:
        return unwrap(request.backend.get(f'/api/profile/{applicant_id}'), default={})
    except BackendError as exc:
        logger.error('Failed to load profile %s: %s', applicant_id, exc.message)
        messages.error(request, 'Failed to load profile data.')
        return dict(request.portal_user)


# ========== INFORMATION & DOCUMENTS ==========

@applicant_required
@require_http_methods(['GET', 'POST'])
def information(request):
    """Personal information form; saving moves on to document submission"""
    context = {
        'gender_choices': GENDER_CHOICES,
        'civil_status_choices': CIVIL_STATUS_CHOICES,
        'courses': _active_courses(request.backend),
        'form': request.POST if request.method == 'POST' else {},
    }
    if request.method == 'GET':
        return render(request, 'applicants/information.html', context)

    serializer = PersonalInfoSerializer(data=request.POST)
    if not serializer.is_valid():
        messages.error(request, first_error(serializer.errors, 'Please fill in all required fields'))
        return render(request, 'applicants/information.html', context, status=400)

    try:
        request.backend.post('/api/update-personal-info', json={
            'userId': user_id(request.portal_user),
            'personalInfo': serializer.validated_data,
        })
    except BackendError as exc:
        messages.error(request, f'Error: {exc.message}')
        return render(request, 'applicants/information.html', context, status=400)

    messages.success(request, 'Information submitted successfully!')
    return redirect('applicants:documents')


@applicant_required
@require_http_methods(['GET', 'POST'])
def documents(request):
    if request.method == 'GET':
        return render(request, 'applicants/documents.html')

    serializer = DocumentUploadSerializer(data=request.FILES)
    if not serializer.is_valid():
        messages.error(request, first_error(serializer.errors, 'Please upload at least one document'))
        return render(request, 'applicants/documents.html', status=400)

    files = [
        ('files', (upload.name, upload.read(), upload.content_type))
        for upload in serializer.validated_data['files']
    ]
    try:
        request.backend.post(
            '/api/submit-documents',
            data={'userId': user_id(request.portal_user)},
            files=files,
        )
    except BackendError as exc:
        messages.error(request, f'Error: {exc.message}')
        return render(request, 'applicants/documents.html', status=400)

    logger.info('Applicant %s submitted %s document(s)', user_id(request.portal_user), len(files))
    messages.success(request, 'Documents submitted successfully!')
    return redirect('applicants:timeline')


# ========== PROGRESS ==========

@applicant_required
def timeline(request):
    status = request.portal_user.get('status')
    return render(request, 'applicants/timeline.html', {
        'status': status,
        'timeline': build_timeline(status),
    })


@applicant_required
def result(request):
    """Scores from the latest evaluation, or a status remark when there is none"""
    applicant = _load_profile(request)
    evaluation = latest_evaluation(applicant.get('evaluations'))
    context = {
        'applicant': applicant,
        'courses': [
            course for course in (
                (applicant.get('personalInfo') or {}).get(key)
                for key in ('firstPriorityCourse', 'secondPriorityCourse', 'thirdPriorityCourse')
            ) if course
        ],
        'evaluation': evaluation,
    }
    if evaluation:
        outcome = evaluate(evaluation)
        context.update({
            'rows': score_rows(outcome),
            'result': outcome,
            'remarks': outcome.remarks,
            'remarks_colour': 'green' if outcome.passed else 'red',
        })
    else:
        remarks, colour = result_remarks(applicant.get('status'))
        context.update({
            'rows': score_rows(evaluate({})),
            'result': None,
            'remarks': remarks,
            'remarks_colour': colour,
        })
    return render(request, 'applicants/result.html', context)


@applicant_required
def result_pdf(request):
    """The evaluation result as a downloadable PDF slip"""
    applicant = _load_profile(request)
    evaluation = latest_evaluation(applicant.get('evaluations'))
    if not evaluation:
        messages.info(request, 'Your result will be available once your evaluation is complete')
        return redirect('applicants:result')
    return reports_views.result_pdf(applicant, evaluate(evaluation))


# ========== PORTFOLIO & PROFILE ==========

@applicant_required
def portfolio(request):
    """Uploaded files, one table per section, filtered by ``?q=``"""
    query = request.GET.get('q', '')
    files = {}
    try:
        payload = request.backend.get(f'/api/fetch-user-files/{user_id(request.portal_user)}')
        files = payload.get('files') or unwrap(payload, default={}).get('files') or {}
    except BackendError as exc:
        messages.error(request, f'Failed to load files: {exc.message}. Please try again.')

    sections = []
    for key, label in PORTFOLIO_SECTIONS:
        section_files = filter_records(files.get(key), query, PORTFOLIO_SEARCH_FIELDS)
        sections.append({'key': key, 'label': label, 'files': section_files})

    return render(request, 'applicants/portfolio.html', {
        'sections': sections,
        'query': query,
        'expand_all': bool(query.strip()),
    })


@applicant_required
def profile(request):
    applicant = _load_profile(request)
    return render(request, 'applicants/profile.html', {
        'applicant': applicant,
        'info': applicant.get('personalInfo') or applicant,
    })
