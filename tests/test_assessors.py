"""
Assessor pages: assigned applicants and the scoring workflow.
"""
import pytest
from django.conf import settings

from apps.assessors.views import assessor_summary
from apps.core.backend import BackendError
from apps.evaluations.drafts import DRAFTS_SESSION_KEY, MAX_DRAFTS

from .helpers import APPLICANT_ID, flashed_messages, session_data

SCORING_URL = f'/assessor/scoring/{APPLICANT_ID}/'
OTHER_APPLICANT_IDS = [f'64b7f0c2a1e4d3b2c1a0{n:04x}' for n in range(0x100, 0x110)]


@pytest.fixture
def assigned(backend, applicant_record):
    backend.route('GET', f'/api/assessor/applicants/{APPLICANT_ID}', {'success': True, 'data': applicant_record})
    return applicant_record


@pytest.fixture
def no_evaluation(backend):
    backend.route('GET', '/api/evaluations', {'success': True, 'data': None})


@pytest.fixture
def scoring_page(assessor_client, assigned, no_evaluation):
    """The scoring page of an assigned applicant with nothing saved yet"""
    response = assessor_client.get(SCORING_URL)
    assert response.status_code == 200
    return assessor_client


def draft(client):
    return session_data(client).get(DRAFTS_SESSION_KEY, {}).get(APPLICANT_ID)


class TestDashboard:
    def test_summary(self):
        summary = assessor_summary([
            {'status': 'Under Assessment'},
            {'status': 'Evaluated - Passed'},
            {'status': 'Evaluated - Failed'},
            {'status': 'Rejected'},
            {'status': 'Approved'},
            {'status': 'in_progress'},
        ])
        assert summary['total'] == 6
        assert summary['in_progress'] == 2
        assert summary['evaluated'] == 1
        assert summary['failed'] == 2
        assert summary['failure_rate'] == 33

    def test_empty_summary(self):
        assert assessor_summary([])['failure_rate'] == 0

    def test_page(self, assessor_client, backend):
        backend.route('GET', '/api/assessor/applicants', {'success': True, 'data': [
            {'_id': APPLICANT_ID, 'name': 'Juan Dela Cruz', 'course': 'BSIT', 'status': 'Under Assessment'},
        ]})
        response = assessor_client.get('/assessor/dashboard/')
        assert response.context['summary']['in_progress'] == 1
        assert 'Juan Dela Cruz' in response.content.decode()


class TestApplicants:
    def test_search(self, assessor_client, backend):
        backend.route('GET', '/api/assessor/applicants', {'success': True, 'data': [
            {'_id': APPLICANT_ID, 'name': 'Juan Dela Cruz', 'course': 'BSIT', 'status': 'Under Assessment'},
            {'_id': '64b7f0c2a1e4d3b2c1a09f10', 'name': 'Maria Santos', 'course': 'BSBA', 'status': 'Under Assessment'},
        ]})
        response = assessor_client.get('/assessor/applicants/', {'q': 'bsba'})
        assert [a['name'] for a in response.context['applicants']] == ['Maria Santos']

    def test_evaluation_page(self, assessor_client, assigned):
        response = assessor_client.get(f'/assessor/applicants/{APPLICANT_ID}/')
        assert response.context['applicant_label'] == 'APP-2024-0001'
        assert response.context['file_groups'][1]['files'][0]['filename'] == 'resume.pdf'

    def test_not_assigned(self, assessor_client, backend):
        backend.route('GET', f'/api/assessor/applicants/{APPLICANT_ID}', BackendError('Forbidden', status=403))
        response = assessor_client.get(f'/assessor/applicants/{APPLICANT_ID}/')
        assert response.url == '/assessor/applicants/'
        assert flashed_messages(assessor_client) == ['This applicant is not assigned to you']

    def test_invalid_id(self, assessor_client, backend):
        response = assessor_client.get('/assessor/applicants/123/')
        assert response.url == '/assessor/applicants/'
        assert flashed_messages(assessor_client) == ['Invalid or missing applicant ID']

    def test_reject_discards_draft(self, scoring_page, backend):
        backend.route('POST', f'/api/assessor/applicants/{APPLICANT_ID}/reject', {'success': True})
        backend.route('POST', '/api/record-points', {'success': True})
        scoring_page.post(f'{SCORING_URL}points/', {'category': 'interview', 'points': '5'})
        assert draft(scoring_page) is not None

        response = scoring_page.post(f'/assessor/applicants/{APPLICANT_ID}/reject/', {
            'applicant_label': 'APP-2024-0001', 'next': 'evaluation',
        })

        assert response.url == f'/assessor/applicants/{APPLICANT_ID}/'
        assert draft(scoring_page) is None
        assert 'Applicant APP-2024-0001 rejected successfully' in flashed_messages(scoring_page)


class TestScoringPage:
    def test_shows_saved_evaluation_without_drafting(self, assessor_client, assigned, backend):
        backend.route('GET', '/api/evaluations', {'success': True, 'data': {
            'status': 'draft',
            'workExperience': {'score': 30, 'comments': 'Solid'},
        }})

        response = assessor_client.get(SCORING_URL)

        assert response.context['locked'] is False
        assert response.context['result'].total == 30
        assert response.context['has_unsaved_changes'] is False
        assert 'You have unsaved changes.' not in response.content.decode()
        assert draft(assessor_client) is None

    def test_unsaved_changes_banner_after_adding_points(self, scoring_page, backend):
        backend.route('POST', '/api/record-points', {'success': True})
        scoring_page.post(f'{SCORING_URL}points/', {'category': 'interview', 'points': '5'})

        response = scoring_page.get(SCORING_URL)

        assert response.context['has_unsaved_changes'] is True
        assert response.context['result'].total == 5
        assert 'You have unsaved changes.' in response.content.decode()

    def test_finalized_evaluation_is_locked(self, assessor_client, assigned, backend):
        backend.route('GET', '/api/evaluations', {'success': True, 'data': {
            'status': 'finalized',
            'educationalQualification': {'score': 20},
            'workExperience': {'score': 40},
        }})

        response = assessor_client.get(SCORING_URL)

        assert response.context['locked'] is True
        assert response.context['result'].passed is True
        assert draft(assessor_client) is None
        assert 'Add Points' not in response.content.decode()

    def test_evaluation_load_failure_starts_empty(self, assessor_client, assigned, backend):
        backend.route('GET', '/api/evaluations', BackendError('Server error', status=500))
        response = assessor_client.get(SCORING_URL)
        assert response.context['result'].total == 0
        assert 'Failed to load existing evaluation' in response.content.decode()


class TestDraftStorage:
    comment = (
        'Applicant presented certificates from three employers covering twelve years of '
        'supervisory work in electrical maintenance, with clear evidence of training '
        'delivered to junior staff and a documented safety record across every site visited.'
    )

    def saved_evaluation(self):
        return {'success': True, 'data': {
            'status': 'draft',
            **{key: {'score': 5, 'comments': self.comment} for key in (
                'educationalQualification', 'workExperience', 'professionalAchievements', 'interview',
            )},
        }}

    def cookie_size(self, client):
        return len(client.cookies[settings.SESSION_COOKIE_NAME].value)

    def test_opening_many_scoring_pages_keeps_cookie_small(self, assessor_client, backend, applicant_record):
        backend.route('GET', '/api/evaluations', self.saved_evaluation())
        for applicant_id in OTHER_APPLICANT_IDS:
            backend.route('GET', f'/api/assessor/applicants/{applicant_id}', {
                'success': True, 'data': {**applicant_record, '_id': applicant_id},
            })
            response = assessor_client.get(f'/assessor/scoring/{applicant_id}/')
            assert response.status_code == 200

        assert session_data(assessor_client).get(DRAFTS_SESSION_KEY) in (None, {})
        assert self.cookie_size(assessor_client) < 4096

    def test_oldest_drafts_are_evicted(self, assessor_client, backend):
        backend.route('GET', '/api/evaluations', self.saved_evaluation())
        backend.route('POST', '/api/record-points', {'success': True})

        for applicant_id in OTHER_APPLICANT_IDS[:MAX_DRAFTS + 3]:
            assessor_client.post(f'/assessor/scoring/{applicant_id}/points/', {
                'category': 'interview', 'points': '1',
            })

        stored = session_data(assessor_client)[DRAFTS_SESSION_KEY]
        assert list(stored) == OTHER_APPLICANT_IDS[3:MAX_DRAFTS + 3]
        assert stored[OTHER_APPLICANT_IDS[3]]['interview'] == {'score': 6, 'comments': self.comment}
        assert self.cookie_size(assessor_client) < 4096


class TestAddPoints:
    def test_points_accumulate_up_to_cap(self, scoring_page, backend):
        backend.route('POST', '/api/record-points', {'success': True})
        url = f'{SCORING_URL}points/'

        scoring_page.post(url, {'category': 'interview', 'points': '10', 'comments': 'Clear answers'})
        scoring_page.post(url, {'category': 'interview', 'points': '10'})

        assert draft(scoring_page)['interview'] == {'score': 15, 'comments': 'Clear answers'}
        recorded = backend.called('POST', '/api/record-points')
        assert recorded[0].json == {
            'applicantId': APPLICANT_ID, 'category': 'interview', 'points': 10, 'comments': 'Clear answers',
        }

    def test_first_change_starts_from_saved_evaluation(self, assessor_client, backend):
        backend.route('GET', '/api/evaluations', {'success': True, 'data': {
            'status': 'draft',
            'workExperience': {'score': 30, 'comments': 'Solid'},
        }})
        backend.route('POST', '/api/record-points', {'success': True})

        assessor_client.post(f'{SCORING_URL}points/', {'category': 'workExperience', 'points': '5'})

        assert draft(assessor_client)['workExperience'] == {'score': 35, 'comments': 'Solid'}

    def test_points_above_cap_are_rejected(self, scoring_page, backend):
        scoring_page.post(f'{SCORING_URL}points/', {'category': 'educationalQualification', 'points': '21'})
        assert draft(scoring_page) is None
        assert flashed_messages(scoring_page) == ['Please enter points between 0-20']
        assert backend.called('POST', '/api/record-points') == []

    def test_record_failure_keeps_points(self, scoring_page, backend):
        backend.route('POST', '/api/record-points', BackendError('Network error', status=503))
        scoring_page.post(f'{SCORING_URL}points/', {'category': 'workExperience', 'points': '25'})
        assert draft(scoring_page)['workExperience']['score'] == 25
        messages = flashed_messages(scoring_page)
        assert 'Points added, but they could not be recorded on the server yet.' in messages
        assert 'Added 25 point(s) to Work Experience' in messages

    def test_saved_evaluation_unavailable(self, assessor_client, backend):
        backend.route('GET', '/api/evaluations', BackendError('Server error', status=500))
        response = assessor_client.post(f'{SCORING_URL}points/', {'category': 'interview', 'points': '5'})
        assert response.url == SCORING_URL
        assert draft(assessor_client) is None
        assert flashed_messages(assessor_client) == ['Failed to load existing evaluation']

    def test_finalized_evaluation_refuses_points(self, assessor_client, backend):
        backend.route('GET', '/api/evaluations', {'success': True, 'data': {
            'status': 'finalized', 'interview': {'score': 10},
        }})
        assessor_client.post(f'{SCORING_URL}points/', {'category': 'interview', 'points': '5'})
        assert draft(assessor_client) is None
        assert backend.called('POST', '/api/record-points') == []
        assert flashed_messages(assessor_client) == [
            'This evaluation has been finalized and can no longer be changed.',
        ]


class TestSaveAndFinalize:
    def test_save_posts_full_draft_with_comments(self, scoring_page, backend):
        backend.route('POST', '/api/evaluations', {'success': True, 'data': {'evaluation': {}}})

        scoring_page.post(f'{SCORING_URL}save/', {'workExperience': 'Ten years as lead technician'})

        body = backend.called('POST', '/api/evaluations')[0].json
        assert body['applicantId'] == APPLICANT_ID
        assert body['scores']['workExperience']['comments'] == 'Ten years as lead technician'
        assert set(body['scores']) == {
            'educationalQualification', 'workExperience', 'professionalAchievements', 'interview',
        }
        assert draft(scoring_page) is None
        assert flashed_messages(scoring_page) == ['Evaluation saved successfully']

    def test_save_failure_keeps_draft(self, scoring_page, backend):
        backend.route('POST', '/api/evaluations', BackendError('Server error', status=500))
        scoring_page.post(f'{SCORING_URL}save/', {'interview': 'Confident'})
        assert draft(scoring_page)['interview']['comments'] == 'Confident'
        assert flashed_messages(scoring_page) == ['Server error']

    def test_finalize_saves_then_finalizes(self, scoring_page, backend):
        backend.route('POST', '/api/record-points', {'success': True})
        backend.route('POST', '/api/evaluations', {'success': True})
        backend.route('POST', '/api/evaluations/finalize', {'success': True})
        scoring_page.post(f'{SCORING_URL}points/', {'category': 'educationalQualification', 'points': '20'})
        scoring_page.post(f'{SCORING_URL}points/', {'category': 'workExperience', 'points': '40'})

        response = scoring_page.post(f'{SCORING_URL}finalize/', {
            'comments': 'Meets the requirements', 'confirm': 'true',
        })

        assert response.url == '/assessor/applicants/'
        endpoints = [call.endpoint for call in backend.calls if call.method == 'POST']
        assert endpoints[-2:] == ['/api/evaluations', '/api/evaluations/finalize']
        assert backend.called('POST', '/api/evaluations/finalize')[0].json == {
            'applicantId': APPLICANT_ID, 'comments': 'Meets the requirements',
        }
        assert draft(scoring_page) is None
        assert (
            'Evaluation finalized successfully! Total score 60/100 (Evaluated - Passed)'
            in flashed_messages(scoring_page)
        )

    def test_finalize_needs_comments(self, scoring_page, backend):
        scoring_page.post(f'{SCORING_URL}finalize/', {'comments': '  ', 'confirm': 'true'})
        assert flashed_messages(scoring_page) == ['Please enter your final comments for this evaluation']
        assert backend.called('POST', '/api/evaluations/finalize') == []

    def test_finalize_needs_confirmation(self, scoring_page, backend):
        scoring_page.post(f'{SCORING_URL}finalize/', {'comments': 'Done'})
        assert flashed_messages(scoring_page) == ['Please confirm that this evaluation is final']

    def test_finalize_failure_keeps_draft(self, scoring_page, backend):
        backend.route('POST', '/api/evaluations', {'success': True})
        backend.route('POST', '/api/evaluations/finalize', BackendError('Already finalized', status=409))

        response = scoring_page.post(f'{SCORING_URL}finalize/', {'comments': 'Done', 'confirm': 'true'})

        assert response.url == SCORING_URL
        assert draft(scoring_page) is not None
        assert flashed_messages(scoring_page) == ['Already finalized']


class TestProfile:
    def test_profile_from_backend(self, assessor_client, backend):
        backend.route('GET', '/assessor/profile', {'success': True, 'assessor': {
            'fullName': 'Samantha Assessor', 'expertise': 'engineering',
        }})
        response = assessor_client.get('/assessor/profile/')
        assert response.context['assessor']['fullName'] == 'Samantha Assessor'

    def test_profile_falls_back_to_cache(self, assessor_client, backend):
        backend.route('GET', '/assessor/profile', BackendError('Network error', status=503))
        response = assessor_client.get('/assessor/profile/')
        assert response.context['assessor']['assessorId'] == 'AS-0001'
