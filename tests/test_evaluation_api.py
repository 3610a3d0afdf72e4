"""
JSON endpoints used by the scoring page.
"""
from .helpers import APPLICANT_ID


class TestEvaluateEndpoint:
    url = '/assessor/api/evaluate/'

    def test_requires_assessor_session(self, client):
        response = client.post(self.url, {}, content_type='application/json')
        assert response.status_code == 403
        assert response.json()['detail'] == 'Assessor access required'

    def test_passing_score_set(self, assessor_client):
        response = assessor_client.post(self.url, {
            'educationalQualification': {'score': 20},
            'workExperience': {'score': 40, 'comments': 'Strong'},
        }, content_type='application/json')

        body = response.json()
        assert response.status_code == 200
        assert body['success'] is True
        assert body['data']['total'] == 60
        assert body['data']['passed'] is True

    def test_scores_are_clamped(self, assessor_client):
        body = assessor_client.post(self.url, {
            'interview': {'score': 50},
            'professionalAchievements': {'score': 10},
        }, content_type='application/json').json()
        assert body['data']['scores']['interview'] == 15
        assert body['data']['total'] == 25
        assert body['data']['remarks'] == 'Failed'

    def test_bare_numbers(self, assessor_client):
        body = assessor_client.post(self.url, {
            'educationalQualification': 18,
            'workExperience': {'score': 35},
            'interview': '10',
        }, content_type='application/json').json()
        assert body['success'] is True
        assert body['data']['total'] == 63
        assert body['data']['passed'] is True

    def test_list_is_not_a_score(self, assessor_client):
        response = assessor_client.post(self.url, {
            'interview': [5],
        }, content_type='application/json')
        assert response.status_code == 400
        assert response.json()['error'] == 'Scores must be numbers or objects with a score'

    def test_invalid_score(self, assessor_client):
        response = assessor_client.post(self.url, {
            'interview': {'score': 'lots'},
        }, content_type='application/json')
        assert response.status_code == 400
        assert response.json()['success'] is False


class TestScoringRules:
    def test_rules(self, assessor_client):
        data = assessor_client.get('/assessor/api/scoring-rules/').json()['data']
        assert [c['max'] for c in data['categories']] == [20, 40, 25, 15]
        assert data['passing_score'] == 60


class TestDraftSummary:
    def test_no_draft(self, assessor_client):
        response = assessor_client.get(f'/assessor/api/drafts/{APPLICANT_ID}/')
        assert response.status_code == 404

    def test_invalid_id(self, assessor_client):
        response = assessor_client.get('/assessor/api/drafts/abc/')
        assert response.status_code == 400
        assert response.json()['error'] == 'Invalid applicant ID format'

    def test_reports_draft_totals(self, assessor_client, backend, applicant_record):
        backend.route('GET', f'/api/assessor/applicants/{APPLICANT_ID}', {'success': True, 'data': applicant_record})
        backend.route('GET', '/api/evaluations', {'success': True, 'data': {
            'status': 'draft', 'interview': {'score': 12},
        }})
        backend.route('POST', '/api/record-points', {'success': True})
        assessor_client.get(f'/assessor/scoring/{APPLICANT_ID}/')
        assessor_client.post(f'/assessor/scoring/{APPLICANT_ID}/points/', {
            'category': 'workExperience', 'points': '30',
        })

        body = assessor_client.get(f'/assessor/api/drafts/{APPLICANT_ID}/').json()

        assert body['data']['total'] == 42
        assert body['data']['passed'] is False
