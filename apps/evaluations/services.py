# apps/evaluations/services.py
"""Backend calls behind the assessor's scoring page"""
import logging

from apps.core.backend import BackendError, unwrap

from .scoring import MAX_TOTAL, build_payload, evaluate

logger = logging.getLogger(__name__)


def fetch_assigned_applicant(client, applicant_id):
    """Load an applicant assigned to the logged-in assessor"""
    try:
        payload = client.get(f'/api/assessor/applicants/{applicant_id}')
    except BackendError as exc:
        if exc.status == 403:
            raise BackendError('This applicant is not assigned to you', status=403, data=exc.data) from exc
        if exc.status == 404:
            raise BackendError('Applicant not found', status=404, data=exc.data) from exc
        raise
    return unwrap(payload, default={})


def fetch_evaluation(client, applicant_id):
    payload = client.get('/api/evaluations', params={'applicantId': applicant_id})
    evaluation = unwrap(payload)
    return evaluation if isinstance(evaluation, dict) else None


def save_evaluation(client, applicant_id, draft):
    payload = client.post('/api/evaluations', json={
        'applicantId': applicant_id,
        'scores': build_payload(draft),
    })
    data = unwrap(payload, default={})
    logger.info('Saved evaluation for applicant %s', applicant_id)
    return data.get('evaluation') if isinstance(data, dict) else None


def record_points(client, applicant_id, category, points, comments=''):
    """
    Report an "add points" action to the backend's audit trail.

    A failure here does not undo the points on the draft; it is logged and
    reported back to the caller as False.
    """
    try:
        client.post('/api/record-points', json={
            'applicantId': applicant_id,
            'category': category,
            'points': points,
            'comments': comments,
        })
    except BackendError as exc:
        logger.warning('Recording %s points for %s failed: %s', category, applicant_id, exc.message)
        return False
    return True


def finalize_evaluation(client, applicant_id, draft, comments):
    """Save the draft, then lock the evaluation; returns the final result"""
    save_evaluation(client, applicant_id, draft)
    client.post('/api/evaluations/finalize', json={
        'applicantId': applicant_id,
        'comments': comments,
    })
    result = evaluate(draft)
    logger.info(
        'Finalized evaluation for applicant %s: %s/%s (%s)',
        applicant_id, result.total, MAX_TOTAL, result.remarks,
    )
    return result


def reject_assigned_applicant(client, applicant_id):
    return client.post(f'/api/assessor/applicants/{applicant_id}/reject')
