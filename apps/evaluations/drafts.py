# apps/evaluations/drafts.py
"""
Unsaved scoring-page scores, kept in the session per applicant.

A draft only exists between an assessor's first change and the next
successful save, so opening a scoring page never grows the session.
At most ``MAX_DRAFTS`` are kept; storing another evicts the oldest.
"""
import logging

logger = logging.getLogger(__name__)

DRAFTS_SESSION_KEY = 'scoring_drafts'
MAX_DRAFTS = 5


def get_draft(request, applicant_id):
    return request.session.get(DRAFTS_SESSION_KEY, {}).get(applicant_id)


def has_draft(request, applicant_id):
    return get_draft(request, applicant_id) is not None


def store_draft(request, applicant_id, draft):
    drafts = request.session.setdefault(DRAFTS_SESSION_KEY, {})
    # Re-inserting keeps the most recently touched draft last
    drafts.pop(applicant_id, None)
    drafts[applicant_id] = draft
    while len(drafts) > MAX_DRAFTS:
        evicted = next(iter(drafts))
        del drafts[evicted]
        logger.warning('Dropped unsaved scores for applicant %s to make room for %s', evicted, applicant_id)
    request.session.modified = True


def discard_draft(request, applicant_id):
    drafts = request.session.get(DRAFTS_SESSION_KEY)
    if drafts and applicant_id in drafts:
        del drafts[applicant_id]
        request.session.modified = True
