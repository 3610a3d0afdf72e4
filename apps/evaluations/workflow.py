# apps/evaluations/workflow.py
"""
Applicant lifecycle.

    Pending Review -> Approved -> Under Assessment
        -> Evaluated - Passed | Evaluated - Failed

Any non-final status can also move to Rejected.
"""


class ApplicantStatus:
    PENDING_REVIEW = 'Pending Review'
    APPROVED = 'Approved'
    UNDER_ASSESSMENT = 'Under Assessment'
    EVALUATED_PASSED = 'Evaluated - Passed'
    EVALUATED_FAILED = 'Evaluated - Failed'
    REJECTED = 'Rejected'


STATUS_CHOICES = (
    (ApplicantStatus.PENDING_REVIEW, 'Pending Review'),
    (ApplicantStatus.APPROVED, 'Approved'),
    (ApplicantStatus.UNDER_ASSESSMENT, 'Under Assessment'),
    (ApplicantStatus.EVALUATED_PASSED, 'Evaluated - Passed'),
    (ApplicantStatus.EVALUATED_FAILED, 'Evaluated - Failed'),
    (ApplicantStatus.REJECTED, 'Rejected'),
)

ALL_STATUSES = tuple(value for value, _ in STATUS_CHOICES)

FINAL_STATUSES = frozenset({
    ApplicantStatus.EVALUATED_PASSED,
    ApplicantStatus.EVALUATED_FAILED,
    ApplicantStatus.REJECTED,
})

EVALUATION_STATUSES = frozenset({
    ApplicantStatus.EVALUATED_PASSED,
    ApplicantStatus.EVALUATED_FAILED,
})

TRANSITIONS = {
    ApplicantStatus.PENDING_REVIEW: {ApplicantStatus.APPROVED, ApplicantStatus.REJECTED},
    ApplicantStatus.APPROVED: {ApplicantStatus.UNDER_ASSESSMENT, ApplicantStatus.REJECTED},
    ApplicantStatus.UNDER_ASSESSMENT: {
        ApplicantStatus.EVALUATED_PASSED,
        ApplicantStatus.EVALUATED_FAILED,
        ApplicantStatus.REJECTED,
    },
    ApplicantStatus.EVALUATED_PASSED: set(),
    ApplicantStatus.EVALUATED_FAILED: set(),
    ApplicantStatus.REJECTED: set(),
}

# Older backend records use short or snake_case spellings
_ALIASES = {
    'pending': ApplicantStatus.PENDING_REVIEW,
    'pending_review': ApplicantStatus.PENDING_REVIEW,
    'approved': ApplicantStatus.APPROVED,
    'under_assessment': ApplicantStatus.UNDER_ASSESSMENT,
    'in_progress': ApplicantStatus.UNDER_ASSESSMENT,
    'passed': ApplicantStatus.EVALUATED_PASSED,
    'failed': ApplicantStatus.EVALUATED_FAILED,
    'rejected': ApplicantStatus.REJECTED,
}
_BY_LOWER = {value.lower(): value for value in ALL_STATUSES}


class InvalidTransition(ValueError):
    def __init__(self, current, target):
        super().__init__(f'Cannot move an applicant from "{current}" to "{target}"')
        self.current = current
        self.target = target


def parse_status(value):
    """Canonical status for a backend value, or None when unrecognised"""
    if not value:
        return None
    text = str(value).strip().lower()
    return _BY_LOWER.get(text) or _ALIASES.get(text.replace(' ', '_'))


def is_final(status):
    return parse_status(status) in FINAL_STATUSES


def can_transition(current, target):
    current = parse_status(current) or ApplicantStatus.PENDING_REVIEW
    target = parse_status(target)
    return target in TRANSITIONS[current]


def transition(current, target):
    """Return the canonical target status, or raise ``InvalidTransition``"""
    if not can_transition(current, target):
        raise InvalidTransition(current or ApplicantStatus.PENDING_REVIEW, target)
    return parse_status(target)


def allowed_targets(current):
    current = parse_status(current) or ApplicantStatus.PENDING_REVIEW
    return [status for status in ALL_STATUSES if status in TRANSITIONS[current]]


def manual_targets(current):
    """Statuses an admin may set by hand; pass/fail only comes from finalizing"""
    return [status for status in allowed_targets(current) if status not in EVALUATION_STATUSES]


def status_counts(records):
    """Tally a list of applicant records by canonical status"""
    counts = {status: 0 for status in ALL_STATUSES}
    for record in records or []:
        status = parse_status(record.get('status')) or ApplicantStatus.PENDING_REVIEW
        counts[status] += 1
    counts['total'] = len(records or [])
    return counts


# ========== APPLICANT TIMELINE ==========

TIMELINE_STEPS = (
    ('submitted', 'Application Submitted'),
    ('review', 'Application Review'),
    ('assessment', 'Under Assessment'),
    ('evaluation', 'Evaluation'),
    ('result', 'Result'),
)


def timeline(status):
    """
    Step states for the applicant's progress bar.

    Returns ``{'title', 'steps', 'result_available'}``; each step carries a
    ``state`` of todo, active, done, failed or rejected, and a ``visible``
    flag (a rejection hides everything after the review step).
    """
    status = parse_status(status)
    states = ['todo'] * len(TIMELINE_STEPS)
    notes = [''] * len(TIMELINE_STEPS)
    visible = [True] * len(TIMELINE_STEPS)
    title = 'Application Timeline'
    result_available = False

    if status == ApplicantStatus.APPROVED:
        states[0], states[1] = 'done', 'active'
    elif status == ApplicantStatus.UNDER_ASSESSMENT:
        states[0], states[1], states[2] = 'done', 'done', 'active'
    elif status == ApplicantStatus.EVALUATED_PASSED:
        states = ['done'] * len(TIMELINE_STEPS)
        result_available = True
    elif status == ApplicantStatus.EVALUATED_FAILED:
        states = ['done'] * len(TIMELINE_STEPS)
        states[-1] = 'failed'
        title = 'Application Timeline (Not Passed)'
        result_available = True
    elif status == ApplicantStatus.REJECTED:
        states[0], states[1] = 'done', 'rejected'
        notes[1] = 'Your application was rejected'
        visible = [True, True] + [False] * (len(TIMELINE_STEPS) - 2)
        title = 'Application Timeline (Rejected)'
    else:
        states[0] = 'active'

    steps = [
        {'key': key, 'label': label, 'state': state, 'note': note, 'visible': shown}
        for (key, label), state, note, shown in zip(TIMELINE_STEPS, states, notes, visible)
    ]
    return {'title': title, 'steps': steps, 'result_available': result_available}


def result_remarks(status):
    """Remark and colour for the result page before any evaluation exists"""
    status = parse_status(status)
    if status == ApplicantStatus.APPROVED:
        return 'Application Approved - No Evaluation Yet', 'green'
    if status == ApplicantStatus.REJECTED:
        return 'Application Rejected', 'red'
    if status == ApplicantStatus.UNDER_ASSESSMENT:
        return 'Under Assessment - Evaluation in Progress', 'blue'
    if status == ApplicantStatus.EVALUATED_PASSED:
        return 'Evaluation Completed - Passed', 'green'
    if status == ApplicantStatus.EVALUATED_FAILED:
        return 'Evaluation Completed - Failed', 'red'
    return 'Pending Evaluation', 'orange'
