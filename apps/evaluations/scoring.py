# apps/evaluations/scoring.py
"""
ETEEAP qualification scoring rules.

An assessor awards points in four categories, each capped on its own.
The capped scores add up to at most 100 and an applicant passes with 60.
Every page that shows or computes a score goes through this module.
"""
import math
import sys
from collections import namedtuple
from dataclasses import dataclass, field

from .workflow import ApplicantStatus

Category = namedtuple('Category', ['key', 'label', 'cap', 'slug'])

EDUCATIONAL_QUALIFICATION = Category('educationalQualification', 'Educational Qualification', 20, 'edu')
WORK_EXPERIENCE = Category('workExperience', 'Work Experience', 40, 'work')
PROFESSIONAL_ACHIEVEMENTS = Category('professionalAchievements', 'Professional Achievements', 25, 'achieve')
INTERVIEW = Category('interview', 'Interview', 15, 'interview')

CATEGORIES = (
    EDUCATIONAL_QUALIFICATION,
    WORK_EXPERIENCE,
    PROFESSIONAL_ACHIEVEMENTS,
    INTERVIEW,
)
CATEGORIES_BY_KEY = {category.key: category for category in CATEGORIES}
CATEGORY_CHOICES = tuple((category.key, category.label) for category in CATEGORIES)

MAX_TOTAL = sum(category.cap for category in CATEGORIES)
PASSING_SCORE = 60


class ScoringError(ValueError):
    """Points outside a category's range, or an unknown category"""


@dataclass(frozen=True)
class EvaluationResult:
    total: int
    passed: bool
    scores: dict = field(default_factory=dict)

    @property
    def remarks(self):
        return 'Passed' if self.passed else 'Failed'

    def as_dict(self):
        return {
            'total': self.total,
            'passed': self.passed,
            'remarks': self.remarks,
            'scores': dict(self.scores),
            'max_total': MAX_TOTAL,
            'passing_score': PASSING_SCORE,
        }


def get_category(key):
    try:
        return CATEGORIES_BY_KEY[key]
    except KeyError:
        raise ScoringError(f'Unknown scoring category: {key}') from None


def _to_int(value):
    """Whole-number score; infinities saturate so clamping still applies"""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    if math.isnan(number):
        return 0
    if math.isinf(number):
        return sys.maxsize if number > 0 else -sys.maxsize
    return int(number)


def score_value(entry):
    """Read a score from either a bare number or a ``{score, comments}`` block"""
    if isinstance(entry, dict):
        return _to_int(entry.get('score'))
    return _to_int(entry)


def clamp(value, cap):
    return max(0, min(_to_int(value), cap))


def evaluate(scores):
    """
    Total up a score set.

    ``scores`` maps category keys to numbers or ``{score, comments}``
    blocks. Each category is clamped into ``[0, cap]``; missing ones count
    as zero. Passing needs a total of at least ``PASSING_SCORE``.
    """
    scores = scores or {}
    clamped = {
        category.key: clamp(score_value(scores.get(category.key)), category.cap)
        for category in CATEGORIES
    }
    total = sum(clamped.values())
    return EvaluationResult(total=total, passed=total >= PASSING_SCORE, scores=clamped)


def check_points(category_key, points):
    category = get_category(category_key)
    if points is None or points < 0 or points > category.cap:
        raise ScoringError(f'Please enter points between 0-{category.cap}')
    return category


def add_points(current, points, category_key):
    """Accumulate ``points`` into a category, never past its cap"""
    category = check_points(category_key, points)
    return min(clamp(current, category.cap) + points, category.cap)


def final_status(result):
    if result.passed:
        return ApplicantStatus.EVALUATED_PASSED
    return ApplicantStatus.EVALUATED_FAILED


# ========== DRAFTS AND BACKEND PAYLOADS ==========

def empty_scores():
    return {category.key: {'score': 0, 'comments': ''} for category in CATEGORIES}


def scores_from_evaluation(evaluation):
    """Turn a backend evaluation record into a scoring-page draft"""
    draft = empty_scores()
    for category in CATEGORIES:
        block = (evaluation or {}).get(category.key)
        if isinstance(block, dict):
            draft[category.key] = {
                'score': clamp(block.get('score'), category.cap),
                'comments': block.get('comments') or '',
            }
    return draft


def build_payload(draft):
    """Scores in the shape ``/api/evaluations`` expects"""
    payload = {}
    for category in CATEGORIES:
        block = (draft or {}).get(category.key) or {}
        payload[category.key] = {
            'score': clamp(score_value(block), category.cap),
            'comments': block.get('comments', '') if isinstance(block, dict) else '',
            'breakdown': [],
        }
    return payload


def latest_evaluation(evaluations):
    """The first finalized evaluation, else the most recent one, else None"""
    evaluations = [e for e in evaluations or [] if isinstance(e, dict)]
    if not evaluations:
        return None
    for evaluation in evaluations:
        if evaluation.get('status') == 'finalized':
            return evaluation
    return evaluations[-1]


def score_rows(result):
    """(label, score, cap) rows for result tables"""
    return [
        (category.label, result.scores.get(category.key, 0), category.cap)
        for category in CATEGORIES
    ]
