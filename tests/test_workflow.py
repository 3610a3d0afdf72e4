"""
Unit tests for the applicant lifecycle.
"""
import pytest

from apps.evaluations.workflow import (
    ApplicantStatus, InvalidTransition, allowed_targets, can_transition, is_final, manual_targets,
    parse_status, result_remarks, status_counts, timeline, transition,
)


class TestParseStatus:
    @pytest.mark.parametrize('raw, expected', [
        ('Pending Review', ApplicantStatus.PENDING_REVIEW),
        ('pending', ApplicantStatus.PENDING_REVIEW),
        ('under_assessment', ApplicantStatus.UNDER_ASSESSMENT),
        ('evaluated - passed', ApplicantStatus.EVALUATED_PASSED),
        ('REJECTED', ApplicantStatus.REJECTED),
    ])
    def test_known_spellings(self, raw, expected):
        assert parse_status(raw) == expected

    def test_unknown_and_blank(self):
        assert parse_status('archived') is None
        assert parse_status('') is None


class TestTransitions:
    def test_happy_path(self):
        status = transition(ApplicantStatus.PENDING_REVIEW, ApplicantStatus.APPROVED)
        status = transition(status, ApplicantStatus.UNDER_ASSESSMENT)
        assert transition(status, ApplicantStatus.EVALUATED_PASSED) == ApplicantStatus.EVALUATED_PASSED

    def test_cannot_skip_approval(self):
        with pytest.raises(InvalidTransition):
            transition(ApplicantStatus.PENDING_REVIEW, ApplicantStatus.UNDER_ASSESSMENT)

    def test_final_statuses_are_terminal(self):
        for status in (ApplicantStatus.REJECTED, ApplicantStatus.EVALUATED_FAILED):
            assert is_final(status)
            assert allowed_targets(status) == []
            with pytest.raises(InvalidTransition):
                transition(status, ApplicantStatus.APPROVED)

    def test_any_open_status_can_be_rejected(self):
        for status in (ApplicantStatus.PENDING_REVIEW, ApplicantStatus.APPROVED, ApplicantStatus.UNDER_ASSESSMENT):
            assert can_transition(status, ApplicantStatus.REJECTED)

    def test_missing_status_is_treated_as_pending(self):
        assert allowed_targets(None) == [ApplicantStatus.APPROVED, ApplicantStatus.REJECTED]

    def test_manual_targets_leave_out_pass_and_fail(self):
        assert manual_targets(ApplicantStatus.UNDER_ASSESSMENT) == [ApplicantStatus.REJECTED]
        assert manual_targets(ApplicantStatus.APPROVED) == [
            ApplicantStatus.UNDER_ASSESSMENT, ApplicantStatus.REJECTED,
        ]

    def test_error_message_names_both_statuses(self):
        with pytest.raises(InvalidTransition, match='"Rejected" to "Approved"'):
            transition('Rejected', 'Approved')


class TestStatusCounts:
    def test_counts_by_canonical_status(self):
        counts = status_counts([
            {'status': 'Approved'},
            {'status': 'approved'},
            {'status': 'Rejected'},
            {},
        ])
        assert counts[ApplicantStatus.APPROVED] == 2
        assert counts[ApplicantStatus.REJECTED] == 1
        assert counts[ApplicantStatus.PENDING_REVIEW] == 1
        assert counts['total'] == 4


class TestTimeline:
    def states(self, status):
        return [step['state'] for step in timeline(status)['steps']]

    def test_pending(self):
        assert self.states('Pending Review') == ['active', 'todo', 'todo', 'todo', 'todo']

    def test_under_assessment(self):
        assert self.states('Under Assessment')[:3] == ['done', 'done', 'active']

    def test_failed_marks_result_step(self):
        data = timeline('Evaluated - Failed')
        assert data['steps'][-1]['state'] == 'failed'
        assert data['result_available'] is True

    def test_rejected_hides_later_steps(self):
        data = timeline('Rejected')
        assert [step['visible'] for step in data['steps']] == [True, True, False, False, False]
        assert data['title'] == 'Application Timeline (Rejected)'


class TestResultRemarks:
    def test_remarks(self):
        assert result_remarks('Approved') == ('Application Approved - No Evaluation Yet', 'green')
        assert result_remarks(None) == ('Pending Evaluation', 'orange')
