# apps/evaluations/serializers.py
from rest_framework import serializers

from .scoring import CATEGORY_CHOICES, ScoringError, check_points


class CategoryScoreSerializer(serializers.Serializer):
    score = serializers.IntegerField(default=0)
    comments = serializers.CharField(required=False, allow_blank=True, default='')


class CategoryScoreField(serializers.Field):
    """A category score given as a bare number or a ``{score, comments}`` object"""
    default_error_messages = {
        'invalid': 'Scores must be numbers or objects with a score',
    }

    def to_internal_value(self, data):
        if isinstance(data, dict):
            block = CategoryScoreSerializer(data=data)
            block.is_valid(raise_exception=True)
            return dict(block.validated_data)
        if isinstance(data, (bool, list)):
            self.fail('invalid')
        return {'score': serializers.IntegerField().run_validation(data), 'comments': ''}

    def to_representation(self, value):
        return value


class EvaluationScoresSerializer(serializers.Serializer):
    """A full score set; out-of-range scores are clamped by ``evaluate``"""
    educationalQualification = CategoryScoreField(required=False)
    workExperience = CategoryScoreField(required=False)
    professionalAchievements = CategoryScoreField(required=False)
    interview = CategoryScoreField(required=False)


class AddPointsSerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=CATEGORY_CHOICES)
    points = serializers.IntegerField(error_messages={
        'invalid': 'Please enter a whole number of points',
        'required': 'Please enter the points to add',
    })
    comments = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, data):
        try:
            check_points(data['category'], data['points'])
        except ScoringError as exc:
            raise serializers.ValidationError({'points': str(exc)})
        return data


class CommentsSerializer(serializers.Serializer):
    """Per-category comments posted with the Save button"""
    educationalQualification = serializers.CharField(required=False, allow_blank=True)
    workExperience = serializers.CharField(required=False, allow_blank=True)
    professionalAchievements = serializers.CharField(required=False, allow_blank=True)
    interview = serializers.CharField(required=False, allow_blank=True)


class FinalizeSerializer(serializers.Serializer):
    comments = serializers.CharField(
        trim_whitespace=True,
        error_messages={
            'blank': 'Please enter your final comments for this evaluation',
            'required': 'Please enter your final comments for this evaluation',
        },
    )
    confirm = serializers.BooleanField(default=False)

    def validate_confirm(self, value):
        if not value:
            raise serializers.ValidationError('Please confirm that this evaluation is final')
        return value
