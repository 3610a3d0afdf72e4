# apps/dashboard/serializers.py
from rest_framework import serializers

from apps.core.choices import ASSESSOR_TYPE_CHOICES, COURSE_STATUS_CHOICES, EXPERTISE_CHOICES
from apps.core.utils import is_object_id
from apps.evaluations.workflow import ALL_STATUSES, EVALUATION_STATUSES


class AssessorSerializer(serializers.Serializer):
    """
    The admin's assessor form.

    A password is required when creating an assessor; on update a blank
    password leaves the current one alone.
    """
    full_name = serializers.CharField(source='fullName', error_messages={
        'blank': 'Full name is required',
    })
    email = serializers.EmailField()
    password = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    assessor_type = serializers.ChoiceField(source='assessorType', choices=ASSESSOR_TYPE_CHOICES)
    expertise = serializers.ChoiceField(choices=EXPERTISE_CHOICES)

    def validate(self, attrs):
        creating = not self.context.get('editing')
        if not attrs.get('password'):
            if creating:
                raise serializers.ValidationError({'password': 'Password is required'})
            attrs.pop('password', None)
        return attrs


class AdminAccountSerializer(serializers.Serializer):
    full_name = serializers.CharField(source='fullName', error_messages={
        'blank': 'Full name is required',
    })
    email = serializers.EmailField()
    password = serializers.CharField(
        required=False,
        allow_blank=True,
        trim_whitespace=False,
        max_length=16,
        error_messages={'max_length': 'Password must be 8-16 characters'},
    )

    def validate(self, attrs):
        password = attrs.get('password')
        if password and len(password) < 8:
            raise serializers.ValidationError({'password': 'Password must be 8-16 characters'})
        if not password:
            if not self.context.get('editing'):
                raise serializers.ValidationError({'password': 'Password is required'})
            attrs.pop('password', None)
        return attrs


class CourseSerializer(serializers.Serializer):
    name = serializers.CharField(error_messages={'blank': 'Course name is required'})
    description = serializers.CharField(required=False, allow_blank=True, default='')
    duration = serializers.IntegerField(min_value=1, error_messages={
        'invalid': 'Duration must be a whole number',
        'min_value': 'Duration must be at least 1',
    })
    status = serializers.ChoiceField(choices=COURSE_STATUS_CHOICES, default='active')


class AssignAssessorSerializer(serializers.Serializer):
    assessor_id = serializers.CharField(source='assessorId', error_messages={
        'blank': 'Please select an assessor',
        'required': 'Please select an assessor',
    })

    def validate_assessor_id(self, value):
        if not is_object_id(value):
            raise serializers.ValidationError('Please select an assessor')
        return value


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[(value, value) for value in ALL_STATUSES],
        error_messages={'invalid_choice': 'Unknown applicant status'},
    )

    def validate_status(self, value):
        if value in EVALUATION_STATUSES:
            raise serializers.ValidationError(
                'Passed and Failed are set when the assessor finalizes the evaluation'
            )
        return value
