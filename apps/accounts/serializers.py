# apps/accounts/serializers.py
from rest_framework import serializers

from apps.core.choices import ASSESSOR_TYPE_CHOICES, EXPERTISE_CHOICES


class LoginSerializer(serializers.Serializer):
    """Login form shared by all three roles"""

    email = serializers.EmailField(error_messages={
        'invalid': 'Please enter a valid email address (e.g., user@example.com)',
        'blank': 'Please enter both email and password.',
        'required': 'Please enter both email and password.',
    })
    password = serializers.CharField(
        style={'input_type': 'password'},
        trim_whitespace=False,
        error_messages={
            'blank': 'Please enter both email and password.',
            'required': 'Please enter both email and password.',
        },
    )
    remember_me = serializers.BooleanField(default=False)


class PasswordConfirmMixin:
    mismatch_message = 'Passwords do not match!'

    def validate(self, attrs):
        if attrs.get('password') != attrs.pop('confirm_password', None):
            raise serializers.ValidationError({'confirm_password': self.mismatch_message})
        return attrs


class ApplicantRegisterSerializer(PasswordConfirmMixin, serializers.Serializer):
    email = serializers.EmailField(error_messages={
        'invalid': 'Please enter a valid email address (e.g., user@example.com)',
        'blank': 'Please fill in all fields',
    })
    password = serializers.CharField(
        min_length=8,
        trim_whitespace=False,
        error_messages={
            'min_length': 'Password must be at least 8 characters',
            'blank': 'Please fill in all fields',
        },
    )
    confirm_password = serializers.CharField(trim_whitespace=False, error_messages={
        'blank': 'Please fill in all fields',
    })


class AdminRegisterSerializer(PasswordConfirmMixin, serializers.Serializer):
    """Payload for ``/admin/register``"""
    mismatch_message = "Passwords don't match"

    full_name = serializers.CharField(source='fullName', error_messages={
        'blank': 'All fields are required',
    })
    email = serializers.EmailField(error_messages={'blank': 'All fields are required'})
    password = serializers.CharField(
        min_length=8,
        max_length=16,
        trim_whitespace=False,
        error_messages={
            'min_length': 'Password must be 8-16 characters',
            'max_length': 'Password must be 8-16 characters',
            'blank': 'All fields are required',
        },
    )
    confirm_password = serializers.CharField(trim_whitespace=False, error_messages={
        'blank': 'All fields are required',
    })


class AssessorRegisterSerializer(PasswordConfirmMixin, serializers.Serializer):
    """Payload for ``/assessor/register``; also used by the admin's assessor form"""
    mismatch_message = 'Passwords do not match'

    full_name = serializers.CharField(source='fullName', error_messages={
        'blank': 'All fields are required',
    })
    email = serializers.EmailField(error_messages={'blank': 'All fields are required'})
    password = serializers.CharField(trim_whitespace=False, error_messages={
        'blank': 'All fields are required',
    })
    confirm_password = serializers.CharField(trim_whitespace=False, error_messages={
        'blank': 'All fields are required',
    })
    assessor_type = serializers.ChoiceField(
        source='assessorType',
        choices=ASSESSOR_TYPE_CHOICES,
        error_messages={'invalid_choice': 'Please select an assessor type'},
    )
    expertise = serializers.ChoiceField(
        choices=EXPERTISE_CHOICES,
        error_messages={'invalid_choice': 'Please select an area of expertise'},
    )
