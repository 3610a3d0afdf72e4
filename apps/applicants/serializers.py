# apps/applicants/serializers.py
import os
from datetime import date

from django.conf import settings
from django.utils.dateparse import parse_date
from rest_framework import serializers

from apps.core.choices import ALLOWED_UPLOAD_TYPES, CIVIL_STATUS_CHOICES, GENDER_CHOICES

REQUIRED_MESSAGE = 'Please fill in all required fields'

ALLOWED_EXTENSIONS = ('.pdf', '.jpg', '.jpeg', '.png', '.doc', '.docx')


def _required_char(**kwargs):
    return serializers.CharField(
        error_messages={'blank': REQUIRED_MESSAGE, 'required': REQUIRED_MESSAGE},
        **kwargs
    )


def _optional_char(**kwargs):
    return serializers.CharField(required=False, allow_blank=True, default='', **kwargs)


def age_from_birth_date(birth_date, today=None):
    today = today or date.today()
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


class PersonalInfoSerializer(serializers.Serializer):
    """
    The applicant information form.

    Field sources carry the backend's ``personalInfo`` key names, so
    ``validated_data`` can be posted as-is.
    """
    firstname = _required_char()
    middlename = _optional_char()
    lastname = _required_char()
    suffix = _optional_char()
    gender = serializers.ChoiceField(
        choices=GENDER_CHOICES,
        error_messages={'invalid_choice': REQUIRED_MESSAGE},
    )
    age = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=120)
    occupation = _required_char()
    nationality = _required_char()
    civil_status = serializers.ChoiceField(
        source='civilstatus',
        choices=CIVIL_STATUS_CHOICES,
        error_messages={'invalid_choice': REQUIRED_MESSAGE},
    )
    birth_date = _required_char(source='birthDate')
    birthplace = _required_char()
    mobile_number = _required_char(source='mobileNumber')
    telephone_number = _optional_char(source='telephoneNumber')
    email_address = serializers.EmailField(
        source='emailAddress',
        error_messages={'blank': REQUIRED_MESSAGE, 'invalid': 'Please enter a valid email address'},
    )
    country = _required_char()
    province = _required_char()
    city = _required_char()
    street = _required_char()
    zip_code = _required_char(source='zipCode')
    first_priority_course = _required_char(source='firstPriorityCourse')
    second_priority_course = _optional_char(source='secondPriorityCourse')
    third_priority_course = _optional_char(source='thirdPriorityCourse')

    def validate_birth_date(self, value):
        try:
            parsed = parse_date(value)
        except ValueError:
            parsed = None
        if parsed is None:
            raise serializers.ValidationError('Please enter a valid birth date')
        if parsed > date.today():
            raise serializers.ValidationError('Birth date cannot be in the future')
        return value

    def validate_mobile_number(self, value):
        digits = ''.join(ch for ch in value if ch.isdigit())
        if len(digits) < 7 or len(digits) > 15:
            raise serializers.ValidationError('Please enter a valid phone number')
        return value

    def validate(self, attrs):
        if not attrs.get('age'):
            attrs['age'] = age_from_birth_date(parse_date(attrs['birthDate']))
        return attrs


class DocumentUploadSerializer(serializers.Serializer):
    """Files picked on the document submission page"""
    files = serializers.ListField(
        child=serializers.FileField(),
        allow_empty=False,
        error_messages={
            'empty': 'Please upload at least one document',
            'required': 'Please upload at least one document',
        },
    )

    def validate_files(self, files):
        max_bytes = settings.MAX_UPLOAD_MB * 1024 * 1024
        seen = set()
        for upload in files:
            name = upload.name
            if upload.size > max_bytes:
                raise serializers.ValidationError(
                    f'File "{name}" exceeds the {settings.MAX_UPLOAD_MB}MB limit.'
                )
            extension = os.path.splitext(name)[1].lower()
            if extension not in ALLOWED_EXTENSIONS or upload.content_type not in ALLOWED_UPLOAD_TYPES:
                raise serializers.ValidationError(
                    f'File "{name}" has an unsupported format. '
                    'Only PDF, JPG, PNG, and DOC/DOCX are allowed.'
                )
            if name in seen:
                raise serializers.ValidationError(f'File "{name}" is already uploaded.')
            seen.add(name)
        return files
