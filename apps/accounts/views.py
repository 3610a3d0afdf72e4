# apps/accounts/views.py
import logging

from django.contrib import messages
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods, require_POST
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from apps.core.backend import BackendError
from apps.core.choices import (
    ASSESSOR_TYPE_CHOICES, EXPERTISE_CHOICES, ROLE_ADMIN, ROLE_APPLICANT, ROLE_ASSESSOR, ROLES,
)
from apps.core.session import get_auth
from apps.core.utils import first_error, login_url

from . import services
from .serializers import (
    AdminRegisterSerializer, ApplicantRegisterSerializer, AssessorRegisterSerializer, LoginSerializer,
)

logger = logging.getLogger(__name__)

REMEMBER_EMAIL_COOKIE = 'admin_email'
REMEMBER_EMAIL_MAX_AGE = 60 * 60 * 24 * 30

# Where each role lands after logging in
HOME_URL_NAMES = {
    ROLE_APPLICANT: 'applicants:timeline',
    ROLE_ADMIN: 'dashboard:dashboard',
    ROLE_ASSESSOR: 'assessors:dashboard',
}

ROLE_TITLES = {
    ROLE_APPLICANT: 'Applicant',
    ROLE_ADMIN: 'Admin',
    ROLE_ASSESSOR: 'Assessor',
}


def _login_page(request, role, template='accounts/login.html', extra_context=None):
    """Render a role's login form, or log in on POST"""
    if request.method == 'GET' and get_auth(request, role):
        return redirect(HOME_URL_NAMES[role])

    context = {
        'role': role,
        'role_title': ROLE_TITLES[role],
        'email': '',
    }
    context.update(extra_context or {})

    if request.method == 'POST':
        serializer = LoginSerializer(data=request.POST)
        context['email'] = request.POST.get('email', '')
        if not serializer.is_valid():
            messages.error(request, first_error(serializer.errors))
            return render(request, template, context, status=400)

        data = serializer.validated_data
        extra = {'rememberMe': data['remember_me']} if role == ROLE_ADMIN else None
        try:
            services.login(request, role, data['email'], data['password'], extra=extra)
        except BackendError as exc:
            logger.warning('%s login failed for %s: %s', role, data['email'], exc.message)
            messages.error(request, exc.message or 'Login failed. Please try again.')
            return render(request, template, context, status=401)

        messages.success(request, 'Login successful!')
        response = redirect(HOME_URL_NAMES[role])
        if role == ROLE_ADMIN:
            if data['remember_me']:
                response.set_cookie(REMEMBER_EMAIL_COOKIE, data['email'], max_age=REMEMBER_EMAIL_MAX_AGE)
            else:
                response.delete_cookie(REMEMBER_EMAIL_COOKIE)
        return response

    return render(request, template, context)


def _logout(request, role):
    services.logout(request, role)
    messages.success(request, 'Logout successful!')
    return redirect(login_url(role))


# ========== APPLICANT ==========

@require_http_methods(['GET', 'POST'])
def applicant_login(request):
    return _login_page(request, ROLE_APPLICANT)


@require_http_methods(['GET', 'POST'])
def applicant_register(request):
    """Create an applicant account, then sign straight in"""
    template = 'accounts/applicant_register.html'
    if request.method == 'GET':
        return render(request, template)

    serializer = ApplicantRegisterSerializer(data=request.POST)
    if not serializer.is_valid():
        messages.error(request, first_error(serializer.errors, 'Please fill in all fields'))
        return render(request, template, {'email': request.POST.get('email', '')}, status=400)

    data = serializer.validated_data
    try:
        services.register(ROLE_APPLICANT, data)
        services.login(request, ROLE_APPLICANT, data['email'], data['password'])
    except BackendError as exc:
        messages.error(request, f'Registration failed: {exc.message}')
        return render(request, template, {'email': data['email']}, status=400)

    messages.success(request, 'Registration successful! Please fill out your personal information.')
    return redirect('applicants:information')


@require_POST
def applicant_logout(request):
    return _logout(request, ROLE_APPLICANT)


# ========== ADMIN ==========

@require_http_methods(['GET', 'POST'])
def admin_login(request):
    remembered = request.COOKIES.get(REMEMBER_EMAIL_COOKIE, '')
    context = {'remembered_email': remembered, 'remember_me': bool(remembered)}
    if request.method == 'GET':
        context['email'] = remembered
    return _login_page(request, ROLE_ADMIN, extra_context=context)


@require_http_methods(['GET', 'POST'])
def admin_register(request):
    template = 'accounts/admin_register.html'
    if request.method == 'GET':
        return render(request, template)

    serializer = AdminRegisterSerializer(data=request.POST)
    context = {
        'full_name': request.POST.get('full_name', ''),
        'email': request.POST.get('email', ''),
    }
    if not serializer.is_valid():
        messages.error(request, first_error(serializer.errors, 'All fields are required'))
        return render(request, template, context, status=400)

    try:
        services.register(ROLE_ADMIN, serializer.validated_data)
    except BackendError as exc:
        messages.error(request, exc.message or 'Registration failed')
        return render(request, template, context, status=400)

    messages.success(request, 'Registration successful! Please log in.')
    return redirect('accounts:admin-login')


@require_POST
def admin_logout(request):
    return _logout(request, ROLE_ADMIN)


# ========== ASSESSOR ==========

@require_http_methods(['GET', 'POST'])
def assessor_login(request):
    return _login_page(request, ROLE_ASSESSOR)


@require_http_methods(['GET', 'POST'])
def assessor_register(request):
    template = 'accounts/assessor_register.html'
    context = {
        'expertise_choices': EXPERTISE_CHOICES,
        'assessor_type_choices': ASSESSOR_TYPE_CHOICES,
    }
    if request.method == 'GET':
        return render(request, template, context)

    context['form'] = request.POST
    serializer = AssessorRegisterSerializer(data=request.POST)
    if not serializer.is_valid():
        messages.error(request, first_error(serializer.errors, 'All fields are required'))
        return render(request, template, context, status=400)

    try:
        data = services.register(ROLE_ASSESSOR, serializer.validated_data)
    except BackendError as exc:
        messages.error(request, f'Error: {exc.message}')
        return render(request, template, context, status=400)

    assessor_id = data.get('assessorId') if isinstance(data, dict) else None
    messages.success(
        request,
        f'Success! Assessor ID: {assessor_id or "pending"}. Please wait for admin approval.',
    )
    return redirect('accounts:assessor-login')


@require_POST
def assessor_logout(request):
    return _logout(request, ROLE_ASSESSOR)


# ========== AUTH STATUS ==========

@api_view(['GET'])
def auth_status(request, role):
    """Whether the browser still holds a live backend session for ``role``"""
    if role not in ROLES:
        return Response({
            'success': False,
            'error': 'Unknown role',
        }, status=status.HTTP_404_NOT_FOUND)

    authenticated, user = services.check_auth_status(request, role)
    return Response({
        'success': True,
        'data': {
            'authenticated': authenticated,
            'user': user,
        },
    }, status=status.HTTP_200_OK)
