# apps/accounts/urls.py
from django.urls import path

from . import views

app_name = 'accounts'

urlpatterns = [
    # Applicant
    path('applicant/login/', views.applicant_login, name='applicant-login'),
    path('applicant/register/', views.applicant_register, name='applicant-register'),
    path('applicant/logout/', views.applicant_logout, name='applicant-logout'),

    # Admin
    path('admin/login/', views.admin_login, name='admin-login'),
    path('admin/register/', views.admin_register, name='admin-register'),
    path('admin/logout/', views.admin_logout, name='admin-logout'),

    # Assessor
    path('assessor/login/', views.assessor_login, name='assessor-login'),
    path('assessor/register/', views.assessor_register, name='assessor-register'),
    path('assessor/logout/', views.assessor_logout, name='assessor-logout'),

    # Session check used by page scripts
    path('api/auth-status/<str:role>/', views.auth_status, name='auth-status'),
]
