# apps/dashboard/urls.py
from django.urls import path

from . import admin_views, reports_views, views

app_name = 'dashboard'

urlpatterns = [
    # Dashboard
    path('dashboard/', views.dashboard, name='dashboard'),
    path('api/stats/', views.dashboard_stats, name='dashboard-stats'),

    # Applicants
    path('applicants/', views.applicant_list, name='applicants'),
    path('applicants/export/', reports_views.export_applicants, name='applicants-export'),
    path('applicants/<str:applicant_id>/', views.applicant_detail, name='applicant-detail'),
    path('applicants/<str:applicant_id>/approve/', views.approve_applicant, name='applicant-approve'),
    path('applicants/<str:applicant_id>/reject/', views.reject_applicant, name='applicant-reject'),
    path('applicants/<str:applicant_id>/assign-assessor/', views.assign_assessor, name='applicant-assign'),
    path('applicants/<str:applicant_id>/status/', views.update_status, name='applicant-status'),

    # Documents
    path('documents/', views.documents, name='documents'),

    # ========== MANAGEMENT ==========
    path('assessors/', admin_views.assessor_list, name='assessors'),
    path('assessors/new/', admin_views.save_assessor, name='assessor-create'),
    path('assessors/<str:assessor_id>/', admin_views.assessor_profile, name='assessor-profile'),
    path('assessors/<str:assessor_id>/edit/', admin_views.save_assessor, name='assessor-update'),
    path('assessors/<str:assessor_id>/delete/', admin_views.delete_assessor, name='assessor-delete'),

    path('courses/', admin_views.course_list, name='courses'),
    path('courses/new/', admin_views.save_course, name='course-create'),
    path('courses/<str:course_id>/edit/', admin_views.save_course, name='course-update'),
    path('courses/<str:course_id>/delete/', admin_views.delete_course, name='course-delete'),

    path('admins/', admin_views.admin_list, name='admins'),
    path('admins/new/', admin_views.save_admin, name='admin-create'),
    path('admins/<str:admin_id>/edit/', admin_views.save_admin, name='admin-update'),
    path('admins/<str:admin_id>/delete/', admin_views.delete_admin, name='admin-delete'),
]
