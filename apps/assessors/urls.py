# apps/assessors/urls.py
from django.urls import path

from . import views

app_name = 'assessors'

urlpatterns = [
    path('dashboard/', views.dashboard, name='dashboard'),
    path('applicants/', views.applicant_list, name='applicants'),
    path('applicants/<str:applicant_id>/', views.evaluation, name='evaluation'),
    path('applicants/<str:applicant_id>/reject/', views.reject_applicant, name='applicant-reject'),

    # Scoring
    path('scoring/<str:applicant_id>/', views.scoring, name='scoring'),
    path('scoring/<str:applicant_id>/points/', views.add_points, name='add-points'),
    path('scoring/<str:applicant_id>/save/', views.save_scores, name='save-scores'),
    path('scoring/<str:applicant_id>/finalize/', views.finalize, name='finalize'),

    path('profile/', views.profile, name='profile'),
    path('approval/', views.approval, name='approval'),
]
