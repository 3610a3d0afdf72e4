# apps/evaluations/urls.py
from django.urls import path

from . import views

app_name = 'evaluations'

urlpatterns = [
    path('evaluate/', views.evaluate_scores, name='evaluate'),
    path('scoring-rules/', views.scoring_rules, name='scoring-rules'),
    path('drafts/<str:applicant_id>/', views.draft_summary, name='draft-summary'),
]
