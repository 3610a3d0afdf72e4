# eteeap_portal/urls.py
from django.urls import path, include
from django.views.generic import TemplateView

urlpatterns = [
    # Public pages
    path('', TemplateView.as_view(template_name='landing_page.html'), name='home'),

    # Authentication (login / register / logout / auth-status per role)
    path('', include('apps.accounts.urls')),

    # Role page sets
    path('applicant/', include('apps.applicants.urls')),
    path('admin/', include('apps.dashboard.urls')),
    path('assessor/', include('apps.assessors.urls')),

    # JSON endpoints
    path('assessor/api/', include('apps.evaluations.urls')),
]
