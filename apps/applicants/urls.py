# apps/applicants/urls.py
from django.urls import path

from . import views

app_name = 'applicants'

urlpatterns = [
    path('information/', views.information, name='information'),
    path('documents/', views.documents, name='documents'),
    path('timeline/', views.timeline, name='timeline'),
    path('result/', views.result, name='result'),
    path('result/pdf/', views.result_pdf, name='result-pdf'),
    path('portfolio/', views.portfolio, name='portfolio'),
    path('profile/', views.profile, name='profile'),
]
