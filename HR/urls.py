"""
HR App - Main URL Configuration
This file routes URLs to the appropriate sub-apps within the HR module.
"""
from django.urls import path, include

app_name = 'hr'

urlpatterns = [
    # Work Structures URLs
    path('work_structures/', include('HR.work_structures.urls')),
    # Person & skill ledger URLs
    path('person/', include('HR.person.urls')),
    # Scoring, ranking and succession URLs
    path('career/', include('HR.career.urls')),
    # Promotion / transfer request workflow URLs
    path('requests/', include('HR.employee_requests.urls')),
]
