"""
URL configuration for the employee request workflow.
"""
from django.urls import path

from . import views

app_name = 'employee_requests'

urlpatterns = [
    path('', views.request_list, name='request_list'),
    path('pending/', views.pending_requests, name='pending_requests'),
    path('<int:pk>/', views.request_detail, name='request_detail'),
    path('<int:pk>/history/', views.request_history, name='request_history'),
    path('<int:pk>/approve/', views.approve_request, name='approve_request'),
    path('<int:pk>/reject/', views.reject_request, name='reject_request'),
    path('<int:pk>/cancel/', views.cancel_request, name='cancel_request'),
]
