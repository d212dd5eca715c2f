"""
URL configuration for HR Work Structures module.
"""
from django.urls import path

from . import views

app_name = 'work_structures'

urlpatterns = [
    path('departments/', views.department_list, name='department_list'),
    path('departments/<int:pk>/', views.department_detail, name='department_detail'),

    path('positions/', views.position_list, name='position_list'),
    path('positions/<int:pk>/', views.position_detail, name='position_detail'),
]
