"""
URL configuration for HR Person module.
"""
from django.urls import path

from . import views

app_name = 'person'

urlpatterns = [
    # Employee endpoints
    path('employees/', views.employee_list, name='employee_list'),
    path('employees/<int:pk>/', views.employee_detail, name='employee_detail'),

    # Skill catalog endpoints
    path('skills/', views.skill_list, name='skill_list'),
    path('skills/<int:pk>/', views.skill_detail, name='skill_detail'),
    path('skills/<int:pk>/reactivate/', views.skill_reactivate, name='skill_reactivate'),

    # Proficiency records
    path('employees/<int:employee_id>/skills/', views.employee_skill_list, name='employee_skill_list'),
    path('employees/<int:employee_id>/skills/<int:skill_id>/', views.employee_skill_detail, name='employee_skill_detail'),

    # Requirement records
    path('positions/<int:position_id>/skills/', views.position_skill_list, name='position_skill_list'),
    path('positions/<int:position_id>/skills/<int:skill_id>/', views.position_skill_detail, name='position_skill_detail'),
]
