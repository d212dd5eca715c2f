"""
URL configuration for HR Career module (scoring, ranking, succession, career paths).
"""
from django.urls import path

from . import views

app_name = 'career'

urlpatterns = [
    # Scoring & ranking
    path('positions/<int:position_id>/score/<int:employee_id>/', views.score_candidate, name='score_candidate'),
    path('positions/<int:position_id>/candidates/', views.rank_candidates, name='rank_candidates'),
    path('employees/<int:employee_id>/positions/', views.rank_positions, name='rank_positions'),
    path('employees/<int:employee_id>/skill-gaps/', views.employee_skill_gaps, name='employee_skill_gaps'),
    path('skills/<int:skill_id>/gap-analysis/', views.skill_gap_analysis, name='skill_gap_analysis'),

    # Succession planning
    path('succession-plans/', views.succession_plan_list, name='succession_plan_list'),
    path('succession-plans/<int:pk>/', views.succession_plan_detail, name='succession_plan_detail'),
    path('succession-plans/<int:pk>/discover/', views.succession_plan_discover, name='succession_plan_discover'),
    path('succession-plans/<int:pk>/recompute-scores/', views.succession_plan_recompute, name='succession_plan_recompute'),
    path('succession-plans/<int:pk>/candidates/', views.succession_candidate_list, name='succession_candidate_list'),
    path('succession-candidates/<int:candidate_id>/', views.succession_candidate_detail, name='succession_candidate_detail'),
    path('positions/<int:position_id>/succession-risk/', views.succession_risk, name='succession_risk'),

    # Career paths
    path('career-paths/', views.career_path_list, name='career_path_list'),
    path('career-paths/<int:pk>/', views.career_path_detail, name='career_path_detail'),
    path('career-paths/<int:pk>/reactivate/', views.career_path_reactivate, name='career_path_reactivate'),
    path('career-paths/<int:pk>/skills/', views.career_path_skill_list, name='career_path_skill_list'),
    path('career-paths/<int:pk>/skills/<int:skill_id>/', views.career_path_skill_detail, name='career_path_skill_detail'),
    path('career-paths/<int:pk>/readiness/<int:employee_id>/', views.career_path_readiness, name='career_path_readiness'),
    path('employees/<int:employee_id>/career-paths/', views.career_path_recommendations, name='career_path_recommendations'),
    path('employees/<int:employee_id>/roadmap/<int:position_id>/', views.career_roadmap, name='career_roadmap'),
]
