"""
Career App Configuration
"""

from django.apps import AppConfig


class CareerConfig(AppConfig):
    """Configuration for the Career app (scoring, ranking, succession planning)"""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'HR.career'
    label = 'career'
    verbose_name = 'Career & Succession'
