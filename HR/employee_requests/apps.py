"""
Employee Requests App Configuration
"""

from django.apps import AppConfig


class EmployeeRequestsConfig(AppConfig):
    """Configuration for the promotion / transfer request workflow"""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'HR.employee_requests'
    label = 'employee_requests'
    verbose_name = 'Employee Requests'
