"""
Person Domain

Handles all person-related functionality including:
- Person identity management
- Employee lifecycle
- Applicant tracking
- Contingent worker management
- Contact management
"""

default_app_config = 'HR.person.apps.PersonConfig'