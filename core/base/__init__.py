"""
Shared base classes for every app.

Managers live in core.base.managers and errors in core.base.exceptions so
that importing this package never touches the app registry.
"""

from core.base.models import (
    StatusChoices,
    AuditMixin,
    SoftDeleteMixin,
)

__all__ = [
    'StatusChoices',
    'AuditMixin',
    'SoftDeleteMixin',
]
