"""
Querysets for soft-deletable models.

    Skill.objects.active().filter(category=SkillCategory.TECHNICAL)
    Department.objects.with_status(request.query_params.get('status'))
"""

from django.db import models
from django.db.models import Q
from core.base.models import StatusChoices


class BaseQuerySet(models.QuerySet):
    """Shared list filters; ``SEARCH_FIELDS`` names the columns ``search`` scans."""
    SEARCH_FIELDS = ('code', 'name')

    def _has_field(self, name):
        return any(f.name == name for f in self.model._meta.get_fields())

    def filter_by_search_params(self, query_params):
        """
        Apply the optional ``code`` (exact, case-insensitive), ``name``
        (contains) and ``search`` (contains across SEARCH_FIELDS) filters.
        Keys naming a column the model lacks are ignored.
        """
        queryset = self
        if query_params.get('code') and self._has_field('code'):
            queryset = queryset.filter(code__iexact=query_params['code'])
        if query_params.get('name') and self._has_field('name'):
            queryset = queryset.filter(name__icontains=query_params['name'])

        search = query_params.get('search')
        if search:
            condition = Q()
            for field in self.SEARCH_FIELDS:
                if self._has_field(field.split('__')[0]):
                    condition |= Q(**{f'{field}__icontains': search})
            if condition:
                queryset = queryset.filter(condition)
        return queryset


class SoftDeleteQuerySet(BaseQuerySet):

    def active(self):
        return self.filter(status=StatusChoices.ACTIVE)

    def inactive(self):
        return self.filter(status=StatusChoices.INACTIVE)

    def with_status(self, status):
        """Filter by status when one is given; ``None`` or '' keeps everything."""
        return self.filter(status=status) if status else self


class SoftDeleteManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    pass
