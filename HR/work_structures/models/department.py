from django.db import models
from core.base.models import SoftDeleteMixin, AuditMixin
from core.base.managers import SoftDeleteManager


class Department(SoftDeleteMixin, AuditMixin, models.Model):
    """
    Organizational unit employees and positions belong to.

    Department-wide proficiency averages drive the critical gap report, so a
    department is deactivated rather than deleted once it has members.
    """
    code = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')

    objects = SoftDeleteManager()

    class Meta:
        db_table = 'hr_department'
        verbose_name = 'Department'
        verbose_name_plural = 'Departments'
        ordering = ['name']

    def __str__(self):
        return f"{self.code} - {self.name}"
