from django.db import models
from django.core.exceptions import ValidationError
from core.base.models import SoftDeleteMixin, AuditMixin
from core.base.managers import SoftDeleteManager
from .department import Department


class PositionLevel(models.TextChoices):
    JUNIOR = 'junior', 'Junior'
    MID = 'mid', 'Mid'
    SENIOR = 'senior', 'Senior'
    LEAD = 'lead', 'Lead'
    MANAGER = 'manager', 'Manager'
    DIRECTOR = 'director', 'Director'


class Position(SoftDeleteMixin, AuditMixin, models.Model):
    """
    Job position within a department.

    Required skills hang off the position as PositionSkill rows
    (``position.skill_requirements``) and are what candidates are scored against.

    Fields:
    - code: Unique position code
    - title: Display title
    - department: Owning department
    - level: Seniority band
    - min_salary / max_salary: Optional salary band (proposed salaries must fall inside)
    - is_key_position: Key positions raise succession risk when no successor is ready
    """
    code = models.CharField(max_length=50, unique=True)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default='')
    department = models.ForeignKey(
        Department,
        on_delete=models.PROTECT,
        related_name='positions'
    )
    level = models.CharField(
        max_length=20,
        choices=PositionLevel.choices,
        default=PositionLevel.MID
    )
    min_salary = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    max_salary = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    is_key_position = models.BooleanField(
        default=False,
        help_text="Critical role tracked by succession planning"
    )

    objects = SoftDeleteManager()

    class Meta:
        db_table = 'hr_position'
        verbose_name = 'Position'
        verbose_name_plural = 'Positions'
        ordering = ['title']
        indexes = [
            models.Index(fields=['department', 'status']),
        ]

    def __str__(self):
        return f"{self.code} - {self.title}"

    def clean(self):
        super().clean()
        if self.min_salary is not None and self.min_salary < 0:
            raise ValidationError({'min_salary': 'Minimum salary cannot be negative'})
        if (self.min_salary is not None and self.max_salary is not None
                and self.min_salary > self.max_salary):
            raise ValidationError({'max_salary': 'Maximum salary must be greater than or equal to minimum salary'})

    def salary_in_band(self, amount):
        """True when ``amount`` falls within the band; open ends always pass."""
        if self.min_salary is not None and amount < self.min_salary:
            return False
        if self.max_salary is not None and amount > self.max_salary:
            return False
        return True
