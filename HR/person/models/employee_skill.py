from django.core.exceptions import ValidationError
from django.db import models
from core.base.models import AuditMixin
from .skill import Skill

MIN_PROFICIENCY_LEVEL = 1
MAX_PROFICIENCY_LEVEL = 5


class EmployeeSkill(AuditMixin, models.Model):
    """
    Proficiency record: one employee's level in one skill.

    At most one row per (employee, skill); re-adding a skill updates the row
    in place. Rows go away with the employee.
    """
    employee = models.ForeignKey(
        'person.Employee',
        on_delete=models.CASCADE,
        related_name='skills'
    )
    skill = models.ForeignKey(
        Skill,
        on_delete=models.PROTECT,
        related_name='employee_skills'
    )
    proficiency_level = models.PositiveSmallIntegerField(
        help_text="Proficiency level from 1 (novice) to 5 (expert)"
    )
    acquired_date = models.DateField()
    last_assessed_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'hr_employee_skill'
        verbose_name = 'Employee Skill'
        verbose_name_plural = 'Employee Skills'
        ordering = ['employee', 'skill__name']
        indexes = [
            models.Index(fields=['skill', 'proficiency_level']),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['employee', 'skill'],
                name='unique_employee_skill'
            ),
            models.CheckConstraint(
                condition=models.Q(proficiency_level__gte=MIN_PROFICIENCY_LEVEL) &
                models.Q(proficiency_level__lte=MAX_PROFICIENCY_LEVEL),
                name='employee_skill_level_range'
            ),
        ]

    def __str__(self):
        return f"{self.employee_id} - {self.skill.name}: {self.proficiency_level}"

    def clean(self):
        super().clean()
        if self.proficiency_level is not None and not (
            MIN_PROFICIENCY_LEVEL <= self.proficiency_level <= MAX_PROFICIENCY_LEVEL
        ):
            raise ValidationError({
                'proficiency_level': f'Proficiency level must be between {MIN_PROFICIENCY_LEVEL} and {MAX_PROFICIENCY_LEVEL}'
            })
        if self.last_assessed_date and self.acquired_date and self.last_assessed_date < self.acquired_date:
            raise ValidationError({'last_assessed_date': 'Last assessed date cannot be before acquired date'})
