from django.core.exceptions import ValidationError
from django.db import models
from core.base.models import AuditMixin
from .skill import Skill
from .employee_skill import MIN_PROFICIENCY_LEVEL, MAX_PROFICIENCY_LEVEL


class PositionSkill(AuditMixin, models.Model):
    """
    Requirement record: a skill a position needs, at what level and how much it counts.

    Fields:
    - required_level: 1-5
    - is_mandatory: Unmet mandatory requirements are penalized in scoring
    - weight: Relative multiplier in the weighted score (positive, unbounded)
    """
    position = models.ForeignKey(
        'work_structures.Position',
        on_delete=models.CASCADE,
        related_name='skill_requirements'
    )
    skill = models.ForeignKey(
        Skill,
        on_delete=models.PROTECT,
        related_name='position_requirements'
    )
    required_level = models.PositiveSmallIntegerField()
    is_mandatory = models.BooleanField(default=True)
    weight = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = 'hr_position_skill'
        verbose_name = 'Position Skill Requirement'
        verbose_name_plural = 'Position Skill Requirements'
        ordering = ['position', '-is_mandatory', 'skill__name']
        constraints = [
            models.UniqueConstraint(
                fields=['position', 'skill'],
                name='unique_position_skill'
            ),
            models.CheckConstraint(
                condition=models.Q(required_level__gte=MIN_PROFICIENCY_LEVEL) &
                models.Q(required_level__lte=MAX_PROFICIENCY_LEVEL),
                name='position_skill_level_range'
            ),
            models.CheckConstraint(
                condition=models.Q(weight__gte=1),
                name='position_skill_weight_positive'
            ),
        ]

    def __str__(self):
        flag = 'mandatory' if self.is_mandatory else 'optional'
        return f"{self.position_id} requires {self.skill.name} at {self.required_level} ({flag})"

    def clean(self):
        super().clean()
        if self.required_level is not None and not (
            MIN_PROFICIENCY_LEVEL <= self.required_level <= MAX_PROFICIENCY_LEVEL
        ):
            raise ValidationError({
                'required_level': f'Required level must be between {MIN_PROFICIENCY_LEVEL} and {MAX_PROFICIENCY_LEVEL}'
            })
        if self.weight is not None and self.weight < 1:
            raise ValidationError({'weight': 'Weight must be a positive integer'})
