from django.core.exceptions import ValidationError
from django.db import models
from core.base.models import SoftDeleteMixin, AuditMixin
from core.base.managers import SoftDeleteManager


class SkillCategory(models.TextChoices):
    TECHNICAL = 'technical', 'Technical'
    LEADERSHIP = 'leadership', 'Leadership'
    COMMUNICATION = 'communication', 'Communication'
    BUSINESS = 'business', 'Business'
    CREATIVE = 'creative', 'Creative'
    ANALYTICAL = 'analytical', 'Analytical'
    OTHER = 'other', 'Other'


class Skill(SoftDeleteMixin, AuditMixin, models.Model):
    """
    Skill catalog entry.

    Once proficiency or requirement records point at a skill its identity
    (name and category) is frozen; the skill can only be deactivated.
    """
    name = models.CharField(max_length=100, unique=True)
    category = models.CharField(
        max_length=20,
        choices=SkillCategory.choices,
        default=SkillCategory.OTHER
    )
    description = models.TextField(blank=True, default='')

    objects = SoftDeleteManager()

    class Meta:
        db_table = 'hr_skill'
        verbose_name = 'Skill'
        verbose_name_plural = 'Skills'
        ordering = ['name']
        indexes = [
            models.Index(fields=['category', 'status']),
        ]

    def __str__(self):
        return f"{self.name} ({self.get_category_display()})"

    def is_referenced(self):
        """True once any proficiency, requirement or career path record uses this skill."""
        return (
            self.employee_skills.exists()
            or self.position_requirements.exists()
            or self.career_path_requirements.exists()
        )

    def clean(self):
        super().clean()
        if not self.name or not self.name.strip():
            raise ValidationError({'name': 'Skill name cannot be empty'})

    def hard_delete(self):
        if self.is_referenced():
            raise ValidationError(
                f'Skill "{self.name}" is referenced by proficiency or requirement records; deactivate it instead'
            )
        super().hard_delete()
