from django.core.exceptions import ValidationError
from django.db import models
from core.base.managers import SoftDeleteManager
from core.base.models import AuditMixin, SoftDeleteMixin
from HR.person.models import MAX_PROFICIENCY_LEVEL, MIN_PROFICIENCY_LEVEL

MAX_CAREER_PATH_YEARS = 50


class SuccessionPlanStatus(models.TextChoices):
    ACTIVE = 'active', 'Active'
    COMPLETED = 'completed', 'Completed'
    ON_HOLD = 'on_hold', 'On Hold'


class CandidateStatus(models.TextChoices):
    UNDER_REVIEW = 'under_review', 'Under Review'
    APPROVED = 'approved', 'Approved'
    IN_TRAINING = 'in_training', 'In Training'
    READY = 'ready', 'Ready'


class SuccessionRisk(models.TextChoices):
    HIGH = 'high', 'High'
    MEDIUM = 'medium', 'Medium'
    LOW = 'low', 'Low'


class SuccessionPlan(AuditMixin, models.Model):
    """
    Succession plan for a position.

    A position has at most one Active plan at a time; completed and on-hold
    plans are kept for history.
    """
    position = models.ForeignKey(
        'work_structures.Position',
        on_delete=models.CASCADE,
        related_name='succession_plans'
    )
    status = models.CharField(
        max_length=20,
        choices=SuccessionPlanStatus.choices,
        default=SuccessionPlanStatus.ACTIVE
    )
    notes = models.TextField(blank=True, default='')
    review_date = models.DateField(null=True, blank=True)

    class Meta:
        db_table = 'hr_succession_plan'
        verbose_name = 'Succession Plan'
        verbose_name_plural = 'Succession Plans'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['position'],
                condition=models.Q(status='active'),
                name='unique_active_succession_plan'
            ),
        ]

    def __str__(self):
        return f"Succession plan for {self.position_id} ({self.get_status_display()})"


class SuccessionCandidate(AuditMixin, models.Model):
    """
    Employee ranked as a potential successor within a plan.

    ``match_score`` is a snapshot taken when the candidate was added or when
    scores were last recomputed; it does not track ledger changes live.
    """
    plan = models.ForeignKey(
        SuccessionPlan,
        on_delete=models.CASCADE,
        related_name='candidates'
    )
    employee = models.ForeignKey(
        'person.Employee',
        on_delete=models.CASCADE,
        related_name='succession_candidacies'
    )
    priority = models.PositiveIntegerField(help_text="1 = first successor")
    match_score = models.DecimalField(max_digits=5, decimal_places=2, default=0)
    score_calculated_at = models.DateTimeField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=CandidateStatus.choices,
        default=CandidateStatus.UNDER_REVIEW
    )
    notes = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'hr_succession_candidate'
        verbose_name = 'Succession Candidate'
        verbose_name_plural = 'Succession Candidates'
        ordering = ['plan', 'priority']
        constraints = [
            models.UniqueConstraint(
                fields=['plan', 'employee'],
                name='unique_plan_candidate'
            ),
            models.CheckConstraint(
                condition=models.Q(match_score__gte=0) & models.Q(match_score__lte=100),
                name='candidate_match_score_range'
            ),
            models.CheckConstraint(
                condition=models.Q(priority__gte=1),
                name='candidate_priority_positive'
            ),
        ]

    def __str__(self):
        return f"{self.employee_id} #{self.priority} for plan {self.plan_id}"

    def clean(self):
        super().clean()
        if self.plan_id and self.employee_id:
            if self.employee.current_position_id == self.plan.position_id:
                raise ValidationError({'employee': 'An employee cannot succeed their own position'})


class CareerPath(SoftDeleteMixin, AuditMixin, models.Model):
    """
    A recognised move from one position to another.

    The path carries its own skill bar (``required_skills``), which can be
    stricter or looser than the target position's requirements, plus a
    minimum tenure. Readiness for a path is scored against that bar.

    Fields:
    - from_position / to_position: Distinct positions; one path per pair
    - min_years_in_current_role: 0-50, measured from the employee's hire date
    - description: Free text shown to employees browsing their options
    """
    from_position = models.ForeignKey(
        'work_structures.Position',
        on_delete=models.CASCADE,
        related_name='career_paths_from'
    )
    to_position = models.ForeignKey(
        'work_structures.Position',
        on_delete=models.CASCADE,
        related_name='career_paths_to'
    )
    min_years_in_current_role = models.PositiveSmallIntegerField(default=1)
    description = models.TextField(blank=True, default='')

    objects = SoftDeleteManager()

    class Meta:
        db_table = 'hr_career_path'
        verbose_name = 'Career Path'
        verbose_name_plural = 'Career Paths'
        ordering = ['from_position__title', 'to_position__title']
        constraints = [
            models.UniqueConstraint(
                fields=['from_position', 'to_position'],
                name='unique_career_path'
            ),
            models.CheckConstraint(
                condition=~models.Q(from_position=models.F('to_position')),
                name='career_path_distinct_positions'
            ),
            models.CheckConstraint(
                condition=models.Q(min_years_in_current_role__lte=MAX_CAREER_PATH_YEARS),
                name='career_path_min_years_range'
            ),
        ]

    def __str__(self):
        return f"{self.from_position_id} -> {self.to_position_id}"

    def clean(self):
        super().clean()
        if self.from_position_id and self.from_position_id == self.to_position_id:
            raise ValidationError({'to_position': 'A career path must lead to a different position'})
        if self.min_years_in_current_role is not None and self.min_years_in_current_role > MAX_CAREER_PATH_YEARS:
            raise ValidationError({
                'min_years_in_current_role': f'Minimum years must be between 0 and {MAX_CAREER_PATH_YEARS}'
            })


class CareerPathSkill(AuditMixin, models.Model):
    """Minimum proficiency a career path asks for in one skill."""
    career_path = models.ForeignKey(
        CareerPath,
        on_delete=models.CASCADE,
        related_name='required_skills'
    )
    skill = models.ForeignKey(
        'person.Skill',
        on_delete=models.PROTECT,
        related_name='career_path_requirements'
    )
    min_proficiency_level = models.PositiveSmallIntegerField()
    is_mandatory = models.BooleanField(default=True)
    weight = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = 'hr_career_path_skill'
        verbose_name = 'Career Path Skill'
        verbose_name_plural = 'Career Path Skills'
        ordering = ['career_path', '-is_mandatory', 'skill__name']
        constraints = [
            models.UniqueConstraint(
                fields=['career_path', 'skill'],
                name='unique_career_path_skill'
            ),
            models.CheckConstraint(
                condition=models.Q(min_proficiency_level__gte=MIN_PROFICIENCY_LEVEL) &
                models.Q(min_proficiency_level__lte=MAX_PROFICIENCY_LEVEL),
                name='career_path_skill_level_range'
            ),
            models.CheckConstraint(
                condition=models.Q(weight__gte=1),
                name='career_path_skill_weight_positive'
            ),
        ]

    def __str__(self):
        return f"Path {self.career_path_id} needs {self.skill_id} at {self.min_proficiency_level}"

    def clean(self):
        super().clean()
        if self.min_proficiency_level is not None and not (
            MIN_PROFICIENCY_LEVEL <= self.min_proficiency_level <= MAX_PROFICIENCY_LEVEL
        ):
            raise ValidationError({
                'min_proficiency_level': f'Level must be between {MIN_PROFICIENCY_LEVEL} and {MAX_PROFICIENCY_LEVEL}'
            })
        if self.weight is not None and self.weight < 1:
            raise ValidationError({'weight': 'Weight must be a positive integer'})
