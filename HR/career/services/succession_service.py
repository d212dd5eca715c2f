import logging
from decimal import Decimal
from typing import List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F, Max
from django.utils import timezone

from core.base.exceptions import NotFound, get_active_or_invalid
from HR.career.dtos import (
    SuccessionPlanCreateDTO,
    SuccessionPlanUpdateDTO,
    SuccessionCandidateCreateDTO,
    SuccessionCandidateUpdateDTO,
)
from HR.career.models import (
    CandidateStatus,
    SuccessionCandidate,
    SuccessionPlan,
    SuccessionPlanStatus,
    SuccessionRisk,
)
from HR.career.ranking import rank_candidates_for_position
from HR.career.scoring import load_proficiencies, load_requirements, score_candidate
from HR.person.models import Employee
from HR.work_structures.models import Position

logger = logging.getLogger(__name__)

DEFAULT_DISCOVERY_MIN_SCORE = Decimal('60')
LOW_RISK_READY_CANDIDATES = 2


class SuccessionService:
    """Service for succession planning business logic"""

    @staticmethod
    def get_plan(plan_id: int) -> SuccessionPlan:
        try:
            return SuccessionPlan.objects.select_related('position').get(pk=plan_id)
        except SuccessionPlan.DoesNotExist:
            raise NotFound('Succession plan', plan_id) from None

    @staticmethod
    def get_candidates(plan_id: int) -> List[SuccessionCandidate]:
        return list(
            SuccessionCandidate.objects
            .filter(plan_id=plan_id)
            .select_related('employee')
            .order_by('priority', 'employee_id')
        )

    @staticmethod
    def list_plans(filters: dict):
        queryset = SuccessionPlan.objects.select_related('position', 'position__department')
        if filters.get('status'):
            queryset = queryset.filter(status=filters['status'])
        if filters.get('position_id'):
            queryset = queryset.filter(position_id=filters['position_id'])
        if filters.get('department_id'):
            queryset = queryset.filter(position__department_id=filters['department_id'])
        return queryset.order_by('position__department__name', 'position__title')

    # ========================================================================
    # Plans
    # ========================================================================

    @staticmethod
    @transaction.atomic
    def create_plan(user, dto: SuccessionPlanCreateDTO) -> SuccessionPlan:
        """
        Open a succession plan for an active position.

        Validates:
        - Position exists and is active
        - No other Active plan for the position
        """
        position = get_active_or_invalid(Position, 'Position', dto.position_id, 'position_id')

        if SuccessionPlan.objects.filter(position=position, status=SuccessionPlanStatus.ACTIVE).exists():
            raise ValidationError({'position_id': 'Position already has an active succession plan'})

        plan = SuccessionPlan(
            position=position,
            notes=dto.notes or '',
            review_date=dto.review_date,
            created_by=user,
            updated_by=user
        )
        plan.full_clean()
        plan.save()

        if dto.auto_discover:
            SuccessionService.discover_candidates(user, plan.pk)
        return plan

    @staticmethod
    @transaction.atomic
    def update_plan(user, dto: SuccessionPlanUpdateDTO) -> SuccessionPlan:
        plan = SuccessionService.get_plan(dto.plan_id)

        if dto.status is not None:
            if dto.status not in SuccessionPlanStatus.values:
                raise ValidationError({'status': f'Invalid plan status "{dto.status}"'})
            if (dto.status == SuccessionPlanStatus.ACTIVE and plan.status != SuccessionPlanStatus.ACTIVE
                    and SuccessionPlan.objects.filter(
                        position_id=plan.position_id, status=SuccessionPlanStatus.ACTIVE
                    ).exists()):
                raise ValidationError({'status': 'Position already has an active succession plan'})
            plan.status = dto.status
        if dto.notes is not None:
            plan.notes = dto.notes
        if dto.review_date is not None:
            plan.review_date = dto.review_date

        plan.updated_by = user
        plan.full_clean()
        plan.save()
        return plan

    # ========================================================================
    # Candidates
    # ========================================================================

    @staticmethod
    def _next_priority(plan_id) -> int:
        current = SuccessionCandidate.objects.filter(plan_id=plan_id).aggregate(top=Max('priority'))['top']
        return (current or 0) + 1

    @staticmethod
    @transaction.atomic
    def add_candidate(user, dto: SuccessionCandidateCreateDTO) -> SuccessionCandidate:
        """
        Add an employee to a plan, scoring them against the plan's position.

        Inserting at an explicit priority shifts the candidates at or below it
        down by one; without one the candidate goes last.
        """
        plan = SuccessionService.get_plan(dto.plan_id)
        employee = get_active_or_invalid(Employee, 'Employee', dto.employee_id, 'employee_id')

        if SuccessionCandidate.objects.filter(plan=plan, employee=employee).exists():
            raise ValidationError({'employee_id': 'Employee is already a candidate in this plan'})

        next_priority = SuccessionService._next_priority(plan.pk)
        priority = dto.priority or next_priority
        if priority < 1:
            raise ValidationError({'priority': 'Priority must be a positive integer'})
        priority = min(priority, next_priority)

        requirements = load_requirements([plan.position_id])[plan.position_id]
        proficiencies = load_proficiencies([employee.pk])[employee.pk]
        result = score_candidate(proficiencies, requirements)

        candidate = SuccessionCandidate(
            plan=plan,
            employee=employee,
            priority=priority,
            match_score=result.score,
            score_calculated_at=timezone.now(),
            status=dto.status or CandidateStatus.UNDER_REVIEW,
            notes=dto.notes or '',
            created_by=user,
            updated_by=user
        )
        candidate.full_clean()

        SuccessionCandidate.objects.filter(plan=plan, priority__gte=priority).update(priority=F('priority') + 1)
        candidate.save()
        return candidate

    @staticmethod
    @transaction.atomic
    def update_candidate(user, dto: SuccessionCandidateUpdateDTO) -> SuccessionCandidate:
        try:
            candidate = SuccessionCandidate.objects.select_for_update().get(pk=dto.candidate_id)
        except SuccessionCandidate.DoesNotExist:
            raise NotFound('Succession candidate', dto.candidate_id) from None

        if dto.priority is not None and dto.priority != candidate.priority:
            last = SuccessionService._next_priority(candidate.plan_id) - 1
            new_priority = min(max(dto.priority, 1), last)
            siblings = SuccessionCandidate.objects.filter(plan_id=candidate.plan_id).exclude(pk=candidate.pk)
            if new_priority > candidate.priority:
                siblings.filter(
                    priority__gt=candidate.priority, priority__lte=new_priority
                ).update(priority=F('priority') - 1)
            else:
                siblings.filter(
                    priority__gte=new_priority, priority__lt=candidate.priority
                ).update(priority=F('priority') + 1)
            candidate.priority = new_priority

        if dto.status is not None:
            if dto.status not in CandidateStatus.values:
                raise ValidationError({'status': f'Invalid candidate status "{dto.status}"'})
            candidate.status = dto.status
        if dto.notes is not None:
            candidate.notes = dto.notes

        candidate.updated_by = user
        candidate.full_clean()
        candidate.save()
        return candidate

    @staticmethod
    @transaction.atomic
    def remove_candidate(user, candidate_id: int):
        """Remove a candidate and close the gap in the priority sequence."""
        try:
            candidate = SuccessionCandidate.objects.select_for_update().get(pk=candidate_id)
        except SuccessionCandidate.DoesNotExist:
            raise NotFound('Succession candidate', candidate_id) from None

        plan_id, removed_priority = candidate.plan_id, candidate.priority
        candidate.delete()
        SuccessionCandidate.objects.filter(
            plan_id=plan_id, priority__gt=removed_priority
        ).update(priority=F('priority') - 1)

    @staticmethod
    @transaction.atomic
    def discover_candidates(user, plan_id: int, min_score=None, limit: Optional[int] = None) -> List[SuccessionCandidate]:
        """
        Add the best-matching employees to a plan.

        Ranks every active employee against the plan's position and adds those
        scoring at least ``min_score`` (settings.CAREER_SUCCESSION_MIN_SCORE,
        default 60) who are not already candidates, in rank order after the
        existing candidates.
        """
        plan = SuccessionService.get_plan(plan_id)
        if plan.status != SuccessionPlanStatus.ACTIVE:
            raise ValidationError({'plan_id': 'Candidates can only be discovered for an active plan'})

        if min_score is None:
            min_score = getattr(settings, 'CAREER_SUCCESSION_MIN_SCORE', DEFAULT_DISCOVERY_MIN_SCORE)

        existing = set(plan.candidates.values_list('employee_id', flat=True))
        ranked = [
            r for r in rank_candidates_for_position(plan.position_id, min_score=min_score)
            if r.employee_id not in existing
        ]
        if limit is not None:
            ranked = ranked[:limit]

        priority = SuccessionService._next_priority(plan.pk)
        now = timezone.now()
        created = []
        for offset, ranked_candidate in enumerate(ranked):
            candidate = SuccessionCandidate(
                plan=plan,
                employee_id=ranked_candidate.employee_id,
                priority=priority + offset,
                match_score=ranked_candidate.score,
                score_calculated_at=now,
                status=CandidateStatus.UNDER_REVIEW,
                notes=f"Auto-discovered candidate. Match score: {ranked_candidate.score:.1f}%",
                created_by=user,
                updated_by=user
            )
            candidate.save()
            created.append(candidate)

        logger.info("Discovered %d candidates for succession plan %s", len(created), plan.pk)
        return created

    @staticmethod
    @transaction.atomic
    def recompute_scores(user, plan_id: int) -> List[SuccessionCandidate]:
        """Refresh every candidate's match score from current ledger data."""
        plan = SuccessionService.get_plan(plan_id)
        candidates = list(plan.candidates.select_for_update().order_by('priority'))

        requirements = load_requirements([plan.position_id])[plan.position_id]
        proficiencies = load_proficiencies(c.employee_id for c in candidates)
        now = timezone.now()
        for candidate in candidates:
            candidate.match_score = score_candidate(proficiencies[candidate.employee_id], requirements).score
            candidate.score_calculated_at = now
            candidate.updated_by = user
        SuccessionCandidate.objects.bulk_update(candidates, ['match_score', 'score_calculated_at', 'updated_by'])
        return SuccessionService.get_candidates(plan.pk)

    # ========================================================================
    # Risk
    # ========================================================================

    @staticmethod
    def calculate_risk(position_id: int) -> dict:
        """
        Succession risk of a position.

        - No active plan, or no Ready candidate: High for key positions, else Medium
        - Two or more Ready candidates: Low
        - Otherwise: Medium
        """
        try:
            position = Position.objects.get(pk=position_id)
        except Position.DoesNotExist:
            raise NotFound('Position', position_id) from None

        plan = SuccessionPlan.objects.filter(position=position, status=SuccessionPlanStatus.ACTIVE).first()
        total = ready = 0
        if plan is not None:
            total = plan.candidates.count()
            ready = plan.candidates.filter(status=CandidateStatus.READY).count()

        if plan is None or ready == 0:
            risk = SuccessionRisk.HIGH if position.is_key_position else SuccessionRisk.MEDIUM
        elif ready >= LOW_RISK_READY_CANDIDATES:
            risk = SuccessionRisk.LOW
        else:
            risk = SuccessionRisk.MEDIUM

        return {
            'position_id': position.pk,
            'position_title': position.title,
            'is_key_position': position.is_key_position,
            'has_active_plan': plan is not None,
            'total_candidates': total,
            'ready_candidates': ready,
            'risk_level': risk.value,
        }
