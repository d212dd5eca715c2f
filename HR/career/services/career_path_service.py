"""
Career paths: recognised moves between positions and how ready an
employee is to take one.

Readiness reuses the match scoring engine with the path's own skill bar as
the requirement set, then adds the path's tenure rule:

    ready = no unmet mandatory skill AND years since hire >= min years
"""
import logging
from collections import deque
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional, Tuple

from django.core.exceptions import ValidationError
from django.db import transaction

from core.base.exceptions import NotFound, get_active_or_invalid, get_or_not_found
from HR.career.dtos import CareerPathCreateDTO, CareerPathSkillDTO, CareerPathUpdateDTO
from HR.career.models import CareerPath, CareerPathSkill
from HR.career.scoring import MatchResult, Requirement, load_proficiencies, score_candidate
from HR.person.models import Employee, Skill
from HR.work_structures.models import Position

logger = logging.getLogger(__name__)

DAYS_PER_YEAR = Decimal('365.25')
MIN_STEP_MONTHS = 12
MAX_RECOMMENDATIONS_PER_GAP_LIST = 3


@dataclass(frozen=True)
class PathReadiness:
    career_path_id: int
    employee_id: int
    to_position_id: int
    to_position_title: str
    match: MatchResult
    years_in_current_role: Decimal
    min_years_in_current_role: int
    recommendations: Tuple[str, ...]

    @property
    def score(self) -> Decimal:
        return self.match.score

    @property
    def gaps(self):
        return self.match.gaps

    @property
    def meets_experience_requirement(self) -> bool:
        return self.years_in_current_role >= self.min_years_in_current_role

    @property
    def is_ready(self) -> bool:
        return self.meets_experience_requirement and not self.match.unmet_mandatory


@dataclass(frozen=True)
class RoadmapStep:
    order: int
    career_path_id: int
    from_position_id: int
    to_position_id: int
    estimated_months: int


@dataclass(frozen=True)
class CareerRoadmap:
    employee_id: int
    current_position_id: int
    target_position_id: int
    steps: Tuple[RoadmapStep, ...]

    @property
    def is_reachable(self) -> bool:
        return bool(self.steps)

    @property
    def estimated_total_months(self) -> int:
        return sum(step.estimated_months for step in self.steps)


def years_since(start: date, today: Optional[date] = None) -> Decimal:
    today = today or date.today()
    days = max(0, (today - start).days)
    return (Decimal(days) / DAYS_PER_YEAR).quantize(Decimal('0.1'), rounding=ROUND_HALF_UP)


def load_path_requirements(career_path_ids: Iterable[int]) -> Dict[int, Dict[int, Requirement]]:
    """Skill bars keyed by career path id, one query for all paths."""
    career_path_ids = list(career_path_ids)
    result = {path_id: {} for path_id in career_path_ids}
    rows = (
        CareerPathSkill.objects
        .filter(career_path_id__in=career_path_ids)
        .values_list('career_path_id', 'skill_id', 'skill__name', 'min_proficiency_level', 'is_mandatory', 'weight')
    )
    for path_id, skill_id, skill_name, level, is_mandatory, weight in rows:
        result[path_id][skill_id] = Requirement(
            required_level=level,
            mandatory=is_mandatory,
            weight=weight,
            skill_name=skill_name,
        )
    return result


def _recommendations(match: MatchResult, years: Decimal, min_years: int) -> Tuple[str, ...]:
    advice = []
    if years < min_years:
        advice.append(f"Gain {Decimal(min_years) - years:.1f} more years of experience in the current role")
    for gap in match.unmet_mandatory[:MAX_RECOMMENDATIONS_PER_GAP_LIST]:
        advice.append(f"Develop {gap.skill_name} to level {gap.required_level}")
    return tuple(advice)


class CareerPathService:
    """Service for career path business logic"""

    @staticmethod
    def get_path(career_path_id: int) -> CareerPath:
        try:
            return (
                CareerPath.objects
                .select_related('from_position', 'to_position')
                .get(pk=career_path_id)
            )
        except CareerPath.DoesNotExist:
            raise NotFound('Career path', career_path_id) from None

    @staticmethod
    def list_paths(filters: dict):
        """
        Filters: status, from_position_id, to_position_id
        """
        queryset = (
            CareerPath.objects
            .with_status(filters.get('status'))
            .select_related('from_position', 'to_position', 'from_position__department')
        )
        if filters.get('from_position_id'):
            queryset = queryset.filter(from_position_id=filters['from_position_id'])
        if filters.get('to_position_id'):
            queryset = queryset.filter(to_position_id=filters['to_position_id'])
        return queryset.order_by('from_position__department__name', 'from_position__title', 'to_position__title')

    @staticmethod
    def get_required_skills(career_path_id: int) -> List[CareerPathSkill]:
        return list(
            CareerPathSkill.objects
            .filter(career_path_id=career_path_id)
            .select_related('skill')
            .order_by('-is_mandatory', 'skill__name')
        )

    # ========================================================================
    # Paths
    # ========================================================================

    @staticmethod
    @transaction.atomic
    def create(user, dto: CareerPathCreateDTO) -> CareerPath:
        """
        Create a career path with its skill bar.

        Validates:
        - Both positions exist and are active, and differ
        - No path already links the same pair
        - Each skill appears once in the bar
        """
        from_position = get_active_or_invalid(Position, 'Position', dto.from_position_id, 'from_position_id')
        to_position = get_active_or_invalid(Position, 'Position', dto.to_position_id, 'to_position_id')
        if from_position.pk == to_position.pk:
            raise ValidationError({'to_position_id': 'A career path must lead to a different position'})
        if CareerPath.objects.filter(from_position=from_position, to_position=to_position).exists():
            raise ValidationError({'to_position_id': 'A career path already links these positions'})

        skill_ids = [skill.skill_id for skill in dto.required_skills]
        if len(skill_ids) != len(set(skill_ids)):
            raise ValidationError({'required_skills': 'Each skill may appear only once'})

        career_path = CareerPath(
            from_position=from_position,
            to_position=to_position,
            min_years_in_current_role=dto.min_years_in_current_role,
            description=dto.description or '',
            created_by=user,
            updated_by=user
        )
        career_path.full_clean()
        career_path.save()

        for skill_dto in dto.required_skills:
            skill_dto.career_path_id = career_path.pk
            CareerPathService.upsert_skill(user, skill_dto)

        logger.info(
            "Career path %s created (%s -> %s) by user %s",
            career_path.pk, from_position.pk, to_position.pk, getattr(user, 'pk', None)
        )
        return career_path

    @staticmethod
    @transaction.atomic
    def update(user, dto: CareerPathUpdateDTO) -> CareerPath:
        career_path = CareerPathService.get_path(dto.career_path_id)
        field_updates = {'updated_by': user}
        if dto.min_years_in_current_role is not None:
            field_updates['min_years_in_current_role'] = dto.min_years_in_current_role
        if dto.description is not None:
            field_updates['description'] = dto.description
        return career_path.update_fields(field_updates)

    @staticmethod
    @transaction.atomic
    def deactivate(user, career_path_id: int) -> CareerPath:
        career_path = CareerPathService.get_path(career_path_id)
        if not career_path.is_active:
            raise ValidationError({'career_path_id': 'Career path is already inactive'})
        career_path.deactivate(user)
        return career_path

    @staticmethod
    @transaction.atomic
    def reactivate(user, career_path_id: int) -> CareerPath:
        career_path = CareerPathService.get_path(career_path_id)
        if career_path.is_active:
            raise ValidationError({'career_path_id': 'Career path is already active'})
        career_path.reactivate(user)
        return career_path

    # ========================================================================
    # Skill bar
    # ========================================================================

    @staticmethod
    @transaction.atomic
    def upsert_skill(user, dto: CareerPathSkillDTO) -> CareerPathSkill:
        """Add a skill to a path's bar, or update it in place. New entries need an active skill."""
        career_path = CareerPathService.get_path(dto.career_path_id)
        skill = get_or_not_found(Skill, 'Skill', dto.skill_id)

        requirement = (
            CareerPathSkill.objects
            .select_for_update()
            .filter(career_path=career_path, skill=skill)
            .first()
        )
        if requirement is None:
            if not skill.is_active:
                raise ValidationError({'skill_id': f'Skill "{skill.name}" is inactive'})
            requirement = CareerPathSkill(career_path=career_path, skill=skill, created_by=user)

        requirement.min_proficiency_level = dto.min_proficiency_level
        requirement.is_mandatory = dto.is_mandatory
        requirement.weight = dto.weight
        requirement.updated_by = user
        requirement.full_clean()
        requirement.save()
        return requirement

    @staticmethod
    @transaction.atomic
    def remove_skill(user, career_path_id: int, skill_id: int):
        deleted, _ = CareerPathSkill.objects.filter(career_path_id=career_path_id, skill_id=skill_id).delete()
        if not deleted:
            raise NotFound('Career path skill', f'{career_path_id}/{skill_id}')

    # ========================================================================
    # Readiness
    # ========================================================================

    @staticmethod
    def _readiness(employee: Employee, career_path: CareerPath, requirements, proficiencies,
                   today: Optional[date] = None) -> PathReadiness:
        match = score_candidate(proficiencies, requirements)
        years = years_since(employee.hire_date, today)
        return PathReadiness(
            career_path_id=career_path.pk,
            employee_id=employee.pk,
            to_position_id=career_path.to_position_id,
            to_position_title=career_path.to_position.title,
            match=match,
            years_in_current_role=years,
            min_years_in_current_role=career_path.min_years_in_current_role,
            recommendations=_recommendations(match, years, career_path.min_years_in_current_role),
        )

    @staticmethod
    def analyze_readiness(employee_id: int, career_path_id: int, today: Optional[date] = None) -> PathReadiness:
        """
        Score an employee against a path's skill bar and tenure rule.

        Raises:
            NotFound: employee or career path does not exist
        """
        employee = get_or_not_found(Employee, 'Employee', employee_id)
        career_path = CareerPathService.get_path(career_path_id)
        requirements = load_path_requirements([career_path.pk])[career_path.pk]
        proficiencies = load_proficiencies([employee.pk])[employee.pk]
        return CareerPathService._readiness(employee, career_path, requirements, proficiencies, today)

    @staticmethod
    def recommended_paths(employee_id: int, today: Optional[date] = None) -> List[PathReadiness]:
        """
        Active paths out of the employee's current position, most ready first.

        Ties are broken by ascending career path id.

        Raises:
            NotFound: unknown employee
            ValidationError: employee has no current position
        """
        employee = get_or_not_found(Employee, 'Employee', employee_id)
        if employee.current_position_id is None:
            raise ValidationError({'employee_id': f'{employee.full_name} has no current position'})

        paths = list(
            CareerPath.objects.active()
            .filter(from_position_id=employee.current_position_id, to_position__status='active')
            .select_related('to_position')
        )
        requirements = load_path_requirements(path.pk for path in paths)
        proficiencies = load_proficiencies([employee.pk])[employee.pk]

        readiness = [
            CareerPathService._readiness(employee, path, requirements[path.pk], proficiencies, today)
            for path in paths
        ]
        readiness.sort(key=lambda r: (-r.score, r.career_path_id))
        return readiness

    @staticmethod
    def roadmap(employee_id: int, target_position_id: int) -> CareerRoadmap:
        """
        Shortest chain of active career paths from the employee's current
        position to the target. An unreachable target yields no steps.

        Raises:
            NotFound: unknown employee or target position
            ValidationError: no current position, or already in the target
        """
        employee = get_or_not_found(Employee, 'Employee', employee_id)
        get_or_not_found(Position, 'Position', target_position_id)
        start = employee.current_position_id
        if start is None:
            raise ValidationError({'employee_id': f'{employee.full_name} has no current position'})
        if start == target_position_id:
            raise ValidationError({'position_id': 'Employee already holds the target position'})

        edges = {}
        for path in CareerPath.objects.active().filter(to_position__status='active').order_by('pk'):
            edges.setdefault(path.from_position_id, []).append(path)

        came_from = {start: None}
        queue = deque([start])
        while queue and target_position_id not in came_from:
            position_id = queue.popleft()
            for path in edges.get(position_id, ()):
                if path.to_position_id not in came_from:
                    came_from[path.to_position_id] = path
                    queue.append(path.to_position_id)

        chain = []
        node = target_position_id if target_position_id in came_from else None
        while node is not None and came_from[node] is not None:
            path = came_from[node]
            chain.append(path)
            node = path.from_position_id
        chain.reverse()

        steps = tuple(
            RoadmapStep(
                order=index,
                career_path_id=path.pk,
                from_position_id=path.from_position_id,
                to_position_id=path.to_position_id,
                estimated_months=max(path.min_years_in_current_role * 12, MIN_STEP_MONTHS),
            )
            for index, path in enumerate(chain, start=1)
        )
        return CareerRoadmap(
            employee_id=employee.pk,
            current_position_id=start,
            target_position_id=target_position_id,
            steps=steps,
        )
