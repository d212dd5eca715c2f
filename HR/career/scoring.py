"""
Match Scoring Engine

Computes how well one candidate's skill set matches one position's required
skills. ``score_candidate`` is a pure function over plain mappings so it can
be unit tested without a database and fanned out across threads by the
ranking service; the ``load_*`` helpers adapt the skill ledger into those
mappings.

Scoring rule, per required skill:

    gap       = max(0, required_level - candidate_level)
    fraction  = min(1, candidate_level / required_level)
    penalty   = gap * weight * factor     (mandatory skills only)

    score = (sum(fraction * weight) - sum(penalty)) / sum(weight) * 100

clamped to [0, 100] and rounded half-up to two decimals. A candidate missing
any mandatory level can never reach 100. With no requirements every
candidate scores 100.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Mapping, Optional, Tuple

from django.conf import settings
from django.core.exceptions import ValidationError

from core.base.exceptions import NotFound
from HR.person.models import Employee, EmployeeSkill, PositionSkill
from HR.work_structures.models import Position

DEFAULT_MANDATORY_PENALTY_FACTOR = Decimal('0.1')
MAX_SCORE = Decimal('100')
MIN_SCORE = Decimal('0')
SCORE_QUANTUM = Decimal('0.01')


@dataclass(frozen=True)
class Requirement:
    """One required skill of a position."""
    required_level: int
    mandatory: bool = True
    weight: int = 1
    skill_name: str = ''


@dataclass(frozen=True)
class SkillGap:
    skill_id: int
    skill_name: str
    required_level: int
    candidate_level: int
    gap: int
    mandatory: bool
    weight: int


@dataclass(frozen=True)
class MatchResult:
    score: Decimal
    gaps: Tuple[SkillGap, ...]

    @property
    def unmet_mandatory(self):
        return [g for g in self.gaps if g.mandatory and g.gap > 0]

    @property
    def is_fully_qualified(self):
        return all(g.gap == 0 for g in self.gaps)


def get_mandatory_penalty_factor() -> Decimal:
    return Decimal(str(getattr(settings, 'CAREER_MANDATORY_PENALTY_FACTOR', DEFAULT_MANDATORY_PENALTY_FACTOR)))


def _gap_sort_key(gap: SkillGap):
    # mandatory first, then widest gap, then skill id
    return (not gap.mandatory, -gap.gap, gap.skill_id)


def score_candidate(
    proficiencies: Mapping[int, int],
    requirements: Mapping[int, Requirement],
    penalty_factor: Optional[Decimal] = None,
) -> MatchResult:
    """
    Score a candidate against a requirement set.

    Args:
        proficiencies: skill_id -> proficiency level held by the candidate
        requirements: skill_id -> Requirement of the position
        penalty_factor: mandatory gap penalty; defaults to
            settings.CAREER_MANDATORY_PENALTY_FACTOR

    Returns:
        MatchResult with the score and the ordered gap report

    Raises:
        ValidationError: required level below 1, weight below 1, or a
            negative proficiency level
    """
    if penalty_factor is None:
        penalty_factor = get_mandatory_penalty_factor()
    penalty_factor = Decimal(str(penalty_factor))
    if penalty_factor < 0:
        raise ValidationError({'penalty_factor': 'Penalty factor cannot be negative'})

    if not requirements:
        return MatchResult(score=MAX_SCORE.quantize(SCORE_QUANTUM), gaps=())

    achieved = Decimal('0')
    penalty = Decimal('0')
    total_weight = Decimal('0')
    gaps = []

    for skill_id, requirement in requirements.items():
        if requirement.required_level < 1:
            raise ValidationError({'required_level': f'Required level for skill {skill_id} must be at least 1'})
        if requirement.weight < 1:
            raise ValidationError({'weight': f'Weight for skill {skill_id} must be a positive integer'})

        level = int(proficiencies.get(skill_id, 0))
        if level < 0:
            raise ValidationError({'proficiency_level': f'Proficiency for skill {skill_id} cannot be negative'})

        weight = Decimal(requirement.weight)
        required = Decimal(requirement.required_level)
        gap = max(0, requirement.required_level - level)

        achieved += min(Decimal('1'), Decimal(level) / required) * weight
        total_weight += weight
        if requirement.mandatory and gap > 0:
            penalty += Decimal(gap) * weight * penalty_factor

        gaps.append(SkillGap(
            skill_id=skill_id,
            skill_name=requirement.skill_name,
            required_level=requirement.required_level,
            candidate_level=level,
            gap=gap,
            mandatory=requirement.mandatory,
            weight=requirement.weight,
        ))

    raw = (achieved - penalty) / total_weight * MAX_SCORE
    score = min(MAX_SCORE, max(MIN_SCORE, raw)).quantize(SCORE_QUANTUM, rounding=ROUND_HALF_UP)
    return MatchResult(score=score, gaps=tuple(sorted(gaps, key=_gap_sort_key)))


# ============================================================================
# Skill ledger adapters
# ============================================================================

def load_requirements(position_ids: Iterable[int]) -> Dict[int, Dict[int, Requirement]]:
    """Requirement sets keyed by position id, one query for all positions."""
    position_ids = list(position_ids)
    result = {position_id: {} for position_id in position_ids}
    rows = (
        PositionSkill.objects
        .filter(position_id__in=position_ids)
        .values_list('position_id', 'skill_id', 'skill__name', 'required_level', 'is_mandatory', 'weight')
    )
    for position_id, skill_id, skill_name, required_level, is_mandatory, weight in rows:
        result[position_id][skill_id] = Requirement(
            required_level=required_level,
            mandatory=is_mandatory,
            weight=weight,
            skill_name=skill_name,
        )
    return result


def load_proficiencies(employee_ids: Iterable[int]) -> Dict[int, Dict[int, int]]:
    """Proficiency mappings keyed by employee id, one query for all employees."""
    employee_ids = list(employee_ids)
    result = {employee_id: {} for employee_id in employee_ids}
    rows = (
        EmployeeSkill.objects
        .filter(employee_id__in=employee_ids)
        .values_list('employee_id', 'skill_id', 'proficiency_level')
    )
    for employee_id, skill_id, level in rows:
        result[employee_id][skill_id] = level
    return result


def score_employee_for_position(employee_id: int, position_id: int) -> MatchResult:
    """
    Score one stored employee against one stored position.

    Raises:
        NotFound: employee or position does not exist
    """
    if not Employee.objects.filter(pk=employee_id).exists():
        raise NotFound('Employee', employee_id)
    if not Position.objects.filter(pk=position_id).exists():
        raise NotFound('Position', position_id)

    requirements = load_requirements([position_id])[position_id]
    proficiencies = load_proficiencies([employee_id])[employee_id]
    return score_candidate(proficiencies, requirements)
