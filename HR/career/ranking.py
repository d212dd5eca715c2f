"""
Candidate Ranking Service

Applies the match scoring engine across a pool: employees for a position, or
positions for an employee. Ledger data is loaded in bulk up front; scoring
itself touches no database so large pools are fanned out to a thread pool
and merged before the final deterministic sort (score desc, id asc).
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from django.conf import settings
from django.core.exceptions import ValidationError

from core.base.exceptions import NotFound
from core.base.models import StatusChoices
from HR.career.scoring import (
    MatchResult,
    SkillGap,
    get_mandatory_penalty_factor,
    load_proficiencies,
    load_requirements,
    score_candidate,
)
from HR.person.models import Employee
from HR.work_structures.models import Position

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedCandidate:
    employee_id: int
    employee_name: str
    score: Decimal
    gaps: Tuple[SkillGap, ...]


@dataclass(frozen=True)
class RankedPosition:
    position_id: int
    position_title: str
    department_id: Optional[int]
    score: Decimal
    gaps: Tuple[SkillGap, ...]


def _validate_id(value, field):
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError({field: 'Must be a positive integer'})


def _score_pool(jobs: List[tuple]) -> List[MatchResult]:
    """
    Score (proficiencies, requirements) pairs, in input order.

    Runs inline for small pools and on a ThreadPoolExecutor above
    CAREER_RANKING_PARALLEL_THRESHOLD.
    """
    penalty_factor = get_mandatory_penalty_factor()
    threshold = getattr(settings, 'CAREER_RANKING_PARALLEL_THRESHOLD', 200)
    max_workers = getattr(settings, 'CAREER_RANKING_MAX_WORKERS', 4)

    def run(job):
        proficiencies, requirements = job
        return score_candidate(proficiencies, requirements, penalty_factor)

    if len(jobs) <= threshold or max_workers <= 1:
        return [run(job) for job in jobs]

    logger.debug("Scoring %d entries on %d workers", len(jobs), max_workers)
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(run, jobs))


def _apply_cutoffs(ranked: list, limit: Optional[int], min_score) -> list:
    if min_score is not None:
        min_score = Decimal(str(min_score))
        ranked = [r for r in ranked if r.score >= min_score]
    if limit is not None:
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValidationError({'limit': 'Limit must be a positive integer'})
        ranked = ranked[:limit]
    return ranked


def rank_candidates_for_position(
    position_id: int,
    candidate_ids: Optional[Iterable[int]] = None,
    limit: Optional[int] = None,
    min_score=None,
) -> List[RankedCandidate]:
    """
    Rank employees by fit for a position.

    Args:
        position_id: Position to rank against
        candidate_ids: Optional explicit pool; defaults to every active employee
        limit: Keep only the top N
        min_score: Drop candidates scoring below this

    Employees currently holding the position are never returned. Ties are
    broken by ascending employee id.

    Raises:
        ValidationError: non-positive ids, inactive position
        NotFound: unknown position, or an unknown id in candidate_ids
    """
    _validate_id(position_id, 'position_id')
    try:
        position = Position.objects.get(pk=position_id)
    except Position.DoesNotExist:
        raise NotFound('Position', position_id) from None
    if position.status != StatusChoices.ACTIVE:
        raise ValidationError({'position_id': f'Position "{position.title}" is inactive'})

    if candidate_ids is None:
        pool = Employee.objects.active()
    else:
        candidate_ids = set(candidate_ids)
        for candidate_id in candidate_ids:
            _validate_id(candidate_id, 'candidate_ids')
        pool = Employee.objects.filter(pk__in=candidate_ids)
        missing = candidate_ids - set(pool.values_list('pk', flat=True))
        if missing:
            raise NotFound('Employee', min(missing))

    employees = list(
        pool.exclude(current_position_id=position.pk)
        .order_by('pk')
        .values_list('pk', 'first_name', 'last_name')
    )
    requirements = load_requirements([position.pk])[position.pk]
    proficiencies = load_proficiencies(pk for pk, _, _ in employees)

    results = _score_pool([(proficiencies[pk], requirements) for pk, _, _ in employees])

    ranked = [
        RankedCandidate(
            employee_id=pk,
            employee_name=f"{first} {last}".strip(),
            score=result.score,
            gaps=result.gaps,
        )
        for (pk, first, last), result in zip(employees, results)
    ]
    ranked.sort(key=lambda r: (-r.score, r.employee_id))

    logger.info("Ranked %d candidates for position %s", len(ranked), position.pk)
    return _apply_cutoffs(ranked, limit, min_score)


def rank_positions_for_employee(
    employee_id: int,
    limit: Optional[int] = None,
    min_score=None,
    department_id: Optional[int] = None,
) -> List[RankedPosition]:
    """
    Rank active positions by the employee's fit, using the same scoring.

    The employee's current position is excluded. Ties are broken by
    ascending position id.

    Raises:
        ValidationError: non-positive id
        NotFound: unknown employee
    """
    _validate_id(employee_id, 'employee_id')
    try:
        employee = Employee.objects.get(pk=employee_id)
    except Employee.DoesNotExist:
        raise NotFound('Employee', employee_id) from None

    positions = Position.objects.active()
    if department_id is not None:
        positions = positions.filter(department_id=department_id)
    if employee.current_position_id is not None:
        positions = positions.exclude(pk=employee.current_position_id)
    positions = list(positions.order_by('pk').values_list('pk', 'title', 'department_id'))

    requirements = load_requirements(pk for pk, _, _ in positions)
    proficiencies = load_proficiencies([employee.pk])[employee.pk]

    results = _score_pool([(proficiencies, requirements[pk]) for pk, _, _ in positions])

    ranked = [
        RankedPosition(
            position_id=pk,
            position_title=title,
            department_id=dept_id,
            score=result.score,
            gaps=result.gaps,
        )
        for (pk, title, dept_id), result in zip(positions, results)
    ]
    ranked.sort(key=lambda r: (-r.score, r.position_id))
    return _apply_cutoffs(ranked, limit, min_score)
