"""
Skill gap and department aggregate analysis.

Read-only aggregation over the skill ledger. An empty population is a
normal answer (zero averages), never an error.
"""
from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from django.core.exceptions import ValidationError

from core.base.exceptions import NotFound
from core.base.models import StatusChoices
from HR.career.scoring import MatchResult, score_employee_for_position
from HR.person.models import (
    Employee,
    EmployeeSkill,
    PositionSkill,
    Skill,
    MIN_PROFICIENCY_LEVEL,
    MAX_PROFICIENCY_LEVEL,
)

AVERAGE_QUANTUM = Decimal('0.01')
UNASSIGNED_DEPARTMENT = 'Unassigned'


def _average(values) -> Decimal:
    if not values:
        return Decimal('0.00')
    return (Decimal(sum(values)) / Decimal(len(values))).quantize(AVERAGE_QUANTUM, rounding=ROUND_HALF_UP)


def _stats(levels):
    return {
        'employee_count': len(levels),
        'average_proficiency': _average(levels),
        'min_proficiency': min(levels) if levels else 0,
        'max_proficiency': max(levels) if levels else 0,
    }


def get_skill_gap_analysis(skill_id: int, department_id: Optional[int] = None) -> dict:
    """
    Aggregate holders and requirements of one skill.

    Args:
        skill_id: Skill to analyze
        department_id: Restrict both employees and positions to one department

    Returns dict with:
        skill_id, skill_name, category,
        total_employees_with_skill, average/min/max_proficiency,
        by_department: [{department_id, department_name, employee_count, average/min/max_proficiency}],
        proficiency_distribution: {1..5: count},
        positions_requiring_skill, average_required_level,
        critical_gaps: [{position_id, position_title, department_id, required_level, weight,
                         department_average, employees_at_required_level}],
        critical_gap_count

    A critical gap is a mandatory requirement whose department-wide average
    proficiency among holders is below the required level.
    """
    try:
        skill = Skill.objects.get(pk=skill_id)
    except Skill.DoesNotExist:
        raise NotFound('Skill', skill_id) from None

    holders = EmployeeSkill.objects.filter(skill=skill, employee__status=StatusChoices.ACTIVE)
    requirements = PositionSkill.objects.filter(skill=skill, position__status=StatusChoices.ACTIVE)
    if department_id is not None:
        holders = holders.filter(employee__department_id=department_id)
        requirements = requirements.filter(position__department_id=department_id)

    rows = list(holders.values_list(
        'employee__department_id', 'employee__department__name', 'proficiency_level'
    ))
    levels = [level for _, _, level in rows]

    levels_by_department = defaultdict(list)
    department_names = {}
    for dept_id, dept_name, level in rows:
        levels_by_department[dept_id].append(level)
        department_names[dept_id] = dept_name or UNASSIGNED_DEPARTMENT

    by_department = [
        {'department_id': dept_id, 'department_name': department_names[dept_id], **_stats(dept_levels)}
        for dept_id, dept_levels in sorted(
            levels_by_department.items(), key=lambda item: (item[0] is None, item[0] or 0)
        )
    ]

    distribution = {level: 0 for level in range(MIN_PROFICIENCY_LEVEL, MAX_PROFICIENCY_LEVEL + 1)}
    for level in levels:
        distribution[level] += 1

    requirement_rows = list(
        requirements
        .select_related('position')
        .order_by('position_id')
    )
    required_levels = [r.required_level for r in requirement_rows]

    critical_gaps = []
    for requirement in requirement_rows:
        if not requirement.is_mandatory:
            continue
        dept_levels = levels_by_department.get(requirement.position.department_id, [])
        dept_average = _average(dept_levels)
        if dept_average < requirement.required_level:
            critical_gaps.append({
                'position_id': requirement.position_id,
                'position_title': requirement.position.title,
                'department_id': requirement.position.department_id,
                'required_level': requirement.required_level,
                'weight': requirement.weight,
                'department_average': dept_average,
                'employees_at_required_level': sum(1 for lvl in dept_levels if lvl >= requirement.required_level),
            })
    critical_gaps.sort(key=lambda g: (g['department_average'] - g['required_level'], g['position_id']))

    overall = _stats(levels)
    return {
        'skill_id': skill.pk,
        'skill_name': skill.name,
        'category': skill.category,
        'department_id': department_id,
        'total_employees_with_skill': overall['employee_count'],
        'average_proficiency': overall['average_proficiency'],
        'min_proficiency': overall['min_proficiency'],
        'max_proficiency': overall['max_proficiency'],
        'by_department': by_department,
        'proficiency_distribution': distribution,
        'positions_requiring_skill': len(requirement_rows),
        'average_required_level': _average(required_levels),
        'critical_gaps': critical_gaps,
        'critical_gap_count': len(critical_gaps),
    }


def get_employee_skill_gaps(employee_id: int, position_id: Optional[int] = None) -> MatchResult:
    """
    Gap report of one employee against a target position.

    Defaults to the employee's current position.
    """
    if position_id is None:
        try:
            employee = Employee.objects.get(pk=employee_id)
        except Employee.DoesNotExist:
            raise NotFound('Employee', employee_id) from None
        if employee.current_position_id is None:
            raise ValidationError({'position_id': 'Employee has no current position; a target position is required'})
        position_id = employee.current_position_id
    return score_employee_for_position(employee_id, position_id)
