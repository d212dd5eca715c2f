# Employee records
from .employee import Employee

# Skill ledger
from .skill import Skill, SkillCategory
from .employee_skill import EmployeeSkill, MIN_PROFICIENCY_LEVEL, MAX_PROFICIENCY_LEVEL
from .position_skill import PositionSkill

__all__ = [
    'Employee',
    'Skill',
    'SkillCategory',
    'EmployeeSkill',
    'PositionSkill',
    'MIN_PROFICIENCY_LEVEL',
    'MAX_PROFICIENCY_LEVEL',
]
