"""
Fixture builders shared by the test suites.

Each helper creates one row with sensible defaults; pass keyword arguments
to override any field.
"""
import itertools
from datetime import date

from django.contrib.auth import get_user_model

from core.user_accounts.models import UserRole

User = get_user_model()

_sequence = itertools.count(1)


def _next():
    return next(_sequence)


def make_user(role=UserRole.EMPLOYEE, email=None, name=None, **extra):
    n = _next()
    return User.objects.create_user(
        email=email or f'user{n}@example.com',
        name=name or f'User {n}',
        phone_number='1234567890',
        password='testpass123',
        role=role,
        **extra
    )


def make_department(name=None, **extra):
    from HR.work_structures.models import Department

    n = _next()
    return Department.objects.create(code=extra.pop('code', f'D{n:03d}'), name=name or f'Department {n}', **extra)


def make_position(department=None, title=None, **extra):
    from HR.work_structures.models import Position

    n = _next()
    return Position.objects.create(
        code=extra.pop('code', f'P{n:03d}'),
        title=title or f'Position {n}',
        department=department or make_department(),
        **extra
    )


def make_employee(user=None, first_name=None, last_name='Tester', **extra):
    """Create an employee; pass ``role`` instead of ``user`` to get a linked login too."""
    from HR.person.models import Employee

    n = _next()
    role = extra.pop('role', None)
    if user is None and role is not None:
        user = make_user(role=role)
    return Employee.objects.create(
        user=user,
        employee_number=extra.pop('employee_number', f'E{n:04d}'),
        first_name=first_name or f'Emp{n}',
        last_name=last_name,
        hire_date=extra.pop('hire_date', date(2020, 1, 1)),
        **extra
    )


def make_skill(name=None, **extra):
    from HR.person.models import Skill

    n = _next()
    return Skill.objects.create(name=name or f'Skill {n}', **extra)


def give_skill(employee, skill, level):
    from HR.person.models import EmployeeSkill

    return EmployeeSkill.objects.create(
        employee=employee, skill=skill, proficiency_level=level, acquired_date=date(2021, 1, 1)
    )


def require_skill(position, skill, level, mandatory=True, weight=1):
    from HR.person.models import PositionSkill

    return PositionSkill.objects.create(
        position=position, skill=skill, required_level=level, is_mandatory=mandatory, weight=weight
    )
