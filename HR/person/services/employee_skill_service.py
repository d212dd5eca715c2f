from datetime import date
from typing import List

from django.core.exceptions import ValidationError
from django.db import transaction

from core.base.exceptions import NotFound, get_or_not_found
from HR.person.dtos import EmployeeSkillDTO
from HR.person.models import Employee, EmployeeSkill, Skill


class EmployeeSkillService:
    """Service for proficiency records (employee -> skill -> level)"""

    @staticmethod
    @transaction.atomic
    def upsert(user, dto: EmployeeSkillDTO) -> EmployeeSkill:
        """
        Add a skill to an employee, or update the existing record in place.

        Validates:
        - Employee exists
        - Skill exists and is active (for new records)
        - Level is within 1-5 (model clean)
        """
        employee = get_or_not_found(Employee, 'Employee', dto.employee_id)
        skill = get_or_not_found(Skill, 'Skill', dto.skill_id)

        record = (
            EmployeeSkill.objects
            .select_for_update()
            .filter(employee=employee, skill=skill)
            .first()
        )
        if record is None:
            if not skill.is_active:
                raise ValidationError({'skill_id': f'Skill "{skill.name}" is inactive'})
            record = EmployeeSkill(
                employee=employee,
                skill=skill,
                acquired_date=dto.acquired_date or date.today(),
                created_by=user,
            )
        elif dto.acquired_date is not None:
            record.acquired_date = dto.acquired_date

        record.proficiency_level = dto.proficiency_level
        record.last_assessed_date = dto.last_assessed_date or date.today()
        if dto.notes is not None:
            record.notes = dto.notes
        record.updated_by = user
        record.full_clean()
        record.save()
        return record

    @staticmethod
    @transaction.atomic
    def remove(user, employee_id: int, skill_id: int):
        deleted, _ = EmployeeSkill.objects.filter(employee_id=employee_id, skill_id=skill_id).delete()
        if not deleted:
            raise NotFound('Employee skill', f'{employee_id}/{skill_id}')

    @staticmethod
    def get_employee_skills(employee_id: int) -> List[EmployeeSkill]:
        return list(
            EmployeeSkill.objects
            .filter(employee_id=employee_id)
            .select_related('skill')
            .order_by('-proficiency_level', 'skill__name')
        )

    @staticmethod
    def get_skill_holders(skill_id: int, min_level: int = None):
        queryset = (
            EmployeeSkill.objects
            .filter(skill_id=skill_id, employee__status='active')
            .select_related('employee', 'employee__department')
        )
        if min_level is not None:
            queryset = queryset.filter(proficiency_level__gte=min_level)
        return queryset.order_by('-proficiency_level', 'employee_id')
