from django.db import transaction
from django.core.exceptions import ValidationError
from core.base.exceptions import get_active_or_invalid, get_or_not_found
from HR.work_structures.dtos import DepartmentCreateDTO, DepartmentUpdateDTO
from HR.work_structures.models import Department


class DepartmentService:
    """Service for Department business logic"""

    @staticmethod
    @transaction.atomic
    def create(user, dto: DepartmentCreateDTO) -> Department:
        if Department.objects.filter(code=dto.code).exists():
            raise ValidationError({'code': f'Department with code "{dto.code}" already exists'})

        department = Department(
            code=dto.code,
            name=dto.name,
            description=dto.description or '',
            created_by=user,
            updated_by=user
        )
        department.full_clean()
        department.save()
        return department

    @staticmethod
    @transaction.atomic
    def update(user, dto: DepartmentUpdateDTO) -> Department:
        department = get_active_or_invalid(Department, 'Department', dto.department_id, 'department_id')

        field_updates = {'updated_by': user}
        if dto.name is not None:
            field_updates['name'] = dto.name
        if dto.description is not None:
            field_updates['description'] = dto.description
        return department.update_fields(field_updates)

    @staticmethod
    @transaction.atomic
    def deactivate(user, department_id: int) -> Department:
        """
        Deactivate a department.

        Refused while active positions still belong to it.
        """
        department = get_or_not_found(Department, 'Department', department_id)
        if not department.is_active:
            raise ValidationError({'department_id': 'Department is already inactive'})

        if department.positions.active().exists():
            raise ValidationError('Cannot deactivate a department that still has active positions')

        department.deactivate(user)
        return department

    @staticmethod
    def list_departments(filters: dict):
        queryset = Department.objects.with_status(filters.get('status'))
        return queryset.filter_by_search_params(filters)
