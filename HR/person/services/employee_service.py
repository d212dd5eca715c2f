from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction

from core.base.exceptions import get_active_or_invalid, get_or_not_found
from HR.person.dtos import EmployeeCreateDTO, EmployeeUpdateDTO
from HR.person.models import Employee
from HR.work_structures.models import Department, Position


class EmployeeService:
    """Service for Employee business logic"""

    @staticmethod
    def _resolve_placement(dto, field_updates):
        """Validate manager/department/position ids from a DTO into field_updates."""
        if dto.manager_id is not None:
            field_updates['manager'] = get_active_or_invalid(Employee, 'Employee', dto.manager_id, 'manager_id')

        if dto.department_id is not None:
            field_updates['department'] = get_active_or_invalid(
                Department, 'Department', dto.department_id, 'department_id'
            )

        if dto.current_position_id is not None:
            position = get_active_or_invalid(Position, 'Position', dto.current_position_id, 'current_position_id')
            field_updates['current_position'] = position
            field_updates.setdefault('department', position.department)

        if dto.salary is not None and dto.salary < 0:
            raise ValidationError({'salary': 'Salary cannot be negative'})

    @staticmethod
    @transaction.atomic
    def create(user, dto: EmployeeCreateDTO) -> Employee:
        if Employee.objects.filter(employee_number=dto.employee_number).exists():
            raise ValidationError({'employee_number': f'Employee number "{dto.employee_number}" already exists'})

        fields = {}
        EmployeeService._resolve_placement(dto, fields)

        if dto.user_id is not None:
            fields['user'] = get_or_not_found(get_user_model(), 'User', dto.user_id)
            if Employee.objects.filter(user_id=dto.user_id).exists():
                raise ValidationError({'user_id': 'User is already linked to an employee'})

        employee = Employee(
            employee_number=dto.employee_number,
            first_name=dto.first_name,
            last_name=dto.last_name,
            email=dto.email or '',
            hire_date=dto.hire_date,
            salary=dto.salary,
            created_by=user,
            updated_by=user,
            **fields
        )
        employee.full_clean()
        employee.save()
        return employee

    @staticmethod
    @transaction.atomic
    def update(user, dto: EmployeeUpdateDTO) -> Employee:
        employee = get_active_or_invalid(Employee, 'Employee', dto.employee_id, 'employee_id')

        field_updates = {'updated_by': user}
        for field in ('first_name', 'last_name', 'email', 'salary'):
            value = getattr(dto, field)
            if value is not None:
                field_updates[field] = value
        EmployeeService._resolve_placement(dto, field_updates)

        if dto.manager_id is not None and dto.manager_id == employee.pk:
            raise ValidationError({'manager_id': 'An employee cannot be their own manager'})

        return employee.update_fields(field_updates)

    @staticmethod
    @transaction.atomic
    def deactivate(user, employee_id: int) -> Employee:
        """Deactivate an employee; their skill records stay for history."""
        employee = get_or_not_found(Employee, 'Employee', employee_id)
        if not employee.is_active:
            raise ValidationError({'employee_id': 'Employee is already inactive'})
        employee.deactivate(user)
        return employee

    @staticmethod
    def list_employees(filters: dict):
        """
        Filters: department_id, manager_id, position_id, status, search
        """
        queryset = (
            Employee.objects
            .with_status(filters.get('status'))
            .select_related('department', 'current_position', 'manager')
        )
        if filters.get('department_id'):
            queryset = queryset.filter(department_id=filters['department_id'])
        if filters.get('manager_id'):
            queryset = queryset.direct_reports_of(filters['manager_id'])
        if filters.get('position_id'):
            queryset = queryset.filter(current_position_id=filters['position_id'])
        return queryset.filter_by_search_params({'search': filters.get('search')})
