from django.db import transaction
from django.core.exceptions import ValidationError
from django.db.models import Q
from core.base.exceptions import get_active_or_invalid, get_or_not_found
from HR.work_structures.dtos import PositionCreateDTO, PositionUpdateDTO
from HR.work_structures.models import Department, Position


class PositionService:
    """Service for Position business logic"""

    @staticmethod
    def _get_active_department(department_id):
        return get_active_or_invalid(Department, 'Department', department_id, 'department_id')

    @staticmethod
    @transaction.atomic
    def create(user, dto: PositionCreateDTO) -> Position:
        """
        Create a position.

        Validates:
        - Code is unique
        - Department exists and is active
        - Salary band is coherent (model clean)
        """
        if Position.objects.filter(code=dto.code).exists():
            raise ValidationError({'code': f'Position with code "{dto.code}" already exists'})

        position = Position(
            code=dto.code,
            title=dto.title,
            description=dto.description or '',
            department=PositionService._get_active_department(dto.department_id),
            level=dto.level,
            min_salary=dto.min_salary,
            max_salary=dto.max_salary,
            is_key_position=dto.is_key_position,
            created_by=user,
            updated_by=user
        )
        position.full_clean()
        position.save()
        return position

    @staticmethod
    @transaction.atomic
    def update(user, dto: PositionUpdateDTO) -> Position:
        position = get_active_or_invalid(Position, 'Position', dto.position_id, 'position_id')

        field_updates = {'updated_by': user}
        for field in ('title', 'level', 'description', 'min_salary', 'max_salary', 'is_key_position'):
            value = getattr(dto, field)
            if value is not None:
                field_updates[field] = value
        if dto.department_id is not None:
            field_updates['department'] = PositionService._get_active_department(dto.department_id)

        return position.update_fields(field_updates)

    @staticmethod
    @transaction.atomic
    def deactivate(user, position_id: int) -> Position:
        position = get_or_not_found(Position, 'Position', position_id)
        if not position.is_active:
            raise ValidationError({'position_id': 'Position is already inactive'})

        position.deactivate(user)
        return position

    @staticmethod
    def list_positions(filters: dict):
        """
        Filters: department_id, level, is_key_position, status, search
        """
        queryset = Position.objects.with_status(filters.get('status')).select_related('department')
        if filters.get('department_id'):
            queryset = queryset.filter(department_id=filters['department_id'])
        if filters.get('level'):
            queryset = queryset.filter(level=filters['level'])
        if filters.get('is_key_position') is not None:
            queryset = queryset.filter(is_key_position=filters['is_key_position'])
        if filters.get('search'):
            search = filters['search']
            queryset = queryset.filter(Q(title__icontains=search) | Q(code__icontains=search))
        return queryset.order_by('title')
