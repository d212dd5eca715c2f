from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404

from HR.work_structures.models import Department, Position
from HR.work_structures.services.department_service import DepartmentService
from HR.work_structures.services.position_service import PositionService
from HR.work_structures.serializers import (
    DepartmentSerializer,
    DepartmentCreateSerializer,
    DepartmentUpdateSerializer,
    PositionReadSerializer,
    PositionCreateSerializer,
    PositionUpdateSerializer,
)
from core.base.exceptions import NotFound
from core.user_accounts.decorators import require_role
from core.user_accounts.models import UserRole
from career_project.pagination import auto_paginate
from career_project.response_formatter import domain_error_response

WRITE_METHODS = ['POST', 'PUT', 'PATCH', 'DELETE']


# ============================================================================
# Department Views
# ============================================================================

@api_view(['GET', 'POST'])
@require_role(UserRole.HR, UserRole.ADMIN, methods=WRITE_METHODS)
@auto_paginate
def department_list(request):
    """
    List departments or create a new one.

    GET /hr/work_structures/departments/
    - Filters: status, code, name, search

    POST /hr/work_structures/departments/  (HR/Admin)
    """
    if request.method == 'GET':
        departments = DepartmentService.list_departments(request.query_params)
        serializer = DepartmentSerializer(departments, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    serializer = DepartmentCreateSerializer(data=request.data)
    if serializer.is_valid():
        try:
            department = DepartmentService.create(request.user, serializer.to_dto())
            return Response(DepartmentSerializer(department).data, status=status.HTTP_201_CREATED)
        except NotFound as e:
            return domain_error_response(e)
        except ValidationError as e:
            error_detail = e.message_dict if hasattr(e, 'message_dict') else str(e)
            return Response(error_detail, status=status.HTTP_400_BAD_REQUEST)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@require_role(UserRole.HR, UserRole.ADMIN, methods=WRITE_METHODS)
def department_detail(request, pk):
    """Retrieve, update or deactivate a department."""
    department = get_object_or_404(Department, pk=pk)

    if request.method == 'GET':
        return Response(DepartmentSerializer(department).data, status=status.HTTP_200_OK)

    try:
        if request.method == 'DELETE':
            DepartmentService.deactivate(request.user, department.id)
            return Response(status=status.HTTP_204_NO_CONTENT)

        data = request.data.copy()
        data['department_id'] = department.id
        serializer = DepartmentUpdateSerializer(data=data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        department = DepartmentService.update(request.user, serializer.to_dto())
        return Response(DepartmentSerializer(department).data, status=status.HTTP_200_OK)
    except NotFound as e:
        return domain_error_response(e)
    except ValidationError as e:
        error_detail = e.message_dict if hasattr(e, 'message_dict') else str(e)
        return Response(error_detail, status=status.HTTP_400_BAD_REQUEST)


# ============================================================================
# Position Views
# ============================================================================

@api_view(['GET', 'POST'])
@require_role(UserRole.HR, UserRole.ADMIN, methods=WRITE_METHODS)
@auto_paginate
def position_list(request):
    """
    List positions or create a new one.

    GET /hr/work_structures/positions/
    - Filters: department (ID), level, is_key_position (true/false), status
    - Search: ?search=query (searches code, title)

    POST /hr/work_structures/positions/  (HR/Admin)
    """
    if request.method == 'GET':
        is_key = request.query_params.get('is_key_position')
        filters = {
            'department_id': request.query_params.get('department'),
            'level': request.query_params.get('level'),
            'is_key_position': None if is_key is None else is_key.lower() == 'true',
            'status': request.query_params.get('status'),
            'search': request.query_params.get('search'),
        }
        positions = PositionService.list_positions(filters)
        serializer = PositionReadSerializer(positions, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    serializer = PositionCreateSerializer(data=request.data)
    if serializer.is_valid():
        try:
            position = PositionService.create(request.user, serializer.to_dto())
            return Response(PositionReadSerializer(position).data, status=status.HTTP_201_CREATED)
        except NotFound as e:
            return domain_error_response(e)
        except ValidationError as e:
            error_detail = e.message_dict if hasattr(e, 'message_dict') else str(e)
            return Response(error_detail, status=status.HTTP_400_BAD_REQUEST)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@require_role(UserRole.HR, UserRole.ADMIN, methods=WRITE_METHODS)
def position_detail(request, pk):
    """Retrieve, update or deactivate a position."""
    position = get_object_or_404(Position.objects.select_related('department'), pk=pk)

    if request.method == 'GET':
        return Response(PositionReadSerializer(position).data, status=status.HTTP_200_OK)

    try:
        if request.method == 'DELETE':
            PositionService.deactivate(request.user, position.id)
            return Response(status=status.HTTP_204_NO_CONTENT)

        data = request.data.copy()
        data['position_id'] = position.id
        serializer = PositionUpdateSerializer(data=data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        position = PositionService.update(request.user, serializer.to_dto())
        return Response(PositionReadSerializer(position).data, status=status.HTTP_200_OK)
    except NotFound as e:
        return domain_error_response(e)
    except ValidationError as e:
        error_detail = e.message_dict if hasattr(e, 'message_dict') else str(e)
        return Response(error_detail, status=status.HTTP_400_BAD_REQUEST)
