from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404

from HR.person.models import Employee
from HR.person.services.employee_service import EmployeeService
from HR.person.serializers import (
    EmployeeSerializer,
    EmployeeCreateSerializer,
    EmployeeUpdateSerializer,
)
from core.base.exceptions import NotFound
from core.user_accounts.decorators import require_role
from core.user_accounts.models import UserRole
from career_project.pagination import auto_paginate
from career_project.response_formatter import domain_error_response


@api_view(['GET', 'POST'])
@require_role(UserRole.HR, UserRole.ADMIN, methods=['POST'])
@auto_paginate
def employee_list(request):
    """
    List employees or create a new one.

    GET /hr/person/employees/
    - Filters: department (ID), manager (ID), position (ID), status
    - Search: ?search=query (searches employee number, first/last name)

    POST /hr/person/employees/  (HR/Admin)
    """
    if request.method == 'GET':
        filters = {
            'department_id': request.query_params.get('department'),
            'manager_id': request.query_params.get('manager'),
            'position_id': request.query_params.get('position'),
            'status': request.query_params.get('status'),
            'search': request.query_params.get('search'),
        }
        employees = EmployeeService.list_employees(filters)
        serializer = EmployeeSerializer(employees, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    serializer = EmployeeCreateSerializer(data=request.data)
    if serializer.is_valid():
        try:
            employee = EmployeeService.create(request.user, serializer.to_dto())
            return Response(EmployeeSerializer(employee).data, status=status.HTTP_201_CREATED)
        except NotFound as e:
            return domain_error_response(e)
        except ValidationError as e:
            error_detail = e.message_dict if hasattr(e, 'message_dict') else str(e)
            return Response(error_detail, status=status.HTTP_400_BAD_REQUEST)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@require_role(UserRole.HR, UserRole.ADMIN, methods=['PUT', 'PATCH', 'DELETE'])
def employee_detail(request, pk):
    """Retrieve, update or deactivate an employee."""
    employee = get_object_or_404(
        Employee.objects.select_related('department', 'current_position', 'manager'), pk=pk
    )

    if request.method == 'GET':
        return Response(EmployeeSerializer(employee).data, status=status.HTTP_200_OK)

    try:
        if request.method == 'DELETE':
            EmployeeService.deactivate(request.user, employee.id)
            return Response(status=status.HTTP_204_NO_CONTENT)

        data = request.data.copy()
        data['employee_id'] = employee.id
        serializer = EmployeeUpdateSerializer(data=data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        employee = EmployeeService.update(request.user, serializer.to_dto())
        return Response(EmployeeSerializer(employee).data, status=status.HTTP_200_OK)
    except NotFound as e:
        return domain_error_response(e)
    except ValidationError as e:
        error_detail = e.message_dict if hasattr(e, 'message_dict') else str(e)
        return Response(error_detail, status=status.HTTP_400_BAD_REQUEST)
