from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import ValidationError
from django.shortcuts import get_object_or_404

from HR.person.models import Employee, Skill
from HR.work_structures.models import Position
from HR.person.services.skill_service import SkillService
from HR.person.services.employee_skill_service import EmployeeSkillService
from HR.person.services.position_skill_service import PositionSkillService
from HR.person.serializers import (
    SkillSerializer,
    SkillCreateSerializer,
    SkillUpdateSerializer,
    EmployeeSkillSerializer,
    EmployeeSkillWriteSerializer,
    PositionSkillSerializer,
    PositionSkillWriteSerializer,
)
from core.base.exceptions import NotFound
from core.user_accounts.decorators import require_role
from core.user_accounts.models import UserRole
from career_project.pagination import auto_paginate
from career_project.response_formatter import domain_error_response, success_response


# ============================================================================
# Skill Views
# ============================================================================

@api_view(['GET', 'POST'])
@require_role(UserRole.HR, UserRole.ADMIN, methods=['POST'])
@auto_paginate
def skill_list(request):
    """
    List skills or create a new one.

    GET /hr/person/skills/
    - Filters: category, status, name
    - Search: ?search=query

    POST /hr/person/skills/  (HR/Admin)
    """
    if request.method == 'GET':
        skills = SkillService.list_skills(request.query_params)
        return Response(SkillSerializer(skills, many=True).data, status=status.HTTP_200_OK)

    serializer = SkillCreateSerializer(data=request.data)
    if serializer.is_valid():
        try:
            skill = SkillService.create(request.user, serializer.to_dto())
            return Response(SkillSerializer(skill).data, status=status.HTTP_201_CREATED)
        except NotFound as e:
            return domain_error_response(e)
        except ValidationError as e:
            error_detail = e.message_dict if hasattr(e, 'message_dict') else str(e)
            return Response(error_detail, status=status.HTTP_400_BAD_REQUEST)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@require_role(UserRole.HR, UserRole.ADMIN, methods=['PUT', 'PATCH', 'DELETE'])
def skill_detail(request, pk):
    """
    Retrieve, update or delete a skill.

    DELETE removes an unreferenced skill, otherwise deactivates it.
    """
    skill = get_object_or_404(Skill, pk=pk)

    if request.method == 'GET':
        return Response(SkillSerializer(skill).data, status=status.HTTP_200_OK)

    try:
        if request.method == 'DELETE':
            removed = SkillService.delete(request.user, skill.id)
            if removed:
                return Response(status=status.HTTP_204_NO_CONTENT)
            return success_response(message='Skill is in use and was deactivated instead of deleted')

        data = request.data.copy()
        data['skill_id'] = skill.id
        serializer = SkillUpdateSerializer(data=data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        skill = SkillService.update(request.user, serializer.to_dto())
        return Response(SkillSerializer(skill).data, status=status.HTTP_200_OK)
    except NotFound as e:
        return domain_error_response(e)
    except ValidationError as e:
        error_detail = e.message_dict if hasattr(e, 'message_dict') else str(e)
        return Response(error_detail, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@require_role(UserRole.HR, UserRole.ADMIN)
def skill_reactivate(request, pk):
    """POST /hr/person/skills/<pk>/reactivate/"""
    try:
        skill = SkillService.reactivate(request.user, pk)
    except NotFound as e:
        return domain_error_response(e)
    except ValidationError as e:
        error_detail = e.message_dict if hasattr(e, 'message_dict') else str(e)
        return Response(error_detail, status=status.HTTP_400_BAD_REQUEST)
    return Response(SkillSerializer(skill).data, status=status.HTTP_200_OK)


# ============================================================================
# Employee Skill (proficiency) Views
# ============================================================================

@api_view(['GET', 'POST'])
@require_role(UserRole.MANAGER, UserRole.HR, UserRole.ADMIN, methods=['POST'])
@auto_paginate
def employee_skill_list(request, employee_id):
    """
    List an employee's skills or add/update one.

    GET /hr/person/employees/<employee_id>/skills/
    POST /hr/person/employees/<employee_id>/skills/
    - Body: { "skill_id", "proficiency_level", "acquired_date"?, "last_assessed_date"?, "notes"? }
    - Re-posting an existing skill updates the record in place
    """
    employee = get_object_or_404(Employee, pk=employee_id)

    if request.method == 'GET':
        records = EmployeeSkillService.get_employee_skills(employee.id)
        return Response(EmployeeSkillSerializer(records, many=True).data, status=status.HTTP_200_OK)

    data = request.data.copy()
    data['employee_id'] = employee.id
    serializer = EmployeeSkillWriteSerializer(data=data)
    if serializer.is_valid():
        try:
            record = EmployeeSkillService.upsert(request.user, serializer.to_dto())
            return Response(EmployeeSkillSerializer(record).data, status=status.HTTP_200_OK)
        except NotFound as e:
            return domain_error_response(e)
        except ValidationError as e:
            error_detail = e.message_dict if hasattr(e, 'message_dict') else str(e)
            return Response(error_detail, status=status.HTTP_400_BAD_REQUEST)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['DELETE'])
@require_role(UserRole.MANAGER, UserRole.HR, UserRole.ADMIN)
def employee_skill_detail(request, employee_id, skill_id):
    """DELETE /hr/person/employees/<employee_id>/skills/<skill_id>/"""
    try:
        EmployeeSkillService.remove(request.user, employee_id, skill_id)
    except NotFound as e:
        return domain_error_response(e)
    return Response(status=status.HTTP_204_NO_CONTENT)


# ============================================================================
# Position Skill (requirement) Views
# ============================================================================

@api_view(['GET', 'POST'])
@require_role(UserRole.HR, UserRole.ADMIN, methods=['POST'])
@auto_paginate
def position_skill_list(request, position_id):
    """
    List a position's required skills or add/update one.

    GET /hr/person/positions/<position_id>/skills/
    POST /hr/person/positions/<position_id>/skills/  (HR/Admin)
    - Body: { "skill_id", "required_level", "is_mandatory"?, "weight"? }
    """
    position = get_object_or_404(Position, pk=position_id)

    if request.method == 'GET':
        requirements = PositionSkillService.get_position_requirements(position.id)
        return Response(PositionSkillSerializer(requirements, many=True).data, status=status.HTTP_200_OK)

    data = request.data.copy()
    data['position_id'] = position.id
    serializer = PositionSkillWriteSerializer(data=data)
    if serializer.is_valid():
        try:
            requirement = PositionSkillService.upsert(request.user, serializer.to_dto())
            return Response(PositionSkillSerializer(requirement).data, status=status.HTTP_200_OK)
        except NotFound as e:
            return domain_error_response(e)
        except ValidationError as e:
            error_detail = e.message_dict if hasattr(e, 'message_dict') else str(e)
            return Response(error_detail, status=status.HTTP_400_BAD_REQUEST)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['DELETE'])
@require_role(UserRole.HR, UserRole.ADMIN)
def position_skill_detail(request, position_id, skill_id):
    """DELETE /hr/person/positions/<position_id>/skills/<skill_id>/"""
    try:
        PositionSkillService.remove(request.user, position_id, skill_id)
    except NotFound as e:
        return domain_error_response(e)
    return Response(status=status.HTTP_204_NO_CONTENT)
