from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import ValidationError

from core.base.exceptions import DOMAIN_ERRORS
from core.base.models import StatusChoices
from core.user_accounts.decorators import require_role
from core.user_accounts.models import UserRole
from career_project.pagination import auto_paginate
from career_project.response_formatter import domain_error_response
from HR.career import gap_analysis, ranking, scoring
from HR.career.services.career_path_service import CareerPathService
from HR.career.services.succession_service import SuccessionService
from HR.career.serializers import (
    CareerPathCreateSerializer,
    CareerPathSerializer,
    CareerPathSkillSerializer,
    CareerPathSkillWriteSerializer,
    CareerPathUpdateSerializer,
    CareerRoadmapSerializer,
    DiscoverCandidatesSerializer,
    MatchResultSerializer,
    PathReadinessSerializer,
    RankedCandidateSerializer,
    RankedPositionSerializer,
    SuccessionCandidateCreateSerializer,
    SuccessionCandidateSerializer,
    SuccessionCandidateUpdateSerializer,
    SuccessionPlanCreateSerializer,
    SuccessionPlanSerializer,
    SuccessionPlanUpdateSerializer,
)

PLANNERS = (UserRole.MANAGER, UserRole.HR, UserRole.ADMIN)


def _optional_int(request, name):
    value = request.query_params.get(name)
    if value in (None, ''):
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError({name: 'Must be an integer'})


def _optional_decimal_param(request, name):
    value = request.query_params.get(name)
    if value in (None, ''):
        return None
    serializer = DiscoverCandidatesSerializer(data={name: value})
    if not serializer.is_valid():
        raise ValidationError(serializer.errors)
    return serializer.validated_data[name]


# ============================================================================
# Scoring & Ranking Views
# ============================================================================

@api_view(['GET'])
def score_candidate(request, position_id, employee_id):
    """
    Score one employee against one position.

    GET /hr/career/positions/<position_id>/score/<employee_id>/
    - Returns: { score, is_fully_qualified, gaps: [...] }
    """
    try:
        result = scoring.score_employee_for_position(employee_id, position_id)
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(MatchResultSerializer(result).data, status=status.HTTP_200_OK)


@api_view(['GET'])
@require_role(*PLANNERS)
@auto_paginate
def rank_candidates(request, position_id):
    """
    Rank employees by fit for a position (best first).

    GET /hr/career/positions/<position_id>/candidates/
    - Query params:
        - min_score: drop candidates below this score
        - limit: keep the top N
        - candidates: comma separated employee ids restricting the pool
    """
    try:
        pool = request.query_params.get('candidates')
        candidate_ids = None
        if pool:
            try:
                candidate_ids = [int(pk) for pk in pool.split(',') if pk.strip()]
            except ValueError:
                raise ValidationError({'candidates': 'Must be a comma separated list of ids'})
        ranked = ranking.rank_candidates_for_position(
            position_id,
            candidate_ids=candidate_ids,
            limit=_optional_int(request, 'limit'),
            min_score=_optional_decimal_param(request, 'min_score'),
        )
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(RankedCandidateSerializer(ranked, many=True).data, status=status.HTTP_200_OK)


@api_view(['GET'])
@auto_paginate
def rank_positions(request, employee_id):
    """
    Rank active positions by an employee's fit (best first).

    GET /hr/career/employees/<employee_id>/positions/
    - Query params: min_score, limit, department (ID)

    Employees may query themselves; managers, HR and admins anyone.
    """
    if request.user.role == UserRole.EMPLOYEE and request.user.employee_id != employee_id:
        return Response(
            {'error': 'Permission denied', 'detail': 'Employees may only rank positions for themselves'},
            status=status.HTTP_403_FORBIDDEN
        )
    try:
        ranked = ranking.rank_positions_for_employee(
            employee_id,
            limit=_optional_int(request, 'limit'),
            min_score=_optional_decimal_param(request, 'min_score'),
            department_id=_optional_int(request, 'department'),
        )
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(RankedPositionSerializer(ranked, many=True).data, status=status.HTTP_200_OK)


@api_view(['GET'])
@require_role(*PLANNERS)
def skill_gap_analysis(request, skill_id):
    """
    Department aggregate analysis for one skill.

    GET /hr/career/skills/<skill_id>/gap-analysis/
    - Query params: department (ID) restricts employees and positions
    """
    try:
        analysis = gap_analysis.get_skill_gap_analysis(skill_id, department_id=_optional_int(request, 'department'))
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(analysis, status=status.HTTP_200_OK)


@api_view(['GET'])
def employee_skill_gaps(request, employee_id):
    """
    Gap report of an employee against a target position.

    GET /hr/career/employees/<employee_id>/skill-gaps/?position=<id>
    - Defaults to the employee's current position
    """
    try:
        result = gap_analysis.get_employee_skill_gaps(employee_id, position_id=_optional_int(request, 'position'))
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(MatchResultSerializer(result).data, status=status.HTTP_200_OK)


# ============================================================================
# Succession Planning Views
# ============================================================================

@api_view(['GET', 'POST'])
@require_role(UserRole.HR, UserRole.ADMIN, methods=['POST'])
@auto_paginate
def succession_plan_list(request):
    """
    List succession plans or open a new one.

    GET /hr/career/succession-plans/
    - Filters: status, position (ID), department (ID)

    POST /hr/career/succession-plans/  (HR/Admin)
    - Body: { "position_id", "notes"?, "review_date"?, "auto_discover"? }
    """
    if request.method == 'GET':
        filters = {
            'status': request.query_params.get('status'),
            'position_id': request.query_params.get('position'),
            'department_id': request.query_params.get('department'),
        }
        plans = SuccessionService.list_plans(filters).prefetch_related('candidates__employee')
        return Response(SuccessionPlanSerializer(plans, many=True).data, status=status.HTTP_200_OK)

    serializer = SuccessionPlanCreateSerializer(data=request.data)
    if serializer.is_valid():
        try:
            plan = SuccessionService.create_plan(request.user, serializer.to_dto())
        except DOMAIN_ERRORS as e:
            return domain_error_response(e)
        return Response(SuccessionPlanSerializer(plan).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH'])
@require_role(UserRole.HR, UserRole.ADMIN, methods=['PATCH'])
def succession_plan_detail(request, pk):
    """Retrieve or update (status, notes, review date) a succession plan."""
    try:
        if request.method == 'GET':
            plan = SuccessionService.get_plan(pk)
            return Response(SuccessionPlanSerializer(plan).data, status=status.HTTP_200_OK)

        data = request.data.copy()
        data['plan_id'] = pk
        serializer = SuccessionPlanUpdateSerializer(data=data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        plan = SuccessionService.update_plan(request.user, serializer.to_dto())
        return Response(SuccessionPlanSerializer(plan).data, status=status.HTTP_200_OK)
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)


@api_view(['POST'])
@require_role(UserRole.HR, UserRole.ADMIN)
def succession_plan_discover(request, pk):
    """
    Auto-discover candidates for a plan.

    POST /hr/career/succession-plans/<pk>/discover/
    - Body: { "min_score"?, "limit"? }
    """
    serializer = DiscoverCandidatesSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        created = SuccessionService.discover_candidates(
            request.user, pk,
            min_score=serializer.validated_data.get('min_score'),
            limit=serializer.validated_data.get('limit'),
        )
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(SuccessionCandidateSerializer(created, many=True).data, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@require_role(UserRole.HR, UserRole.ADMIN)
def succession_plan_recompute(request, pk):
    """POST /hr/career/succession-plans/<pk>/recompute-scores/"""
    try:
        candidates = SuccessionService.recompute_scores(request.user, pk)
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(SuccessionCandidateSerializer(candidates, many=True).data, status=status.HTTP_200_OK)


@api_view(['POST'])
@require_role(UserRole.HR, UserRole.ADMIN)
def succession_candidate_list(request, pk):
    """
    Add a candidate manually.

    POST /hr/career/succession-plans/<pk>/candidates/
    - Body: { "employee_id", "priority"?, "status"?, "notes"? }
    """
    data = request.data.copy()
    data['plan_id'] = pk
    serializer = SuccessionCandidateCreateSerializer(data=data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        candidate = SuccessionService.add_candidate(request.user, serializer.to_dto())
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(SuccessionCandidateSerializer(candidate).data, status=status.HTTP_201_CREATED)


@api_view(['PATCH', 'DELETE'])
@require_role(UserRole.HR, UserRole.ADMIN)
def succession_candidate_detail(request, candidate_id):
    """Update (priority, status, notes) or remove a succession candidate."""
    try:
        if request.method == 'DELETE':
            SuccessionService.remove_candidate(request.user, candidate_id)
            return Response(status=status.HTTP_204_NO_CONTENT)

        data = request.data.copy()
        data['candidate_id'] = candidate_id
        serializer = SuccessionCandidateUpdateSerializer(data=data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        candidate = SuccessionService.update_candidate(request.user, serializer.to_dto())
        return Response(SuccessionCandidateSerializer(candidate).data, status=status.HTTP_200_OK)
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)


@api_view(['GET'])
@require_role(*PLANNERS)
def succession_risk(request, position_id):
    """GET /hr/career/positions/<position_id>/succession-risk/"""
    try:
        risk = SuccessionService.calculate_risk(position_id)
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(risk, status=status.HTTP_200_OK)


# ============================================================================
# Career Path Views
# ============================================================================

def _may_view_employee(request, employee_id):
    return request.user.role != UserRole.EMPLOYEE or request.user.employee_id == employee_id


def _own_records_only():
    return Response(
        {'error': 'Permission denied', 'detail': 'Employees may only view their own career paths'},
        status=status.HTTP_403_FORBIDDEN
    )


@api_view(['GET', 'POST'])
@require_role(UserRole.HR, UserRole.ADMIN, methods=['POST'])
@auto_paginate
def career_path_list(request):
    """
    List career paths or create a new one.

    GET /hr/career/career-paths/
    - Filters: from_position (ID), to_position (ID), status
    - Inactive paths are hidden unless a status is given

    POST /hr/career/career-paths/  (HR/Admin)
    - Body: { "from_position_id", "to_position_id", "min_years_in_current_role"?, "description"?,
              "required_skills"?: [{ "skill_id", "min_proficiency_level", "is_mandatory"?, "weight"? }] }
    """
    if request.method == 'GET':
        filters = {
            'status': request.query_params.get('status') or StatusChoices.ACTIVE,
            'from_position_id': request.query_params.get('from_position'),
            'to_position_id': request.query_params.get('to_position'),
        }
        paths = CareerPathService.list_paths(filters).prefetch_related('required_skills__skill')
        return Response(CareerPathSerializer(paths, many=True).data, status=status.HTTP_200_OK)

    serializer = CareerPathCreateSerializer(data=request.data)
    if serializer.is_valid():
        try:
            career_path = CareerPathService.create(request.user, serializer.to_dto())
        except DOMAIN_ERRORS as e:
            return domain_error_response(e)
        return Response(CareerPathSerializer(career_path).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH', 'DELETE'])
@require_role(UserRole.HR, UserRole.ADMIN, methods=['PATCH', 'DELETE'])
def career_path_detail(request, pk):
    """Retrieve, update (min years, description) or deactivate a career path."""
    try:
        if request.method == 'GET':
            career_path = CareerPathService.get_path(pk)
            return Response(CareerPathSerializer(career_path).data, status=status.HTTP_200_OK)

        if request.method == 'DELETE':
            CareerPathService.deactivate(request.user, pk)
            return Response(status=status.HTTP_204_NO_CONTENT)

        data = request.data.copy()
        data['career_path_id'] = pk
        serializer = CareerPathUpdateSerializer(data=data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        career_path = CareerPathService.update(request.user, serializer.to_dto())
        return Response(CareerPathSerializer(career_path).data, status=status.HTTP_200_OK)
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)


@api_view(['POST'])
@require_role(UserRole.HR, UserRole.ADMIN)
def career_path_reactivate(request, pk):
    """POST /hr/career/career-paths/<pk>/reactivate/"""
    try:
        career_path = CareerPathService.reactivate(request.user, pk)
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(CareerPathSerializer(career_path).data, status=status.HTTP_200_OK)


@api_view(['GET', 'POST'])
@require_role(UserRole.HR, UserRole.ADMIN, methods=['POST'])
@auto_paginate
def career_path_skill_list(request, pk):
    """
    List a path's skill bar or add/update one skill.

    GET /hr/career/career-paths/<pk>/skills/
    POST /hr/career/career-paths/<pk>/skills/  (HR/Admin)
    - Body: { "skill_id", "min_proficiency_level", "is_mandatory"?, "weight"? }
    """
    try:
        career_path = CareerPathService.get_path(pk)
        if request.method == 'GET':
            skills = CareerPathService.get_required_skills(career_path.pk)
            return Response(CareerPathSkillSerializer(skills, many=True).data, status=status.HTTP_200_OK)

        data = request.data.copy()
        data['career_path_id'] = career_path.pk
        serializer = CareerPathSkillWriteSerializer(data=data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        requirement = CareerPathService.upsert_skill(request.user, serializer.to_dto())
        return Response(CareerPathSkillSerializer(requirement).data, status=status.HTTP_200_OK)
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)


@api_view(['DELETE'])
@require_role(UserRole.HR, UserRole.ADMIN)
def career_path_skill_detail(request, pk, skill_id):
    """DELETE /hr/career/career-paths/<pk>/skills/<skill_id>/"""
    try:
        CareerPathService.remove_skill(request.user, pk, skill_id)
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
def career_path_readiness(request, pk, employee_id):
    """
    Readiness of an employee for a career path.

    GET /hr/career/career-paths/<pk>/readiness/<employee_id>/
    - Returns: { score, is_ready, years_in_current_role, gaps: [...], recommendations: [...] }
    """
    if not _may_view_employee(request, employee_id):
        return _own_records_only()
    try:
        readiness = CareerPathService.analyze_readiness(employee_id, pk)
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(PathReadinessSerializer(readiness).data, status=status.HTTP_200_OK)


@api_view(['GET'])
@auto_paginate
def career_path_recommendations(request, employee_id):
    """
    Career paths out of an employee's current position, most ready first.

    GET /hr/career/employees/<employee_id>/career-paths/
    """
    if not _may_view_employee(request, employee_id):
        return _own_records_only()
    try:
        readiness = CareerPathService.recommended_paths(employee_id)
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(PathReadinessSerializer(readiness, many=True).data, status=status.HTTP_200_OK)


@api_view(['GET'])
def career_roadmap(request, employee_id, position_id):
    """
    Chain of career paths from an employee's current position to a target.

    GET /hr/career/employees/<employee_id>/roadmap/<position_id>/
    """
    if not _may_view_employee(request, employee_id):
        return _own_records_only()
    try:
        roadmap = CareerPathService.roadmap(employee_id, position_id)
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(CareerRoadmapSerializer(roadmap).data, status=status.HTTP_200_OK)
