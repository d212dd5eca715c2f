from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status

from core.base.exceptions import DOMAIN_ERRORS
from career_project.pagination import auto_paginate
from career_project.response_formatter import domain_error_response
from HR.employee_requests.managers import RequestWorkflowManager
from HR.employee_requests.serializers import (
    EmployeeRequestSerializer,
    RequestActionSerializer,
    RequestApproveSerializer,
    RequestCancelSerializer,
    RequestRejectSerializer,
    RequestSubmitSerializer,
)


# ============================================================================
# Submission & Queries
# ============================================================================

@api_view(['GET', 'POST'])
@auto_paginate
def request_list(request):
    """
    List my requests or submit a new one.

    GET /hr/requests/
    - Returns the caller's own submissions, newest first

    POST /hr/requests/
    - Body: {
        "request_type": "position_change" | "department_change",
        "justification": "...",
        "target_employee_id"?, "new_position_id"?, "new_department_id"?,
        "new_manager_id"?, "proposed_salary"?, "notes"?
      }
    - Returns 201 with the request; status is "auto_approved" when the
      submitter's role allows it
    """
    if request.method == 'GET':
        requests = RequestWorkflowManager.get_requests_by_requester(request.user)
        return Response(EmployeeRequestSerializer(requests, many=True).data, status=status.HTTP_200_OK)

    serializer = RequestSubmitSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        employee_request = RequestWorkflowManager.submit(request.user, serializer.to_dto())
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(EmployeeRequestSerializer(employee_request).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@auto_paginate
def pending_requests(request):
    """
    Requests awaiting the caller's decision.

    GET /hr/requests/pending/
    - HR/Admin: all open requests
    - Managers: pending requests of their direct reports
    """
    requests = RequestWorkflowManager.get_pending_requests_for_actor(request.user)
    return Response(EmployeeRequestSerializer(requests, many=True).data, status=status.HTTP_200_OK)


@api_view(['GET'])
def request_detail(request, pk):
    """GET /hr/requests/<pk>/"""
    try:
        employee_request = RequestWorkflowManager.get_request(pk, request.user)
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(EmployeeRequestSerializer(employee_request).data, status=status.HTTP_200_OK)


@api_view(['GET'])
@auto_paginate
def request_history(request, pk):
    """
    Audit trail of a request, oldest first.

    GET /hr/requests/<pk>/history/
    """
    try:
        actions = RequestWorkflowManager.get_history(pk, request.user)
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(RequestActionSerializer(actions, many=True).data, status=status.HTTP_200_OK)


# ============================================================================
# Transitions
# ============================================================================

@api_view(['POST'])
def approve_request(request, pk):
    """
    Approve the stage the request is waiting on.

    POST /hr/requests/<pk>/approve/
    - Body: { "stage"?: "manager" | "hr", "expected_version"?, "comment"? }
    - 403 when the caller may not act, 409 when the request is closed, the
      stage does not match, or the version is stale
    """
    serializer = RequestApproveSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data
    try:
        employee_request = RequestWorkflowManager.approve(
            pk, request.user,
            stage=data.get('stage'),
            expected_version=data.get('expected_version'),
            comment=data.get('comment', ''),
        )
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(EmployeeRequestSerializer(employee_request).data, status=status.HTTP_200_OK)


@api_view(['POST'])
def reject_request(request, pk):
    """
    Reject a request at its awaited stage.

    POST /hr/requests/<pk>/reject/
    - Body: { "reason": "...", "expected_version"? }
    """
    serializer = RequestRejectSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        employee_request = RequestWorkflowManager.reject(
            pk, request.user,
            reason=serializer.validated_data.get('reason'),
            expected_version=serializer.validated_data.get('expected_version'),
        )
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(EmployeeRequestSerializer(employee_request).data, status=status.HTTP_200_OK)


@api_view(['POST'])
def cancel_request(request, pk):
    """POST /hr/requests/<pk>/cancel/  (requester only)"""
    serializer = RequestCancelSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        employee_request = RequestWorkflowManager.cancel(
            pk, request.user,
            expected_version=serializer.validated_data.get('expected_version'),
        )
    except DOMAIN_ERRORS as e:
        return domain_error_response(e)
    return Response(EmployeeRequestSerializer(employee_request).data, status=status.HTTP_200_OK)
