"""
Serializers for employee requests
"""
from rest_framework import serializers
from HR.employee_requests.models import (
    ApprovalStage,
    EmployeeRequest,
    RequestAction,
    RequestType,
)
from HR.employee_requests.dtos import RequestSubmitDTO


class EmployeeRequestSerializer(serializers.ModelSerializer):
    """Read serializer for EmployeeRequest"""
    request_type_display = serializers.CharField(source='get_request_type_display', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    requester_name = serializers.CharField(source='requester.full_name', read_only=True)
    target_employee_name = serializers.CharField(source='target_employee.full_name', read_only=True)
    new_position_title = serializers.CharField(source='new_position.title', read_only=True, default=None)
    new_department_name = serializers.CharField(source='new_department.name', read_only=True, default=None)
    new_manager_name = serializers.CharField(source='new_manager.full_name', read_only=True, default=None)
    career_path_description = serializers.CharField(source='career_path.description', read_only=True, default=None)

    class Meta:
        model = EmployeeRequest
        fields = [
            'id', 'request_type', 'request_type_display',
            'requester', 'requester_name', 'target_employee', 'target_employee_name',
            'new_position', 'new_position_title',
            'new_department', 'new_department_name',
            'new_manager', 'new_manager_name',
            'career_path', 'career_path_description',
            'proposed_salary', 'justification', 'notes',
            'status', 'status_display', 'requires_manager_approval',
            'submitted_at', 'manager_approved_at', 'manager_approved_by',
            'hr_approved_at', 'hr_approved_by',
            'rejected_by', 'rejection_reason', 'processed_date', 'version',
        ]
        read_only_fields = fields


class RequestActionSerializer(serializers.ModelSerializer):
    actor_name = serializers.CharField(source='actor.name', read_only=True, default=None)

    class Meta:
        model = RequestAction
        fields = ['id', 'action', 'stage', 'from_status', 'to_status', 'actor', 'actor_name', 'comment', 'created_at']
        read_only_fields = fields


class RequestSubmitSerializer(serializers.Serializer):
    request_type = serializers.ChoiceField(choices=RequestType.choices)
    justification = serializers.CharField()
    target_employee_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    new_position_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    new_department_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    new_manager_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    career_path_id = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    proposed_salary = serializers.DecimalField(max_digits=12, decimal_places=2, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def to_dto(self) -> RequestSubmitDTO:
        return RequestSubmitDTO(**self.validated_data)


class RequestApproveSerializer(serializers.Serializer):
    stage = serializers.ChoiceField(choices=ApprovalStage.choices, required=False, allow_null=True)
    expected_version = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    comment = serializers.CharField(required=False, allow_blank=True, default='')


class RequestRejectSerializer(serializers.Serializer):
    # Blank reasons reach the workflow, which reports them as a validation error
    reason = serializers.CharField(required=False, allow_blank=True, default='')
    expected_version = serializers.IntegerField(required=False, allow_null=True, min_value=1)


class RequestCancelSerializer(serializers.Serializer):
    expected_version = serializers.IntegerField(required=False, allow_null=True, min_value=1)
