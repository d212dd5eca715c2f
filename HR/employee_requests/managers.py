"""
Request workflow manager.

Persistence boundary of the request state machine. Every transition runs
in one atomic block:

    1. lock the request row (select_for_update)
    2. plan the transition (policy + state checks, see workflow.py)
    3. compare the optional caller-supplied expected_version
    4. UPDATE ... WHERE id = ? AND version = ?, bumping version
    5. append a RequestAction audit row
    6. on full approval, apply the payload to the target employee
    7. schedule the notification with transaction.on_commit

Check order for every operation: validation, NotFound, standing or
requester, state, stage authority.
"""
import logging
from functools import partial
from typing import Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core.base.exceptions import InvalidState, NotFound, Unauthorized
from core.base.models import StatusChoices
from HR.career.models import CareerPath
from HR.employee_requests import workflow
from HR.employee_requests.dtos import RequestSubmitDTO
from HR.employee_requests.models import (
    ApprovalStage,
    EmployeeRequest,
    RequestAction,
    RequestStatus,
    RequestType,
)
from HR.employee_requests.notifications import notify_transition
from HR.employee_requests.policy import (
    PolicyContext,
    as_actor,
    auto_approval_eligible,
    has_risk_fields,
    has_standing,
    required_stages,
)
from HR.person.models import Employee
from HR.work_structures.models import Department, Position

logger = logging.getLogger(__name__)


def _validate_id(value, field):
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError({field: 'Must be a positive integer'})


def _get(model, entity, pk):
    try:
        return model.objects.get(pk=pk)
    except model.DoesNotExist:
        raise NotFound(entity, pk) from None


class RequestWorkflowManager:
    """Submit, approve, reject and cancel employee requests."""

    # ----------------------
    # Helper Methods
    # ----------------------

    @staticmethod
    def _lock(request_id) -> EmployeeRequest:
        _validate_id(request_id, 'request_id')
        try:
            return EmployeeRequest.objects.select_for_update().get(pk=request_id)
        except EmployeeRequest.DoesNotExist:
            raise NotFound('Request', request_id) from None

    @staticmethod
    def _target_manager_id(request):
        return (
            Employee.objects
            .filter(pk=request.target_employee_id)
            .values_list('manager_id', flat=True)
            .first()
        )

    @staticmethod
    def _reload(request_id) -> EmployeeRequest:
        return (
            EmployeeRequest.objects
            .select_related(
                'requester', 'target_employee', 'new_position', 'new_department', 'new_manager', 'career_path'
            )
            .get(pk=request_id)
        )

    @classmethod
    def _commit(cls, request, transition, actor=None, comment='', expected_version=None):
        """Persist ``transition`` against the locked ``request`` row."""
        if expected_version is not None and expected_version != request.version:
            raise InvalidState(
                f"Request {request.pk} is at version {request.version}, not {expected_version}; reload and retry"
            )

        updated = (
            EmployeeRequest.objects
            .filter(pk=request.pk, version=request.version)
            .update(status=transition.to_status, version=F('version') + 1, **transition.stamps)
        )
        if updated == 0:
            raise InvalidState(f"Request {request.pk} was modified concurrently; reload and retry")

        RequestAction.objects.create(
            request_id=request.pk,
            actor_id=actor.user_id if actor is not None else None,
            action=transition.action,
            stage=transition.stage,
            from_status=transition.from_status,
            to_status=transition.to_status,
            comment=comment or '',
        )

        if transition.completes_approval:
            cls._apply_changes(request, actor)

        transaction.on_commit(partial(notify_transition, request.pk, transition))
        logger.info(
            "Request %s: %s -> %s (%s by user %s)",
            request.pk, transition.from_status or '-', transition.to_status, transition.action,
            actor.user_id if actor is not None else 'system'
        )

    @staticmethod
    def _apply_changes(request, actor=None):
        """Write an approved payload onto the target employee."""
        employee = Employee.objects.select_for_update().get(pk=request.target_employee_id)
        changed = []

        if request.new_position_id is not None:
            employee.current_position_id = request.new_position_id
            changed.append('current_position')

        department_id = request.new_department_id
        if department_id is None and request.request_type == RequestType.POSITION_CHANGE and request.new_position_id:
            department_id = Position.objects.filter(pk=request.new_position_id).values_list(
                'department_id', flat=True
            ).first()
        if department_id is not None and department_id != employee.department_id:
            employee.department_id = department_id
            changed.append('department')

        if request.new_manager_id is not None:
            employee.manager_id = request.new_manager_id
            changed.append('manager')

        if request.proposed_salary is not None:
            employee.salary = request.proposed_salary
            changed.append('salary')

        if not changed:
            return
        employee.updated_by_id = actor.user_id if actor is not None else None
        employee.save(update_fields=changed + ['updated_by', 'updated_at'])
        logger.info("Applied request %s to employee %s: %s", request.pk, employee.pk, ', '.join(changed))

    @staticmethod
    def _validate_submission(dto: RequestSubmitDTO):
        if dto.request_type not in RequestType.values:
            raise ValidationError({'request_type': f'Invalid request type "{dto.request_type}"'})
        for name in ('target_employee_id', 'new_position_id', 'new_department_id', 'new_manager_id',
                     'career_path_id'):
            _validate_id(getattr(dto, name), name)
        if dto.request_type == RequestType.POSITION_CHANGE and dto.new_position_id is None:
            raise ValidationError({'new_position_id': 'A position change requires a new position'})
        if dto.request_type == RequestType.DEPARTMENT_CHANGE and dto.new_department_id is None:
            raise ValidationError({'new_department_id': 'A department change requires a new department'})
        if dto.career_path_id is not None and dto.request_type != RequestType.POSITION_CHANGE:
            raise ValidationError({'career_path_id': 'Only a position change can follow a career path'})
        if not (dto.justification or '').strip():
            raise ValidationError({'justification': 'Justification is required'})
        if dto.proposed_salary is not None and dto.proposed_salary < 0:
            raise ValidationError({'proposed_salary': 'Proposed salary cannot be negative'})

    # ----------------------
    # Transitions
    # ----------------------

    @classmethod
    def submit(cls, requester, dto: RequestSubmitDTO) -> EmployeeRequest:
        """
        Submit a request and route it through the approval policy.

        Args:
            requester: Submitting user (or policy Actor)
            dto: RequestSubmitDTO

        Returns:
            EmployeeRequest: Pending, or AutoApproved when the policy allows

        Raises:
            ValidationError: malformed payload, requester without an employee record,
                or a career path that does not link the current and requested positions
            NotFound: unknown target, position, department, manager or career path
            Unauthorized: submitting for someone the requester has no standing over
            InvalidState: an open request of the same type already exists for the target
        """
        actor = as_actor(requester)
        cls._validate_submission(dto)
        if actor.employee_id is None:
            raise ValidationError({'requester': 'Only users linked to an employee record can submit requests'})

        target_id = dto.target_employee_id or actor.employee_id
        target = _get(Employee, 'Employee', target_id)
        new_position = _get(Position, 'Position', dto.new_position_id) if dto.new_position_id else None
        new_department = _get(Department, 'Department', dto.new_department_id) if dto.new_department_id else None
        new_manager = _get(Employee, 'Employee', dto.new_manager_id) if dto.new_manager_id else None
        career_path = _get(CareerPath, 'Career path', dto.career_path_id) if dto.career_path_id else None

        if new_position is not None:
            if new_position.status != StatusChoices.ACTIVE:
                raise ValidationError({'new_position_id': f'Position "{new_position.title}" is inactive'})
            if new_position.pk == target.current_position_id:
                raise ValidationError({'new_position_id': 'Employee already holds this position'})
            if dto.proposed_salary is not None and not new_position.salary_in_band(dto.proposed_salary):
                raise ValidationError({
                    'proposed_salary': (
                        f'Proposed salary is outside the band '
                        f'{new_position.min_salary}-{new_position.max_salary} of "{new_position.title}"'
                    )
                })
        if new_department is not None:
            if new_department.status != StatusChoices.ACTIVE:
                raise ValidationError({'new_department_id': f'Department "{new_department.name}" is inactive'})
            if dto.request_type == RequestType.DEPARTMENT_CHANGE and new_department.pk == target.department_id:
                raise ValidationError({'new_department_id': 'Employee is already in this department'})
        if new_manager is not None and new_manager.pk == target.pk:
            raise ValidationError({'new_manager_id': 'An employee cannot be their own manager'})
        if career_path is not None:
            if not career_path.is_active:
                raise ValidationError({'career_path_id': 'Career path is inactive'})
            if career_path.to_position_id != new_position.pk:
                raise ValidationError({'career_path_id': 'Career path does not lead to the requested position'})
            if career_path.from_position_id != target.current_position_id:
                raise ValidationError({
                    'career_path_id': "Career path does not start at the employee's current position"
                })

        if target.pk != actor.employee_id and not has_standing(actor, target.manager_id):
            raise Unauthorized("Only the employee's manager, HR or an admin may submit requests for them")

        ctx = PolicyContext(
            request_type=dto.request_type,
            requester_role=actor.role,
            requester_id=actor.employee_id,
            target_id=target.pk,
            target_manager_id=target.manager_id,
            has_risk_fields=has_risk_fields(dto.request_type, dto.proposed_salary),
        )
        stages = required_stages(ctx)
        requires_manager = ApprovalStage.MANAGER in stages

        with transaction.atomic():
            # Lock the target so two submissions cannot both pass the open-request check
            Employee.objects.select_for_update().filter(pk=target.pk).first()
            if EmployeeRequest.objects.filter(
                target_employee=target,
                request_type=dto.request_type,
                status__in=workflow.OPEN_STATES,
            ).exists():
                raise InvalidState(
                    f"{target.full_name} already has an open {RequestType(dto.request_type).label} request"
                )

            request = EmployeeRequest.objects.create(
                request_type=dto.request_type,
                requester_id=actor.employee_id,
                target_employee=target,
                new_position=new_position,
                new_department=new_department,
                new_manager=new_manager,
                career_path=career_path,
                proposed_salary=dto.proposed_salary,
                justification=dto.justification.strip(),
                notes=dto.notes or '',
                requires_manager_approval=requires_manager,
            )
            submitted = workflow.plan_submit(requires_manager)
            RequestAction.objects.create(
                request=request,
                actor_id=actor.user_id,
                action=submitted.action,
                from_status=submitted.from_status,
                to_status=submitted.to_status,
            )
            logger.info(
                "Request %s submitted by user %s for employee %s (stages: %s)",
                request.pk, actor.user_id, target.pk, ', '.join(stages) or 'auto'
            )

            if auto_approval_eligible(ctx):
                cls._commit(request, workflow.plan_auto_approve(timezone.now()))
            else:
                transaction.on_commit(partial(notify_transition, request.pk, submitted))

        return cls._reload(request.pk)

    @classmethod
    def approve(cls, request_id, actor, stage: Optional[str] = None,
                expected_version: Optional[int] = None, comment: str = '') -> EmployeeRequest:
        """
        Approve the stage the request is waiting on.

        ``stage``, when given, must equal the awaited stage; HR cannot jump
        ahead of a pending manager decision.
        """
        actor = as_actor(actor)
        if stage is not None and stage not in ApprovalStage.values:
            raise ValidationError({'stage': f'Invalid stage "{stage}"'})

        with transaction.atomic():
            request = cls._lock(request_id)
            transition = workflow.plan_approve(
                request.status,
                request.requires_manager_approval,
                actor,
                cls._target_manager_id(request),
                timezone.now(),
                stage=stage,
                requester_id=request.requester_id,
            )
            cls._commit(request, transition, actor, comment, expected_version)

        return cls._reload(request.pk)

    @classmethod
    def reject(cls, request_id, actor, reason: str, expected_version: Optional[int] = None) -> EmployeeRequest:
        """Reject the request at its awaited stage. Irreversible."""
        actor = as_actor(actor)
        reason = workflow.clean_reason(reason)

        with transaction.atomic():
            request = cls._lock(request_id)
            transition = workflow.plan_reject(
                request.status,
                request.requires_manager_approval,
                actor,
                cls._target_manager_id(request),
                reason,
                timezone.now(),
                requester_id=request.requester_id,
            )
            cls._commit(request, transition, actor, reason, expected_version)

        return cls._reload(request.pk)

    @classmethod
    def cancel(cls, request_id, actor, expected_version: Optional[int] = None) -> EmployeeRequest:
        """Withdraw an open request. Only the requester may cancel."""
        actor = as_actor(actor)

        with transaction.atomic():
            request = cls._lock(request_id)
            transition = workflow.plan_cancel(
                request.status,
                request.requires_manager_approval,
                actor,
                request.requester_id,
                timezone.now(),
            )
            cls._commit(request, transition, actor, expected_version=expected_version)

        return cls._reload(request.pk)

    # ----------------------
    # Queries
    # ----------------------

    @staticmethod
    def _base_queryset():
        return EmployeeRequest.objects.select_related(
            'requester', 'target_employee', 'new_position', 'new_department', 'new_manager', 'career_path'
        )

    @classmethod
    def get_pending_requests_for_actor(cls, actor):
        """
        Requests the actor can act on right now.

        HR/Admin: every open request except their own. Managers: Pending requests awaiting the
        manager stage for their direct reports. Anybody else: nothing.
        """
        actor = as_actor(actor)
        queryset = cls._base_queryset().order_by('submitted_at', 'id')
        if actor.is_elevated:
            queryset = queryset.filter(status__in=workflow.OPEN_STATES)
            if actor.employee_id is not None:
                queryset = queryset.exclude(requester_id=actor.employee_id)
            return queryset
        if actor.employee_id is not None:
            return queryset.filter(
                status=RequestStatus.PENDING,
                requires_manager_approval=True,
                target_employee__manager_id=actor.employee_id,
            )
        return queryset.none()

    @classmethod
    def get_requests_by_requester(cls, actor):
        """The actor's own submissions, newest first."""
        actor = as_actor(actor)
        if actor.employee_id is None:
            return cls._base_queryset().none()
        return cls._base_queryset().filter(requester_id=actor.employee_id).order_by('-submitted_at', '-id')

    @classmethod
    def get_request(cls, request_id, actor) -> EmployeeRequest:
        """
        Fetch one request visible to the actor: requester, target, the
        target's manager, HR or Admin.
        """
        actor = as_actor(actor)
        _validate_id(request_id, 'request_id')
        try:
            request = cls._base_queryset().get(pk=request_id)
        except EmployeeRequest.DoesNotExist:
            raise NotFound('Request', request_id) from None

        involved = actor.employee_id is not None and actor.employee_id in (
            request.requester_id, request.target_employee_id
        )
        if not (involved or has_standing(actor, request.target_employee.manager_id)):
            raise Unauthorized("Not allowed to view this request")
        return request

    @classmethod
    def get_history(cls, request_id, actor):
        request = cls.get_request(request_id, actor)
        return request.actions.select_related('actor').order_by('created_at', 'id')
