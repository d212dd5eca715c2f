"""
Request state machine.

    Pending --(manager)--> ManagerApproved --(hr)--> HRApproved
    Pending --(hr, manager stage skipped)--> HRApproved
    Pending --(submit, auto-eligible)--> AutoApproved
    Pending | ManagerApproved --> Rejected | Canceled

The planners below only decide; they return a Transition describing the
new status and the fields to stamp, or raise. RequestWorkflowManager
persists it.
"""
from dataclasses import dataclass, field
from typing import Optional

from django.core.exceptions import ValidationError

from core.base.exceptions import InvalidState, Unauthorized
from HR.employee_requests.models import ApprovalStage, RequestActionType, RequestStatus
from HR.employee_requests.policy import Actor, can_act_on_stage, has_standing

OPEN_STATES = frozenset({RequestStatus.PENDING, RequestStatus.MANAGER_APPROVED})
TERMINAL_STATES = frozenset({
    RequestStatus.HR_APPROVED,
    RequestStatus.AUTO_APPROVED,
    RequestStatus.REJECTED,
    RequestStatus.CANCELED,
})
FULLY_APPROVED_STATES = frozenset({RequestStatus.HR_APPROVED, RequestStatus.AUTO_APPROVED})


@dataclass(frozen=True)
class Transition:
    action: str
    from_status: str
    to_status: str
    stage: Optional[str] = None
    stamps: dict = field(default_factory=dict)
    awaited_next: Optional[str] = None

    @property
    def completes_approval(self) -> bool:
        return self.to_status in FULLY_APPROVED_STATES


def awaited_stage(status, requires_manager: bool) -> Optional[str]:
    if status == RequestStatus.PENDING:
        return ApprovalStage.MANAGER if requires_manager else ApprovalStage.HR
    if status == RequestStatus.MANAGER_APPROVED:
        return ApprovalStage.HR
    return None


def _ensure_open(status, verb):
    if status in TERMINAL_STATES:
        raise InvalidState(f"Cannot {verb} a request that is {RequestStatus(status).label}")


def clean_reason(reason) -> str:
    reason = (reason or '').strip()
    if not reason:
        raise ValidationError({'reason': 'A rejection reason is required'})
    return reason


def plan_submit(requires_manager: bool) -> Transition:
    return Transition(
        action=RequestActionType.SUBMIT,
        from_status='',
        to_status=RequestStatus.PENDING,
        awaited_next=awaited_stage(RequestStatus.PENDING, requires_manager),
    )


def plan_auto_approve(now) -> Transition:
    return Transition(
        action=RequestActionType.AUTO_APPROVE,
        from_status=RequestStatus.PENDING,
        to_status=RequestStatus.AUTO_APPROVED,
        stamps={'processed_date': now},
    )


def plan_approve(status, requires_manager, actor: Actor, target_manager_id, now, stage=None,
                 requester_id=None) -> Transition:
    """
    Approve the awaited stage.

    Raises:
        Unauthorized: actor is neither the target's manager nor HR/Admin,
            or may not act on the awaited stage (HR never decides its own request)
        InvalidState: request is closed, or ``stage`` is not the awaited one
    """
    if not has_standing(actor, target_manager_id):
        raise Unauthorized("Only the target's manager, HR or an admin may approve this request")
    _ensure_open(status, 'approve')

    awaited = awaited_stage(status, requires_manager)
    if stage is not None and stage != awaited:
        raise InvalidState(f"Request is awaiting the {ApprovalStage(awaited).label} stage, not {stage}")
    if not can_act_on_stage(actor, awaited, target_manager_id, requester_id):
        raise Unauthorized(f"Not authorized for the {ApprovalStage(awaited).label} stage")

    if awaited == ApprovalStage.MANAGER:
        return Transition(
            action=RequestActionType.APPROVE,
            from_status=status,
            to_status=RequestStatus.MANAGER_APPROVED,
            stage=awaited,
            stamps={'manager_approved_at': now, 'manager_approved_by_id': actor.user_id},
            awaited_next=ApprovalStage.HR,
        )
    return Transition(
        action=RequestActionType.APPROVE,
        from_status=status,
        to_status=RequestStatus.HR_APPROVED,
        stage=awaited,
        stamps={'hr_approved_at': now, 'hr_approved_by_id': actor.user_id, 'processed_date': now},
    )


def plan_reject(status, requires_manager, actor: Actor, target_manager_id, reason, now,
                requester_id=None) -> Transition:
    reason = clean_reason(reason)
    if not has_standing(actor, target_manager_id):
        raise Unauthorized("Only the target's manager, HR or an admin may reject this request")
    _ensure_open(status, 'reject')

    awaited = awaited_stage(status, requires_manager)
    if not can_act_on_stage(actor, awaited, target_manager_id, requester_id):
        raise Unauthorized(f"Not authorized for the {ApprovalStage(awaited).label} stage")

    return Transition(
        action=RequestActionType.REJECT,
        from_status=status,
        to_status=RequestStatus.REJECTED,
        stage=awaited,
        stamps={'processed_date': now, 'rejection_reason': reason, 'rejected_by_id': actor.user_id},
    )


def plan_cancel(status, requires_manager, actor: Actor, requester_id, now) -> Transition:
    if actor.employee_id is None or actor.employee_id != requester_id:
        raise Unauthorized("Only the requester may cancel a request")
    _ensure_open(status, 'cancel')
    return Transition(
        action=RequestActionType.CANCEL,
        from_status=status,
        to_status=RequestStatus.CANCELED,
        stage=awaited_stage(status, requires_manager),
        stamps={'processed_date': now},
    )
