"""
Approval policy.

Decides, from roles and the reporting line alone, which approval stages a
request needs and who may act on each. Nothing here touches the database;
callers resolve the target's manager and pass plain ids in.

    Role      Auto-approved                       Stages otherwise
    Admin     always                              -
    HR        no risk fields and not for self     HR (decided by another HR/Admin)
    Manager   never                               Manager (if target has one), HR
    Employee  never                               Manager (if target has one), HR
"""
from dataclasses import dataclass
from typing import Optional, Tuple

from core.user_accounts.models import UserRole
from HR.employee_requests.models import ApprovalStage, RequestType

ELEVATED_ROLES = (UserRole.HR, UserRole.ADMIN)


@dataclass(frozen=True)
class Actor:
    """Authenticated caller as seen by the policy."""
    user_id: Optional[int]
    employee_id: Optional[int]
    role: str

    @classmethod
    def from_user(cls, user):
        return cls(user_id=user.pk, employee_id=user.employee_id, role=user.role)

    @property
    def is_elevated(self) -> bool:
        return self.role in ELEVATED_ROLES


def as_actor(actor_or_user) -> Actor:
    if isinstance(actor_or_user, Actor):
        return actor_or_user
    return Actor.from_user(actor_or_user)


@dataclass(frozen=True)
class PolicyContext:
    request_type: str
    requester_role: str
    requester_id: int
    target_id: int
    target_manager_id: Optional[int]
    has_risk_fields: bool = False

    @property
    def is_self_request(self) -> bool:
        return self.requester_id == self.target_id


def has_risk_fields(request_type, proposed_salary) -> bool:
    """A proposed salary or a department move."""
    return proposed_salary is not None or request_type == RequestType.DEPARTMENT_CHANGE


def auto_approval_eligible(ctx: PolicyContext) -> bool:
    if ctx.requester_role == UserRole.ADMIN:
        return True
    if ctx.requester_role == UserRole.HR:
        return not ctx.has_risk_fields and not ctx.is_self_request
    return False


def required_stages(ctx: PolicyContext) -> Tuple[str, ...]:
    if auto_approval_eligible(ctx):
        return ()
    stages = []
    if ctx.requester_role not in ELEVATED_ROLES and ctx.target_manager_id is not None:
        stages.append(ApprovalStage.MANAGER)
    stages.append(ApprovalStage.HR)
    return tuple(stages)


def is_target_manager(actor: Actor, target_manager_id: Optional[int]) -> bool:
    return (
        actor.employee_id is not None
        and target_manager_id is not None
        and actor.employee_id == target_manager_id
    )


def has_standing(actor: Actor, target_manager_id: Optional[int]) -> bool:
    """True when the actor may act on requests about this target at all."""
    return actor.is_elevated or is_target_manager(actor, target_manager_id)


def is_requester(actor: Actor, requester_id: Optional[int]) -> bool:
    return actor.employee_id is not None and actor.employee_id == requester_id


def can_act_on_stage(actor: Actor, stage: str, target_manager_id: Optional[int],
                     requester_id: Optional[int] = None) -> bool:
    """The HR stage is decided by an HR/Admin other than the requester."""
    if stage == ApprovalStage.MANAGER:
        return actor.is_elevated or is_target_manager(actor, target_manager_id)
    if stage == ApprovalStage.HR:
        return actor.is_elevated and not is_requester(actor, requester_id)
    return False
