"""
Workflow notifications.

The backend is chosen with settings.CAREER_NOTIFICATION_BACKEND (dotted
path). Dispatch is scheduled with ``transaction.on_commit`` so nothing is
sent for a rolled-back transition, and a failing backend is logged without
affecting the committed request.

Routing:
    submitted (Pending)          -> target's manager, or HR when the manager stage is skipped
    ManagerApproved              -> HR users
    HRApproved / AutoApproved /
    Rejected                     -> requester, and the target when different
    Canceled                     -> whoever the request was waiting on
"""
import logging

from django.conf import settings
from django.utils.module_loading import import_string

from core.user_accounts.models import CustomUser, UserRole
from HR.employee_requests.models import ApprovalStage, EmployeeRequest, RequestStatus

logger = logging.getLogger(__name__)

DEFAULT_BACKEND = 'HR.employee_requests.notifications.LoggingNotificationBackend'


class BaseNotificationBackend:
    """Interface for notification delivery."""

    def send(self, recipients, subject, message, request=None):
        raise NotImplementedError('Notification backends must implement send()')


class LoggingNotificationBackend(BaseNotificationBackend):
    """Writes notifications to the log instead of delivering them."""

    def send(self, recipients, subject, message, request=None):
        logger.info("Notification to %s: %s - %s", ', '.join(recipients), subject, message)


def get_backend() -> BaseNotificationBackend:
    path = getattr(settings, 'CAREER_NOTIFICATION_BACKEND', DEFAULT_BACKEND) or DEFAULT_BACKEND
    return import_string(path)()


def _employee_address(employee):
    if employee is None:
        return ''
    if employee.user_id and employee.user.email:
        return employee.user.email
    return employee.email


def _hr_addresses():
    return list(
        CustomUser.objects
        .filter(role=UserRole.HR, is_active=True)
        .order_by('pk')
        .values_list('email', flat=True)
    )


def _stage_addresses(request, stage):
    if stage == ApprovalStage.MANAGER:
        return [_employee_address(request.target_employee.manager)]
    if stage == ApprovalStage.HR:
        return _hr_addresses()
    return []


def resolve_recipients(request: EmployeeRequest, transition) -> list:
    """Addresses to notify about ``transition``, de-duplicated, in routing order."""
    if transition.to_status in (RequestStatus.PENDING, RequestStatus.MANAGER_APPROVED):
        addresses = _stage_addresses(request, transition.awaited_next)
    elif transition.to_status == RequestStatus.CANCELED:
        addresses = _stage_addresses(request, transition.stage)
    else:
        addresses = [_employee_address(request.requester)]
        if request.target_employee_id != request.requester_id:
            addresses.append(_employee_address(request.target_employee))

    seen = set()
    recipients = []
    for address in addresses:
        if address and address not in seen:
            seen.add(address)
            recipients.append(address)
    return recipients


def _subject(request, transition):
    status_label = RequestStatus(transition.to_status).label
    return f"{request.get_request_type_display()} request #{request.pk}: {status_label}"


def _message(request, transition):
    target = request.target_employee.full_name
    if transition.to_status == RequestStatus.PENDING:
        return f"A request for {target} is awaiting your review."
    if transition.to_status == RequestStatus.MANAGER_APPROVED:
        return f"A request for {target} was approved by the manager and is awaiting HR review."
    if transition.to_status == RequestStatus.REJECTED:
        return f"The request for {target} was rejected: {request.rejection_reason}"
    if transition.to_status == RequestStatus.CANCELED:
        return f"The request for {target} was canceled by the requester."
    return f"The request for {target} was approved."


def notify_transition(request_id, transition):
    """Send the notification for a committed transition. Never raises."""
    try:
        request = (
            EmployeeRequest.objects
            .select_related('requester__user', 'target_employee__user', 'target_employee__manager__user')
            .get(pk=request_id)
        )
        recipients = resolve_recipients(request, transition)
        if not recipients:
            logger.debug("No recipients for %s on request %s", transition.action, request_id)
            return
        get_backend().send(recipients, _subject(request, transition), _message(request, transition), request=request)
    except Exception:
        logger.exception("Failed to send notification for request %s (%s)", request_id, transition.action)
