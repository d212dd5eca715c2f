from django.conf import settings
from django.db import models


class RequestType(models.TextChoices):
    POSITION_CHANGE = 'position_change', 'Position Change'
    DEPARTMENT_CHANGE = 'department_change', 'Department Change'


class RequestStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    MANAGER_APPROVED = 'manager_approved', 'Manager Approved'
    HR_APPROVED = 'hr_approved', 'HR Approved'
    AUTO_APPROVED = 'auto_approved', 'Auto Approved'
    REJECTED = 'rejected', 'Rejected'
    CANCELED = 'canceled', 'Canceled'


class ApprovalStage(models.TextChoices):
    MANAGER = 'manager', 'Manager'
    HR = 'hr', 'HR'


class RequestActionType(models.TextChoices):
    SUBMIT = 'submit', 'Submit'
    AUTO_APPROVE = 'auto_approve', 'Auto Approve'
    APPROVE = 'approve', 'Approve'
    REJECT = 'reject', 'Reject'
    CANCEL = 'cancel', 'Cancel'


class EmployeeRequest(models.Model):
    """
    Promotion (position change) or transfer (department change) request.

    The payload is fixed at submission. ``status`` and the approval stamps
    are written only by RequestWorkflowManager, which bumps ``version`` on
    every transition so concurrent approvers cannot both win.
    """
    request_type = models.CharField(max_length=30, choices=RequestType.choices)
    requester = models.ForeignKey(
        'person.Employee',
        on_delete=models.PROTECT,
        related_name='submitted_requests'
    )
    target_employee = models.ForeignKey(
        'person.Employee',
        on_delete=models.PROTECT,
        related_name='requests'
    )

    # Payload
    new_position = models.ForeignKey(
        'work_structures.Position',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+'
    )
    new_department = models.ForeignKey(
        'work_structures.Department',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+'
    )
    new_manager = models.ForeignKey(
        'person.Employee',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='+'
    )
    career_path = models.ForeignKey(
        'career.CareerPath',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='requests'
    )
    proposed_salary = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    justification = models.TextField()

    # Workflow state
    status = models.CharField(
        max_length=20,
        choices=RequestStatus.choices,
        default=RequestStatus.PENDING,
        db_index=True
    )
    requires_manager_approval = models.BooleanField(
        default=True,
        help_text="Stage set fixed at submission: Manager then HR, or HR only"
    )
    submitted_at = models.DateTimeField(auto_now_add=True)
    manager_approved_at = models.DateTimeField(null=True, blank=True)
    manager_approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    hr_approved_at = models.DateTimeField(null=True, blank=True)
    hr_approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    rejected_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    rejection_reason = models.TextField(blank=True, default='')
    processed_date = models.DateTimeField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')
    version = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = 'hr_employee_request'
        verbose_name = 'Employee Request'
        verbose_name_plural = 'Employee Requests'
        ordering = ['-submitted_at', '-id']
        indexes = [
            models.Index(fields=['target_employee', 'request_type', 'status']),
            models.Index(fields=['requester', 'submitted_at']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(proposed_salary__isnull=True) | models.Q(proposed_salary__gte=0),
                name='request_salary_non_negative'
            ),
        ]

    def __str__(self):
        return f"{self.get_request_type_display()} #{self.pk} ({self.get_status_display()})"


class RequestAction(models.Model):
    """Append-only audit entry, one per workflow transition."""
    request = models.ForeignKey(
        EmployeeRequest,
        on_delete=models.CASCADE,
        related_name='actions'
    )
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='request_actions',
        help_text="Null for system actions"
    )
    action = models.CharField(max_length=20, choices=RequestActionType.choices)
    stage = models.CharField(max_length=10, choices=ApprovalStage.choices, null=True, blank=True)
    from_status = models.CharField(max_length=20, choices=RequestStatus.choices, blank=True, default='')
    to_status = models.CharField(max_length=20, choices=RequestStatus.choices)
    comment = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'hr_employee_request_action'
        verbose_name = 'Request Action'
        verbose_name_plural = 'Request Actions'
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.action} on request {self.request_id}: {self.from_status or '-'} -> {self.to_status}"
