from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from core.base.models import SoftDeleteMixin, AuditMixin
from core.base.managers import SoftDeleteQuerySet


class EmployeeQuerySet(SoftDeleteQuerySet):
    SEARCH_FIELDS = ('employee_number', 'first_name', 'last_name')

    def direct_reports_of(self, manager_id):
        return self.filter(manager_id=manager_id)


class EmployeeManager(models.Manager.from_queryset(EmployeeQuerySet)):
    pass


class Employee(SoftDeleteMixin, AuditMixin, models.Model):
    """
    Employee record.

    The reporting line (``manager``) decides who may act on the Manager
    approval stage of a request targeting this employee. ``user`` links the
    record to a login so the acting user can be resolved to an employee.

    Fields:
    - user: Optional login account
    - employee_number: Unique HR number
    - manager: Direct manager (self reference)
    - department / current_position: Current placement
    - salary: Current salary
    - hire_date: Date of hire
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='employee'
    )
    employee_number = models.CharField(max_length=30, unique=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    email = models.EmailField(blank=True, default='')
    manager = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='direct_reports'
    )
    department = models.ForeignKey(
        'work_structures.Department',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='employees'
    )
    current_position = models.ForeignKey(
        'work_structures.Position',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='holders'
    )
    salary = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    hire_date = models.DateField()

    objects = EmployeeManager()

    class Meta:
        db_table = 'hr_employee'
        verbose_name = 'Employee'
        verbose_name_plural = 'Employees'
        ordering = ['last_name', 'first_name']
        indexes = [
            models.Index(fields=['department', 'status']),
            models.Index(fields=['manager']),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(salary__isnull=True) | models.Q(salary__gte=0),
                name='employee_salary_non_negative'
            ),
        ]

    def __str__(self):
        return f"{self.employee_number} - {self.full_name}"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def clean(self):
        super().clean()
        if self.pk and self.manager_id == self.pk:
            raise ValidationError({'manager': 'An employee cannot be their own manager'})
