from django.conf import settings
from django.db import models


class StatusChoices(models.TextChoices):
    """Lifecycle status shared by every soft-deletable record."""
    ACTIVE = 'active', 'Active'
    INACTIVE = 'inactive', 'Inactive'


class AuditMixin(models.Model):
    """
    Who created and last changed a row, and when.

    Services pass the acting user explicitly; nothing is read from a
    thread-local request.
    """
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(app_label)s_%(class)s_created'
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(app_label)s_%(class)s_updated'
    )

    class Meta:
        abstract = True


class SoftDeleteMixin(models.Model):
    """
    Records that are retired instead of removed.

    Skills, positions and employees stay referenced by proficiency history,
    succession candidates and approved requests after they are retired, so
    ``deactivate`` flips ``status`` and ``hard_delete`` is the explicit
    escape hatch.
    """
    status = models.CharField(
        max_length=10,
        choices=StatusChoices.choices,
        default=StatusChoices.ACTIVE
    )

    class Meta:
        abstract = True

    @property
    def is_active(self):
        return self.status == StatusChoices.ACTIVE

    def _set_status(self, status, user=None):
        self.status = status
        fields = ['status']
        if user is not None and hasattr(self, 'updated_by'):
            self.updated_by = user
            fields += ['updated_by', 'updated_at']
        self.save(update_fields=fields)

    def deactivate(self, user=None):
        self._set_status(StatusChoices.INACTIVE, user)

    def reactivate(self, user=None):
        self._set_status(StatusChoices.ACTIVE, user)

    def update_fields(self, field_updates: dict):
        """
        Apply ``field_updates``, run ``full_clean`` and save.

        Example:
            position.update_fields({'title': 'Staff Engineer', 'is_key_position': True})
        """
        for field_name, value in field_updates.items():
            setattr(self, field_name, value)
        self.full_clean()
        self.save()
        return self

    def hard_delete(self):
        super().delete()
