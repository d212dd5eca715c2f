"""
Domain error taxonomy shared by the career engines.

    ValidationError  -> django.core.exceptions.ValidationError (malformed input)
    Unauthorized     -> actor lacks authority for the attempted operation
    InvalidState     -> transition not legal from the current status
    NotFound         -> referenced record does not exist

None of these are retried by the engines; the caller must fix the input or
re-authenticate.
"""
from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError


class Unauthorized(PermissionDenied):
    """Actor lacks the authority for the attempted transition."""


class InvalidState(ValueError):
    """Transition is not legal from the record's current status."""


class NotFound(ObjectDoesNotExist):
    """Referenced request, employee, position or skill does not exist."""

    def __init__(self, entity, pk=None):
        self.entity = entity
        self.pk = pk
        message = f"{entity} not found" if pk is None else f"{entity} {pk} not found"
        super().__init__(message)


DOMAIN_ERRORS = (ValidationError, Unauthorized, InvalidState, NotFound)


def get_or_not_found(queryset_or_model, entity, pk):
    """Fetch one row by pk or raise NotFound naming the entity."""
    manager = getattr(queryset_or_model, 'objects', queryset_or_model)
    try:
        return manager.get(pk=pk)
    except ObjectDoesNotExist:
        raise NotFound(entity, pk) from None


def get_active_or_invalid(queryset_or_model, entity, pk, field):
    """
    Fetch one soft-deletable row that must be active.

    Missing rows raise NotFound; an inactive row is a ValidationError on ``field``.
    """
    instance = get_or_not_found(queryset_or_model, entity, pk)
    if not instance.is_active:
        raise ValidationError({field: f'{entity} {pk} is inactive'})
    return instance
