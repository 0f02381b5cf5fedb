"""
Error taxonomy shared by the business services.

Validation problems use Django's own ``ValidationError`` so serializers, model
``clean()`` methods and services all raise the same type. The classes below
cover the remaining failure kinds and are mapped onto HTTP status codes by
``erp_project.response_formatter.domain_error_response``.
"""
from django.core.exceptions import ObjectDoesNotExist, ValidationError


class NotFoundError(ObjectDoesNotExist):
    """A referenced purchase order, vendor, product or warehouse does not exist."""

    def __init__(self, entity, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} with id {identifier} not found")


class InvalidStateTransitionError(ValidationError):
    """An operation was attempted against a record in an ineligible status."""

    def __init__(self, entity, current_status, attempted):
        self.entity = entity
        self.current_status = current_status
        self.attempted = attempted
        super().__init__(
            f"Cannot {attempted} {entity} with status '{current_status}'."
        )


class PersistenceFailure(Exception):
    """
    The underlying atomic write could not complete.

    The failed attempt left no partial state behind, so the caller may
    re-invoke the operation.
    """

    retryable = True

    def __init__(self, operation, cause=None):
        self.operation = operation
        self.cause = cause
        message = f"Could not complete '{operation}'. No changes were saved; please retry."
        super().__init__(message)
