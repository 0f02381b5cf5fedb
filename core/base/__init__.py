"""
Core Base Module

Shared building blocks for the ERP apps.

Exports:
    - TimestampedMixin: created_at / updated_at
    - ActiveFlagMixin: is_active flag with deactivate()/reactivate()
    - ActiveQuerySet / ActiveManager: active()/inactive() filters
    - generate_document_number: sequential PO-/GRN- style numbers
    - exceptions: NotFoundError, InvalidStateTransitionError, PersistenceFailure

Usage:
    from core.base.models import TimestampedMixin, ActiveFlagMixin
    from core.base.managers import ActiveManager
    from core.base.exceptions import NotFoundError
"""
