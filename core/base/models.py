from django.db import models
from django.db.models.functions import Length


class TimestampedMixin(models.Model):
    """
    Adds creation and modification timestamps.

    Fields:
        - created_at: Timestamp when record was created
        - updated_at: Timestamp when record was last modified
    """
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Timestamp when record was created"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Timestamp when record was last modified"
    )

    class Meta:
        abstract = True


class ActiveFlagMixin(models.Model):
    """
    Adds an is_active flag used instead of hard deletes.

    Vendors, products and warehouses carry history (purchase orders, stock
    movements) so they are deactivated rather than removed.
    """
    is_active = models.BooleanField(default=True, db_index=True)

    class Meta:
        abstract = True

    def deactivate(self):
        """Mark the record inactive."""
        self.is_active = False
        self.save(update_fields=['is_active'])

    def reactivate(self):
        """Mark the record active again."""
        self.is_active = True
        self.save(update_fields=['is_active'])


def generate_document_number(model, prefix, field_name, on_date):
    """
    Build the next sequential document number, e.g. ``PO-2026-00042``.

    The sequence is per prefix and year and is derived from the highest
    existing number, so gaps left by deleted rows are not reused. Ordering is by
    length first so ``PO-2026-100000`` follows ``PO-2026-99999``.
    """
    year_prefix = f"{prefix}-{on_date.year}-"
    last_number = (
        model.objects
        .filter(**{f"{field_name}__startswith": year_prefix})
        .order_by(Length(field_name).desc(), f"-{field_name}")
        .values_list(field_name, flat=True)
        .first()
    )
    next_sequence = 1
    if last_number:
        try:
            next_sequence = int(last_number.rsplit('-', 1)[1]) + 1
        except (IndexError, ValueError):
            next_sequence = model.objects.count() + 1
    return f"{year_prefix}{next_sequence:05d}"
