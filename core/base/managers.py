from django.db import models


class ActiveQuerySet(models.QuerySet):
    """
    QuerySet for models using ActiveFlagMixin.

    Usage:
        Vendor.objects.active()
        Vendor.objects.inactive()
    """

    def active(self):
        """Return only active records."""
        return self.filter(is_active=True)

    def inactive(self):
        """Return only deactivated records."""
        return self.filter(is_active=False)


class ActiveManager(models.Manager.from_queryset(ActiveQuerySet)):
    """Manager exposing ActiveQuerySet filters."""
