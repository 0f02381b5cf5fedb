"""
Vendor payables.

Settlement reduces what we owe a vendor. The vendor row is locked for the
duration of the transaction so two settlements cannot both pass the balance
check against the same starting balance.
"""
import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.db.models import F

from core.base.exceptions import NotFoundError, PersistenceFailure
from core.storage.services import delete_image, upload_image
from Finance.ledger.services import LedgerService
from .dtos import VendorPaymentDTO
from .models import Vendor, VendorPayment

logger = logging.getLogger(__name__)


class VendorService:
    """Service layer for Vendor business logic"""

    @staticmethod
    def get_vendor(vendor_id) -> Vendor:
        try:
            return Vendor.objects.get(pk=vendor_id)
        except (Vendor.DoesNotExist, ValueError, TypeError):
            raise NotFoundError('Vendor', vendor_id)

    @staticmethod
    def _check_amount(amount, balance):
        if amount is None or amount <= 0:
            raise ValidationError({'amount': 'Payment amount must be greater than 0'})
        if amount > balance:
            raise ValidationError({
                'amount': f"Amount cannot exceed outstanding balance of {balance:.2f}"
            })

    @staticmethod
    def settle_payment(vendor_id, dto: VendorPaymentDTO, user) -> VendorPayment:
        """
        Pay ``dto.amount`` off a vendor's balance.

        Writes the VendorPayment and its ledger entry (EXPENSE / VENDOR_PAY) in
        the same transaction as the balance change. A receipt image, if
        given, is uploaded first and removed again if the payment is not
        recorded.

        Raises:
            NotFoundError: vendor does not exist
            ValidationError: amount not in (0, balance]
            UploadError: receipt image rejected
            PersistenceFailure: the database write failed; nothing was saved
        """
        amount = Decimal(dto.amount) if dto.amount is not None else None
        vendor = VendorService.get_vendor(vendor_id)
        VendorService._check_amount(amount, vendor.balance)

        receipt_url = ''
        if dto.receipt_image is not None:
            receipt_url = upload_image(dto.receipt_image, f"vendor-payments/{vendor.pk}")

        try:
            with transaction.atomic():
                vendor = Vendor.objects.select_for_update().get(pk=vendor.pk)
                VendorService._check_amount(amount, vendor.balance)

                Vendor.objects.filter(pk=vendor.pk).update(balance=F('balance') - amount)
                vendor.refresh_from_db(fields=['balance'])

                entry = LedgerService.post_vendor_payment(
                    vendor, amount, dto.payment_method, user, notes=dto.notes or ''
                )
                payment = VendorPayment.objects.create(
                    vendor=vendor,
                    amount=amount,
                    payment_method=dto.payment_method,
                    notes=dto.notes or '',
                    receipt_image_url=receipt_url,
                    balance_after=vendor.balance,
                    ledger_entry=entry,
                    paid_by=user,
                )
        except ValidationError:
            delete_image(receipt_url)
            raise
        except DatabaseError as exc:
            delete_image(receipt_url)
            logger.error("Payment to vendor %s failed", vendor.pk, exc_info=True)
            raise PersistenceFailure('settle vendor payment', cause=exc) from exc

        logger.info(
            "Settled %s to vendor %s by user %s (balance now %s)",
            amount, vendor.pk, user.pk, vendor.balance
        )
        return payment
