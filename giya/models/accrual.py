"""AccrualRecord model — immutable points grant from a purchase."""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class AccrualRecord(models.Model):
    """
    One points grant from one purchase.

    Append-only: written once by the accrual service, never updated or
    deleted. Zero-point records are kept for audit.
    """

    record_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    account_id = models.CharField(_("account id"), max_length=64, db_index=True)
    source_business_id = models.CharField(_("business id"), max_length=64, db_index=True)

    amount_spent = models.DecimalField(_("amount spent"), max_digits=12, decimal_places=2)
    conversion_rate = models.DecimalField(
        _("conversion rate"),
        max_digits=12,
        decimal_places=4,
        help_text=_("Currency units per point at grant time"),
    )
    points_granted = models.PositiveBigIntegerField(_("points granted"))

    external_ref = models.CharField(
        _("external reference"),
        max_length=100,
        null=True,
        blank=True,
        unique=True,
        help_text=_("Idempotency key (ex: receipt:123)"),
    )

    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        db_table = "giya_accrual_record"
        verbose_name = _("accrual record")
        verbose_name_plural = _("accrual records")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["account_id", "-created_at"], name="giya_accrual_account_idx"),
        ]

    def __str__(self):
        return f"+{self.points_granted}pts — {self.account_id} @ {self.source_business_id}"
