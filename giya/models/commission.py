"""CommissionGrant model — referrer's share of an accrual."""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class CommissionGrant(models.Model):
    """
    Commission credited to a referrer for one AccrualRecord.

    source_record is one-to-one: the database refuses a second grant for
    the same accrual, which is what makes propagation idempotent under
    concurrent retries.
    """

    grant_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    referrer_account_id = models.CharField(_("referrer"), max_length=64, db_index=True)
    source_record = models.OneToOneField(
        "giya.AccrualRecord",
        on_delete=models.PROTECT,
        related_name="commission",
        verbose_name=_("source accrual"),
    )
    commission_rate = models.DecimalField(_("rate"), max_digits=5, decimal_places=4)
    amount = models.PositiveBigIntegerField(_("amount"))

    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        db_table = "giya_commission_grant"
        verbose_name = _("commission grant")
        verbose_name_plural = _("commission grants")
        ordering = ["-created_at"]

    def __str__(self):
        return f"+{self.amount}pts → {self.referrer_account_id}"
