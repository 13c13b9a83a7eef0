"""RedemptionToken model — single-use proof of a committed redemption."""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class TokenState(models.TextChoices):
    ISSUED = "issued", _("Issued")
    CONSUMED = "consumed", _("Consumed")
    CANCELLED = "cancelled", _("Cancelled")


class RedemptionToken(models.Model):
    """
    Redemption of one offer by one account.

    Points are debited when the token is issued, in the same transaction
    that creates it. The token then leaves ISSUED exactly once: to
    CONSUMED when the business validates it, or to CANCELLED when it is
    refunded. Non-issued tokens are never modified again.
    """

    token_id = models.CharField(_("token"), max_length=128, unique=True)
    account_id = models.CharField(_("account id"), max_length=64, db_index=True)
    offer = models.ForeignKey(
        "giya.Offer",
        on_delete=models.PROTECT,
        related_name="redemptions",
        verbose_name=_("offer"),
    )
    owning_business_id = models.CharField(_("business id"), max_length=64, db_index=True)
    points_debited = models.PositiveBigIntegerField(_("points debited"))

    state = models.CharField(
        _("state"),
        max_length=20,
        choices=TokenState.choices,
        default=TokenState.ISSUED,
        db_index=True,
    )

    issued_at = models.DateTimeField(_("issued at"), default=timezone.now, db_index=True)
    expires_at = models.DateTimeField(_("expires at"), null=True, blank=True)
    consumed_at = models.DateTimeField(_("consumed at"), null=True, blank=True)
    consumed_by = models.CharField(_("consumed by"), max_length=64, blank=True)
    cancelled_at = models.DateTimeField(_("cancelled at"), null=True, blank=True)
    cancel_reason = models.CharField(_("cancel reason"), max_length=200, blank=True)

    class Meta:
        db_table = "giya_redemption_token"
        verbose_name = _("redemption")
        verbose_name_plural = _("redemptions")
        ordering = ["-issued_at"]
        indexes = [
            models.Index(fields=["account_id", "-issued_at"], name="giya_token_account_idx"),
            models.Index(fields=["state", "expires_at"], name="giya_token_state_expiry_idx"),
        ]

    def __str__(self):
        return f"{self.token_id[:16]}… [{self.state}]"

    def is_expired(self, now=None) -> bool:
        if self.expires_at is None:
            return False
        return (now or timezone.now()) >= self.expires_at
