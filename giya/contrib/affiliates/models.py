"""Affiliate models — referral links and customer attributions."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class AffiliateLink(models.Model):
    """
    Referral link of one referrer for one business.

    code is what travels in the shared URL (?ref=CODE). It is unique per
    business, so the same code may exist at two businesses.
    """

    referrer_account_id = models.CharField(_("referrer"), max_length=64, db_index=True)
    business_id = models.CharField(_("business id"), max_length=64, db_index=True)
    code = models.CharField(_("code"), max_length=32)
    commission_rate = models.DecimalField(
        _("commission rate"),
        max_digits=5,
        decimal_places=4,
        null=True,
        blank=True,
        help_text=_("Empty to use GIYA['COMMISSION_RATE']"),
    )
    is_active = models.BooleanField(_("active"), default=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        db_table = "giya_affiliate_link"
        verbose_name = _("affiliate link")
        verbose_name_plural = _("affiliate links")
        constraints = [
            models.UniqueConstraint(
                fields=["business_id", "code"],
                name="giya_affiliate_code_per_business",
            ),
        ]

    def __str__(self):
        return f"{self.code} → {self.referrer_account_id} @ {self.business_id}"


class AffiliateAttribution(models.Model):
    """
    Customer brought to a business by a link.

    First attribution wins: one row per (account, business).
    """

    account_id = models.CharField(_("account id"), max_length=64)
    business_id = models.CharField(_("business id"), max_length=64)
    link = models.ForeignKey(
        AffiliateLink,
        on_delete=models.PROTECT,
        related_name="attributions",
        verbose_name=_("link"),
    )
    attributed_at = models.DateTimeField(_("attributed at"), auto_now_add=True)

    class Meta:
        db_table = "giya_affiliate_attribution"
        verbose_name = _("affiliate attribution")
        verbose_name_plural = _("affiliate attributions")
        constraints = [
            models.UniqueConstraint(
                fields=["account_id", "business_id"],
                name="giya_affiliate_one_per_customer",
            ),
        ]

    def __str__(self):
        return f"{self.account_id} @ {self.business_id} via {self.link.code}"
