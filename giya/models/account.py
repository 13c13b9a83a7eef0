"""Account model — one points balance per participant."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class AccountKind(models.TextChoices):
    CUSTOMER = "customer", _("Customer")
    INFLUENCER = "influencer", _("Influencer")


class Account(models.Model):
    """
    Points balance of a customer or a referrer.

    balance is only ever changed through giya.store.adjust_balance(),
    which applies deltas with a conditional UPDATE. version increments on
    every delta so readers can detect concurrent changes.
    """

    account_id = models.CharField(
        _("account id"),
        max_length=64,
        unique=True,
        help_text=_("External identity of the participant"),
    )
    kind = models.CharField(
        _("kind"),
        max_length=20,
        choices=AccountKind.choices,
        default=AccountKind.CUSTOMER,
    )
    balance = models.BigIntegerField(_("balance"), default=0)
    version = models.PositiveIntegerField(_("version"), default=0)

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "giya_account"
        verbose_name = _("account")
        verbose_name_plural = _("accounts")
        constraints = [
            models.CheckConstraint(
                condition=models.Q(balance__gte=0),
                name="giya_account_balance_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.account_id}: {self.balance}pts"
