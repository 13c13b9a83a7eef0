"""Offer model — rewards, discounts, and exclusive offers in one table."""

import uuid
from datetime import datetime

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class OfferType(models.TextChoices):
    REWARD = "reward", _("Reward")
    DISCOUNT = "discount", _("Discount")
    EXCLUSIVE = "exclusive", _("Exclusive offer")


class ScheduleType(models.TextChoices):
    ALWAYS = "always_available", _("Always available")
    TIME = "time_based", _("Time based")
    DAY = "day_based", _("Day based")
    TIME_AND_DAY = "time_and_day", _("Time and day")


class Offer(models.Model):
    """
    Something a customer can spend points on.

    offer_type is the discriminant. Variant fields (discount_*, *_price)
    are only meaningful for their own type; the redemption rules
    (points_required, is_active, validity window, redemption limit) are
    shared by all three.

    redemption_count only grows, and only through
    giya.store.claim_offer_unit().
    """

    offer_id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owning_business_id = models.CharField(_("business id"), max_length=64, db_index=True)
    offer_type = models.CharField(
        _("type"),
        max_length=20,
        choices=OfferType.choices,
        default=OfferType.REWARD,
    )
    title = models.CharField(_("title"), max_length=200)
    description = models.TextField(_("description"), blank=True)

    points_required = models.PositiveIntegerField(_("points required"))
    is_active = models.BooleanField(_("active"), default=True)
    redemption_limit = models.PositiveIntegerField(
        _("redemption limit"),
        null=True,
        blank=True,
        help_text=_("Empty for unlimited"),
    )
    redemption_count = models.PositiveIntegerField(_("redemption count"), default=0)
    per_account_limit = models.PositiveIntegerField(
        _("limit per account"),
        null=True,
        blank=True,
        help_text=_("Redemptions per account, cancelled ones excluded. Empty for unlimited"),
    )

    validity_start = models.DateTimeField(_("valid from"), null=True, blank=True)
    validity_end = models.DateTimeField(_("valid until"), null=True, blank=True)

    # Discount
    discount_percentage = models.DecimalField(
        _("discount %"), max_digits=5, decimal_places=2, null=True, blank=True
    )
    discount_value = models.DecimalField(
        _("discount value"), max_digits=10, decimal_places=2, null=True, blank=True
    )

    # Exclusive
    original_price = models.DecimalField(
        _("original price"), max_digits=10, decimal_places=2, null=True, blank=True
    )
    exclusive_price = models.DecimalField(
        _("exclusive price"), max_digits=10, decimal_places=2, null=True, blank=True
    )

    # Scheduling
    schedule_type = models.CharField(
        _("schedule"),
        max_length=20,
        choices=ScheduleType.choices,
        default=ScheduleType.ALWAYS,
    )
    start_time = models.TimeField(_("daily start"), null=True, blank=True)
    end_time = models.TimeField(_("daily end"), null=True, blank=True)
    active_days = models.JSONField(
        _("active days"),
        default=list,
        blank=True,
        help_text=_("0=Sunday ... 6=Saturday"),
    )

    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "giya_offer"
        verbose_name = _("offer")
        verbose_name_plural = _("offers")
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(points_required__gt=0),
                name="giya_offer_points_required_positive",
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(redemption_limit__isnull=True)
                    | models.Q(redemption_count__lte=models.F("redemption_limit"))
                ),
                name="giya_offer_count_within_limit",
            ),
        ]

    def __str__(self):
        return f"{self.title} ({self.offer_type}, {self.points_required}pts)"

    @property
    def is_exhausted(self) -> bool:
        return (
            self.redemption_limit is not None
            and self.redemption_count >= self.redemption_limit
        )

    @property
    def remaining(self) -> int | None:
        """Units left, or None when unlimited."""
        if self.redemption_limit is None:
            return None
        return max(0, self.redemption_limit - self.redemption_count)

    def is_within_validity(self, now: datetime | None = None) -> bool:
        now = now or timezone.now()
        if self.validity_start and now < self.validity_start:
            return False
        if self.validity_end and now > self.validity_end:
            return False
        return True

    def is_within_schedule(self, now: datetime | None = None) -> bool:
        """Check time-of-day / day-of-week scheduling in the local timezone."""
        if self.schedule_type == ScheduleType.ALWAYS:
            return True

        local = timezone.localtime(now or timezone.now())

        if self.schedule_type in (ScheduleType.DAY, ScheduleType.TIME_AND_DAY):
            # isoweekday(): Monday=1 ... Sunday=7
            weekday = local.isoweekday() % 7
            if weekday not in (self.active_days or []):
                return False

        if self.schedule_type in (ScheduleType.TIME, ScheduleType.TIME_AND_DAY):
            if self.start_time and self.end_time:
                current = local.time()
                if self.start_time <= self.end_time:
                    if not (self.start_time <= current <= self.end_time):
                        return False
                # Window crosses midnight (ex: 22:00-02:00)
                elif self.end_time < current < self.start_time:
                    return False

        return True
