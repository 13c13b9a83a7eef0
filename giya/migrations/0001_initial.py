# Generated migration for the Giya ledger

import uuid

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "account_id",
                    models.CharField(
                        help_text="External identity of the participant",
                        max_length=64,
                        unique=True,
                        verbose_name="account id",
                    ),
                ),
                (
                    "kind",
                    models.CharField(
                        choices=[("customer", "Customer"), ("influencer", "Influencer")],
                        default="customer",
                        max_length=20,
                        verbose_name="kind",
                    ),
                ),
                ("balance", models.BigIntegerField(default=0, verbose_name="balance")),
                ("version", models.PositiveIntegerField(default=0, verbose_name="version")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "account",
                "verbose_name_plural": "accounts",
                "db_table": "giya_account",
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(balance__gte=0),
                        name="giya_account_balance_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AccrualRecord",
            fields=[
                ("record_id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("account_id", models.CharField(db_index=True, max_length=64, verbose_name="account id")),
                ("source_business_id", models.CharField(db_index=True, max_length=64, verbose_name="business id")),
                ("amount_spent", models.DecimalField(decimal_places=2, max_digits=12, verbose_name="amount spent")),
                (
                    "conversion_rate",
                    models.DecimalField(
                        decimal_places=4,
                        help_text="Currency units per point at grant time",
                        max_digits=12,
                        verbose_name="conversion rate",
                    ),
                ),
                ("points_granted", models.PositiveBigIntegerField(verbose_name="points granted")),
                (
                    "external_ref",
                    models.CharField(
                        blank=True,
                        help_text="Idempotency key (ex: receipt:123)",
                        max_length=100,
                        null=True,
                        unique=True,
                        verbose_name="external reference",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "accrual record",
                "verbose_name_plural": "accrual records",
                "db_table": "giya_accrual_record",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["account_id", "-created_at"], name="giya_accrual_account_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Offer",
            fields=[
                ("offer_id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("owning_business_id", models.CharField(db_index=True, max_length=64, verbose_name="business id")),
                (
                    "offer_type",
                    models.CharField(
                        choices=[
                            ("reward", "Reward"),
                            ("discount", "Discount"),
                            ("exclusive", "Exclusive offer"),
                        ],
                        default="reward",
                        max_length=20,
                        verbose_name="type",
                    ),
                ),
                ("title", models.CharField(max_length=200, verbose_name="title")),
                ("description", models.TextField(blank=True, verbose_name="description")),
                ("points_required", models.PositiveIntegerField(verbose_name="points required")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                (
                    "redemption_limit",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Empty for unlimited",
                        null=True,
                        verbose_name="redemption limit",
                    ),
                ),
                ("redemption_count", models.PositiveIntegerField(default=0, verbose_name="redemption count")),
                (
                    "per_account_limit",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Redemptions per account, cancelled ones excluded. Empty for unlimited",
                        null=True,
                        verbose_name="limit per account",
                    ),
                ),
                ("validity_start", models.DateTimeField(blank=True, null=True, verbose_name="valid from")),
                ("validity_end", models.DateTimeField(blank=True, null=True, verbose_name="valid until")),
                (
                    "discount_percentage",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True, verbose_name="discount %"),
                ),
                (
                    "discount_value",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name="discount value"),
                ),
                (
                    "original_price",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name="original price"),
                ),
                (
                    "exclusive_price",
                    models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True, verbose_name="exclusive price"),
                ),
                (
                    "schedule_type",
                    models.CharField(
                        choices=[
                            ("always_available", "Always available"),
                            ("time_based", "Time based"),
                            ("day_based", "Day based"),
                            ("time_and_day", "Time and day"),
                        ],
                        default="always_available",
                        max_length=20,
                        verbose_name="schedule",
                    ),
                ),
                ("start_time", models.TimeField(blank=True, null=True, verbose_name="daily start")),
                ("end_time", models.TimeField(blank=True, null=True, verbose_name="daily end")),
                (
                    "active_days",
                    models.JSONField(blank=True, default=list, help_text="0=Sunday ... 6=Saturday", verbose_name="active days"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "offer",
                "verbose_name_plural": "offers",
                "db_table": "giya_offer",
                "ordering": ["-created_at"],
                "constraints": [
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
                ],
            },
        ),
        migrations.CreateModel(
            name="RedemptionToken",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("token_id", models.CharField(max_length=128, unique=True, verbose_name="token")),
                ("account_id", models.CharField(db_index=True, max_length=64, verbose_name="account id")),
                ("owning_business_id", models.CharField(db_index=True, max_length=64, verbose_name="business id")),
                ("points_debited", models.PositiveBigIntegerField(verbose_name="points debited")),
                (
                    "state",
                    models.CharField(
                        choices=[("issued", "Issued"), ("consumed", "Consumed"), ("cancelled", "Cancelled")],
                        db_index=True,
                        default="issued",
                        max_length=20,
                        verbose_name="state",
                    ),
                ),
                (
                    "issued_at",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name="issued at"),
                ),
                ("expires_at", models.DateTimeField(blank=True, null=True, verbose_name="expires at")),
                ("consumed_at", models.DateTimeField(blank=True, null=True, verbose_name="consumed at")),
                ("consumed_by", models.CharField(blank=True, max_length=64, verbose_name="consumed by")),
                ("cancelled_at", models.DateTimeField(blank=True, null=True, verbose_name="cancelled at")),
                ("cancel_reason", models.CharField(blank=True, max_length=200, verbose_name="cancel reason")),
                (
                    "offer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="redemptions",
                        to="giya.offer",
                        verbose_name="offer",
                    ),
                ),
            ],
            options={
                "verbose_name": "redemption",
                "verbose_name_plural": "redemptions",
                "db_table": "giya_redemption_token",
                "ordering": ["-issued_at"],
                "indexes": [
                    models.Index(fields=["account_id", "-issued_at"], name="giya_token_account_idx"),
                    models.Index(fields=["state", "expires_at"], name="giya_token_state_expiry_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CommissionGrant",
            fields=[
                ("grant_id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("referrer_account_id", models.CharField(db_index=True, max_length=64, verbose_name="referrer")),
                ("commission_rate", models.DecimalField(decimal_places=4, max_digits=5, verbose_name="rate")),
                ("amount", models.PositiveBigIntegerField(verbose_name="amount")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                (
                    "source_record",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="commission",
                        to="giya.accrualrecord",
                        verbose_name="source accrual",
                    ),
                ),
            ],
            options={
                "verbose_name": "commission grant",
                "verbose_name_plural": "commission grants",
                "db_table": "giya_commission_grant",
                "ordering": ["-created_at"],
            },
        ),
    ]
