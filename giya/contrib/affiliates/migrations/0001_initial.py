# Generated migration for Giya affiliates

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AffiliateLink",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("referrer_account_id", models.CharField(db_index=True, max_length=64, verbose_name="referrer")),
                ("business_id", models.CharField(db_index=True, max_length=64, verbose_name="business id")),
                ("code", models.CharField(max_length=32, verbose_name="code")),
                (
                    "commission_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=4,
                        help_text="Empty to use GIYA['COMMISSION_RATE']",
                        max_digits=5,
                        null=True,
                        verbose_name="commission rate",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
            ],
            options={
                "verbose_name": "affiliate link",
                "verbose_name_plural": "affiliate links",
                "db_table": "giya_affiliate_link",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("business_id", "code"),
                        name="giya_affiliate_code_per_business",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AffiliateAttribution",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("account_id", models.CharField(max_length=64, verbose_name="account id")),
                ("business_id", models.CharField(max_length=64, verbose_name="business id")),
                ("attributed_at", models.DateTimeField(auto_now_add=True, verbose_name="attributed at")),
                (
                    "link",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="attributions",
                        to="giya_affiliates.affiliatelink",
                        verbose_name="link",
                    ),
                ),
            ],
            options={
                "verbose_name": "affiliate attribution",
                "verbose_name_plural": "affiliate attributions",
                "db_table": "giya_affiliate_attribution",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("account_id", "business_id"),
                        name="giya_affiliate_one_per_customer",
                    ),
                ],
            },
        ),
    ]
