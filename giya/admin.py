"""Giya admin.

Ledger rows are read-only here: balances, accruals, tokens, and grants
change only through LedgerService.
"""

from django.contrib import admin
from django.utils.html import format_html

from giya.models import Account, AccrualRecord, CommissionGrant, Offer, RedemptionToken


class ReadOnlyLedgerAdmin(admin.ModelAdmin):
    """No add, change, or delete from the admin."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Account)
class AccountAdmin(ReadOnlyLedgerAdmin):
    list_display = ["account_id", "kind", "balance", "version", "updated_at"]
    list_filter = ["kind"]
    search_fields = ["account_id"]


@admin.register(AccrualRecord)
class AccrualRecordAdmin(ReadOnlyLedgerAdmin):
    list_display = [
        "created_at",
        "account_id",
        "source_business_id",
        "amount_spent",
        "points_display",
        "external_ref",
    ]
    search_fields = ["account_id", "source_business_id", "external_ref"]
    date_hierarchy = "created_at"

    def points_display(self, obj):
        if obj.points_granted > 0:
            return format_html('<span style="color:green">+{}</span>', obj.points_granted)
        return obj.points_granted

    points_display.short_description = "Points"


@admin.register(Offer)
class OfferAdmin(admin.ModelAdmin):
    list_display = [
        "title",
        "offer_type",
        "owning_business_id",
        "points_required",
        "usage",
        "is_active",
    ]
    list_filter = ["offer_type", "is_active", "schedule_type"]
    search_fields = ["title", "owning_business_id"]
    readonly_fields = ["redemption_count", "created_at", "updated_at"]

    def usage(self, obj):
        if obj.redemption_limit is None:
            return f"{obj.redemption_count} / ∞"
        return f"{obj.redemption_count} / {obj.redemption_limit}"

    usage.short_description = "Redeemed"


@admin.register(RedemptionToken)
class RedemptionTokenAdmin(ReadOnlyLedgerAdmin):
    list_display = [
        "issued_at",
        "account_id",
        "offer",
        "owning_business_id",
        "points_debited",
        "state_badge",
        "consumed_at",
    ]
    list_filter = ["state"]
    search_fields = ["token_id", "account_id", "owning_business_id"]
    raw_id_fields = ["offer"]
    date_hierarchy = "issued_at"

    def state_badge(self, obj):
        colors = {
            "issued": "#0d6efd",
            "consumed": "#198754",
            "cancelled": "#6c757d",
        }
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:3px; font-size:11px;">{}</span>',
            colors.get(obj.state, "#6c757d"),
            obj.get_state_display(),
        )

    state_badge.short_description = "State"


@admin.register(CommissionGrant)
class CommissionGrantAdmin(ReadOnlyLedgerAdmin):
    list_display = ["created_at", "referrer_account_id", "amount", "commission_rate", "source_record"]
    search_fields = ["referrer_account_id"]
    raw_id_fields = ["source_record"]
