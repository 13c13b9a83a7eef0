"""Affiliates admin."""

from django.contrib import admin

from giya.contrib.affiliates.models import AffiliateAttribution, AffiliateLink


class AffiliateAttributionInline(admin.TabularInline):
    model = AffiliateAttribution
    extra = 0
    readonly_fields = ["account_id", "business_id", "attributed_at"]

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(AffiliateLink)
class AffiliateLinkAdmin(admin.ModelAdmin):
    list_display = ["code", "referrer_account_id", "business_id", "commission_rate", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["code", "referrer_account_id", "business_id"]
    readonly_fields = ["code", "created_at"]
    inlines = [AffiliateAttributionInline]
