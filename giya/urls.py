from django.urls import path

from .views import (
    AccountView,
    AccrualView,
    CancelRedemptionView,
    RedemptionView,
    ValidateRedemptionView,
)

app_name = "giya"

urlpatterns = [
    path("accruals/", AccrualView.as_view(), name="accrual"),
    path("redemptions/", RedemptionView.as_view(), name="redemption"),
    path("redemptions/validate/", ValidateRedemptionView.as_view(), name="redemption-validate"),
    path("redemptions/cancel/", CancelRedemptionView.as_view(), name="redemption-cancel"),
    path("accounts/<str:account_id>/", AccountView.as_view(), name="account"),
]
