"""
Giya JSON endpoints.

Callers are already authenticated upstream; account_id and business_id in
the request body are trusted as-is.

Flow (every POST):
    1. Parse JSON body
    2. Call LedgerService
    3. Map GiyaError.code to an HTTP status
"""

from __future__ import annotations

import json
import logging

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from giya.exceptions import GiyaError
from giya.service import LedgerService

logger = logging.getLogger("giya.api")

ERROR_STATUS = {
    "INVALID_AMOUNT": 400,
    "INVALID_CONVERSION_RATE": 400,
    "INVALID_EXTERNAL_REF": 400,
    "INVALID_COMMISSION_RATE": 400,
    "SELF_REFERRAL": 400,
    "INSUFFICIENT_BALANCE": 409,
    "OFFER_NOT_FOUND": 404,
    "OFFER_INACTIVE": 409,
    "OFFER_EXPIRED": 409,
    "OFFER_NOT_AVAILABLE_NOW": 409,
    "OFFER_EXHAUSTED": 409,
    "OFFER_ACCOUNT_LIMIT_REACHED": 409,
    "TOKEN_NOT_FOUND": 404,
    "TOKEN_BUSINESS_MISMATCH": 403,
    "TOKEN_ACCOUNT_MISMATCH": 403,
    "TOKEN_ALREADY_CONSUMED": 409,
    "TOKEN_EXPIRED": 410,
    "DUPLICATE_RECORD": 409,
    "BUSINESS_NOT_FOUND": 404,
    "BUSINESS_INACTIVE": 409,
    "TRANSACTION_CONFLICT": 503,
    "STORE_UNAVAILABLE": 503,
}


def error_response(exc: GiyaError) -> JsonResponse:
    return JsonResponse({"error": exc.as_dict()}, status=ERROR_STATUS.get(exc.code, 400))


def token_payload(token) -> dict:
    return {
        "token_id": token.token_id,
        "account_id": token.account_id,
        "offer_id": str(token.offer_id),
        "business_id": token.owning_business_id,
        "points_debited": token.points_debited,
        "state": token.state,
        "issued_at": token.issued_at.isoformat(),
        "expires_at": token.expires_at.isoformat() if token.expires_at else None,
        "consumed_at": token.consumed_at.isoformat() if token.consumed_at else None,
    }


@method_decorator(csrf_exempt, name="dispatch")
class LedgerView(View):
    """Base POST view: JSON in, JSON out, GiyaError mapped to status."""

    required_fields: tuple[str, ...] = ()
    # Identifiers and free text; anything but a JSON string is rejected
    string_fields: tuple[str, ...] = ()

    def post(self, request):
        try:
            data = json.loads(request.body)
        except (json.JSONDecodeError, ValueError):
            return JsonResponse({"error": {"code": "INVALID_JSON"}}, status=400)
        if not isinstance(data, dict):
            return JsonResponse({"error": {"code": "INVALID_JSON"}}, status=400)

        missing = [f for f in self.required_fields if data.get(f) in (None, "")]
        if missing:
            return JsonResponse(
                {"error": {"code": "MISSING_FIELDS", "data": {"fields": missing}}},
                status=400,
            )

        invalid = [
            f for f in self.string_fields
            if data.get(f) is not None and not isinstance(data[f], str)
        ]
        if invalid:
            return JsonResponse(
                {"error": {"code": "INVALID_FIELDS", "data": {"fields": invalid}}},
                status=400,
            )

        try:
            payload, status = self.handle(data)
        except GiyaError as exc:
            if exc.transient:
                logger.warning("Ledger API: transient failure %s", exc.code)
            return error_response(exc)

        return JsonResponse(payload, status=status)

    def handle(self, data: dict) -> tuple[dict, int]:
        raise NotImplementedError


class AccrualView(LedgerView):
    """POST {account_id, business_id, amount_spent, external_ref?}"""

    required_fields = ("account_id", "business_id", "amount_spent")
    string_fields = ("account_id", "business_id", "external_ref")

    def handle(self, data):
        result = LedgerService.process_receipt(
            data["account_id"],
            data["business_id"],
            data["amount_spent"],
            external_ref=data.get("external_ref"),
        )
        return {
            "record_id": str(result.record.pk),
            "points_granted": result.points_granted,
            "balance": LedgerService.get_balance(data["account_id"]),
            "commission": result.commission.amount if result.commission else None,
        }, 201


class RedemptionView(LedgerView):
    """POST {account_id, offer_id}"""

    required_fields = ("account_id", "offer_id")
    string_fields = ("account_id", "offer_id")

    def handle(self, data):
        token = LedgerService.issue_redemption(data["account_id"], data["offer_id"])
        payload = token_payload(token)
        payload["balance"] = LedgerService.get_balance(data["account_id"])
        return payload, 201


class ValidateRedemptionView(LedgerView):
    """POST {token_id, business_id, validated_by?}"""

    required_fields = ("token_id", "business_id")
    string_fields = ("token_id", "business_id", "validated_by")

    def handle(self, data):
        token = LedgerService.validate_redemption(
            data["token_id"],
            data["business_id"],
            validated_by=data.get("validated_by", ""),
        )
        return token_payload(token), 200


class CancelRedemptionView(LedgerView):
    """POST {token_id, account_id, reason?}"""

    required_fields = ("token_id", "account_id")
    string_fields = ("token_id", "account_id", "reason")

    def handle(self, data):
        token = LedgerService.cancel_redemption(
            data["token_id"],
            reason=data.get("reason", ""),
            account_id=data["account_id"],
        )
        payload = token_payload(token)
        payload["balance"] = LedgerService.get_balance(data["account_id"])
        return payload, 200


class AccountView(View):
    """GET balance breakdown for one account."""

    def get(self, request, account_id):
        s = LedgerService.get_summary(account_id)
        return JsonResponse(
            {
                "account_id": s.account_id,
                "balance": s.balance,
                "total_earned": s.total_earned,
                "total_commission": s.total_commission,
                "total_redeemed": s.total_redeemed,
                "total_refunded": s.total_refunded,
            }
        )
