"""Giya exceptions."""


class GiyaError(Exception):
    """
    Structured exception for ledger operations.

    Every failure carries a stable machine-readable code so the UI layer
    can render its own message. Extra keyword arguments land in ``data``.

    Usage:
        try:
            LedgerService.issue_redemption("cust-1", offer_id)
        except GiyaError as e:
            if e.code == "INSUFFICIENT_BALANCE":
                show_not_enough_points(e.data["available"])
    """

    _default_messages = {
        "INVALID_AMOUNT": "Amount spent cannot be negative",
        "INVALID_CONVERSION_RATE": "Conversion rate must be positive",
        "INVALID_EXTERNAL_REF": "External reference is too long",
        "INSUFFICIENT_BALANCE": "Not enough points",
        "OFFER_NOT_FOUND": "Offer not found",
        "OFFER_INACTIVE": "Offer is not active",
        "OFFER_EXPIRED": "Offer is outside its validity window",
        "OFFER_NOT_AVAILABLE_NOW": "Offer is not available at this time",
        "OFFER_EXHAUSTED": "Offer is no longer available",
        "OFFER_ACCOUNT_LIMIT_REACHED": "Offer already redeemed by this account",
        "TOKEN_NOT_FOUND": "Redemption code not found",
        "TOKEN_BUSINESS_MISMATCH": "This redemption is not for your business",
        "TOKEN_ACCOUNT_MISMATCH": "This redemption belongs to another account",
        "TOKEN_ALREADY_CONSUMED": "This code was already used",
        "TOKEN_EXPIRED": "This redemption code has expired",
        "DUPLICATE_RECORD": "Record already exists",
        "TRANSACTION_CONFLICT": "Concurrent update conflict, please retry",
        "STORE_UNAVAILABLE": "Ledger store unavailable, please retry",
        "BUSINESS_NOT_FOUND": "Business not found",
        "BUSINESS_INACTIVE": "Business is not active",
        "INVALID_COMMISSION_RATE": "Commission rate must be between 0 and 1",
        "SELF_REFERRAL": "An account cannot refer itself",
        "AFFILIATE_LINK_NOT_FOUND": "Affiliate link not found",
        "AFFILIATE_CODE_UNAVAILABLE": "Could not generate a unique affiliate code",
    }

    _transient_codes = frozenset({"TRANSACTION_CONFLICT", "STORE_UNAVAILABLE"})

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    @property
    def transient(self) -> bool:
        """Whether retrying the whole operation may succeed."""
        return self.code in self._transient_codes

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}
