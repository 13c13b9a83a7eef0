"""
Giya - Points ledger and redemption lifecycle.

Usage:
    from giya import LedgerService, GiyaError

    record = LedgerService.accrue("CUST-001", "BIZ-001", "250.00", external_ref="receipt:42")
    token = LedgerService.issue_redemption("CUST-001", offer.pk)
    LedgerService.validate_redemption(token.token_id, "BIZ-001")
"""


def __getattr__(name):
    if name == "LedgerService":
        from giya.service import LedgerService

        return LedgerService
    if name == "GiyaError":
        from giya.exceptions import GiyaError

        return GiyaError
    if name == "Gates":
        from giya.gates import Gates

        return Gates
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["LedgerService", "GiyaError", "Gates"]
__version__ = "0.1.0"
