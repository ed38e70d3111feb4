"""Purchasing-side callers of the ledger's posting contract."""

from ledger_core.purchasing.cogs_posting import CogsPostingRequest, CogsPostingService
from ledger_core.purchasing.errors import PurchasingPostingError
from ledger_core.purchasing.vendor_bill_posting import (
    VendorBill,
    VendorBillLine,
    VendorBillPostingService,
)

__all__ = [
    "CogsPostingRequest",
    "CogsPostingService",
    "PurchasingPostingError",
    "VendorBill",
    "VendorBillLine",
    "VendorBillPostingService",
]
