"""
Vendor Review Schema - TypedDict shapes passed between pipeline layers.

Input rows stay as raw strings until the classifier parses them, so a blank
interchange cell survives decoding and is never confused with "0".
Output rows carry raw numbers; currency/percent formatting is a load concern.
"""
from typing import TypedDict, Dict, Any, List


class TransactionRecord(TypedDict):
    """One row of the weekly bank export, reduced to the fields that matter."""
    direction: str                # 'Debit' | 'Credit' | anything else
    amount: str                   # Currency string, e.g. "$1,250.00"
    interchange: str              # Currency string or blank (no fee data)
    summary: str                  # Free-text memo used for vendor resolution
    customer_id: str              # Opaque customer key
    raw: Dict[str, Any]           # Original row, passed through untouched


class CustomerVendorRow(TypedDict):
    """Per (customer, vendor) rollup"""
    customer_id: str
    vendor: str
    total_amount: float
    total_interchange: float
    transaction_count: int
    interchange_rate: float       # Percent, e.g. 0.5 == 0.5%
    transactions_with_interchange: int
    amount_with_interchange: float


class VendorSummaryRow(TypedDict):
    """Per vendor rollup across all customers"""
    vendor: str
    transaction_volume: int
    total_amount: float
    total_interchange: float
    avg_interchange_rate: float   # Percent
    transactions_with_interchange: int
    amount_with_interchange: float


class ReviewStats(TypedDict):
    total_transactions: int       # Every input row, unfiltered
    approved_customers: int
    problem_customers: int
    total_vendors: int
    filtered_out_non_remittance: int


class ReviewResult(TypedDict):
    """Output of the classification engine"""
    approved: List[CustomerVendorRow]
    problem: List[CustomerVendorRow]
    vendor_summary: List[VendorSummaryRow]
    vendor_status: Dict[str, str]  # vendor -> 'approved' | 'problem'
    stats: ReviewStats


class ExtractionPayload(TypedDict):
    """Output from Extract layer"""
    document_hash: str            # SHA256 of the uploaded file
    rows: List[Dict[str, Any]]    # One dict per CSV row, keyed by header
    source_file: str
