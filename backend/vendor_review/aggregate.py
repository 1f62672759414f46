"""
Vendor Classification Engine - Aggregation and approval threshold.

Pass 1: fold debit transactions into per (customer, vendor) and per vendor totals
Pass 2: classify each vendor as approved or problem from its overall rate
Pass 3: partition customer rows by their vendor's status

Rows without any interchange data carry no rate evidence: they are left out of
the approved/problem reports but still count toward the vendor summary.
"""
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Any

from .config import Config
from .models import CustomerVendorAggregate, VendorAggregate
from .resolve import VendorResolver
from .schema import ReviewResult, ReviewStats
from .transform import is_blank, try_parse_amount


APPROVED = "approved"
PROBLEM = "problem"


class InputMissingError(ValueError):
    """Raised when no transaction collection is supplied."""


class VendorClassifier:
    """
    Deterministic, single-pass vendor aggregation engine.
    Holds configuration only; every classify() call starts from empty state.
    """

    def __init__(self,
                 resolver: Optional[VendorResolver] = None,
                 threshold: Optional[float] = None,
                 always_problem: Optional[Iterable[str]] = None,
                 unknown_vendor: str = Config.UNKNOWN_VENDOR,
                 debit_direction: str = Config.DEBIT_DIRECTION):
        self.resolver = resolver or VendorResolver()
        self.threshold = Config.APPROVAL_THRESHOLD_PCT if threshold is None else threshold
        self.always_problem = list(Config.ALWAYS_PROBLEM_VENDORS if always_problem is None else always_problem)
        self.unknown_vendor = unknown_vendor
        self.debit_direction = debit_direction

    def classify(self, transactions: Optional[List[Mapping[str, Any]]]) -> ReviewResult:
        """
        Aggregate and classify a full batch of transactions.

        Args:
            transactions: TransactionRecord-like mappings

        Returns:
            ReviewResult with approved, problem, vendor_summary, vendor_status, stats

        Raises:
            InputMissingError: transactions is None
        """
        if transactions is None:
            raise InputMissingError("No transactions supplied")

        customer_vendors, vendors, excluded = self._fold(transactions)

        vendor_status = {name: self.classify_vendor(agg) for name, agg in vendors.items()}

        # Only customers with some interchange data can be judged
        with_interchange = [agg for agg in customer_vendors.values() if agg.transactions_with_interchange > 0]
        approved = [agg.to_dict() for agg in with_interchange if vendor_status[agg.vendor] == APPROVED]
        problem = [agg.to_dict() for agg in with_interchange if vendor_status[agg.vendor] == PROBLEM]
        vendor_summary = [agg.to_dict() for agg in vendors.values()]

        stats: ReviewStats = {
            "total_transactions": len(transactions),
            "approved_customers": len(approved),
            "problem_customers": len(problem),
            "total_vendors": len(vendor_summary),
            "filtered_out_non_remittance": excluded,
        }
        logging.info(
            f"Vendor review: {stats['total_vendors']} vendors, "
            f"{len(approved)} approved rows, {len(problem)} problem rows, {excluded} excluded"
        )

        return {
            "approved": approved,
            "problem": problem,
            "vendor_summary": vendor_summary,
            "vendor_status": vendor_status,
            "stats": stats,
        }

    def classify_vendor(self, vendor: VendorAggregate) -> str:
        """Override list first, then strict > threshold."""
        if vendor.vendor in self.always_problem:
            return PROBLEM
        if vendor.avg_interchange_rate > self.threshold:
            return APPROVED
        return PROBLEM

    def _fold(self, transactions: List[Mapping[str, Any]]) -> Tuple[
            Dict[Tuple[str, str], CustomerVendorAggregate], Dict[str, VendorAggregate], int]:
        customer_vendors: Dict[Tuple[str, str], CustomerVendorAggregate] = {}
        vendors: Dict[str, VendorAggregate] = {}
        excluded = 0
        degraded = 0

        for tx in transactions:
            if str(tx.get("direction") or "").strip() != self.debit_direction:
                continue

            verdict = self.resolver.resolve(tx.get("summary"))
            if verdict.is_excluded:
                excluded += 1
                continue
            vendor = verdict.label(self.unknown_vendor)

            raw_amount = tx.get("amount")
            amount = try_parse_amount(raw_amount)
            if amount is None:
                if not is_blank(raw_amount):
                    degraded += 1
                amount = 0.0

            raw_interchange = tx.get("interchange")
            interchange = None
            if not is_blank(raw_interchange):
                interchange = try_parse_amount(raw_interchange)
                if interchange is None:
                    degraded += 1
                    interchange = 0.0

            customer_id = str(tx.get("customer_id") or "")
            key = (customer_id, vendor)
            if key not in customer_vendors:
                customer_vendors[key] = CustomerVendorAggregate(customer_id=customer_id, vendor=vendor)
            customer_vendors[key].add(amount, interchange)

            if vendor not in vendors:
                vendors[vendor] = VendorAggregate(vendor=vendor)
            vendors[vendor].add(amount, interchange)

        if degraded:
            logging.warning(f"{degraded} monetary fields could not be parsed and were counted as 0")

        return customer_vendors, vendors, excluded
