from dataclasses import dataclass
from typing import Optional

from .schema import CustomerVendorRow, VendorSummaryRow

EXCLUDED = "excluded"
RECOGNIZED = "recognized"
UNKNOWN = "unknown"


def interchange_rate(total_interchange: float, amount_with_interchange: float) -> float:
    """Interchange as a percent of the amount that carried interchange data."""
    if amount_with_interchange > 0:
        return (total_interchange / amount_with_interchange) * 100
    return 0.0


@dataclass(frozen=True)
class VendorVerdict:
    kind: str
    vendor: Optional[str] = None
    pattern: Optional[str] = None

    @property
    def is_excluded(self) -> bool:
        return self.kind == EXCLUDED

    def label(self, unknown_label: str) -> Optional[str]:
        """Vendor name to aggregate under; None for excluded transactions."""
        if self.kind == RECOGNIZED:
            return self.vendor
        if self.kind == UNKNOWN:
            return unknown_label
        return None


@dataclass
class CustomerVendorAggregate:
    customer_id: str
    vendor: str
    total_amount: float = 0.0
    total_interchange: float = 0.0
    transaction_count: int = 0
    interchange_rate: float = 0.0
    transactions_with_interchange: int = 0
    amount_with_interchange: float = 0.0

    def add(self, amount: float, interchange: Optional[float]) -> None:
        """Fold one debit in. interchange is None when the row had no fee data."""
        self.total_amount += amount
        self.transaction_count += 1
        if interchange is not None:
            self.total_interchange += interchange
            self.transactions_with_interchange += 1
            self.amount_with_interchange += amount
        self.interchange_rate = interchange_rate(self.total_interchange, self.amount_with_interchange)

    def to_dict(self) -> CustomerVendorRow:
        return {
            "customer_id": self.customer_id,
            "vendor": self.vendor,
            "total_amount": self.total_amount,
            "total_interchange": self.total_interchange,
            "transaction_count": self.transaction_count,
            "interchange_rate": self.interchange_rate,
            "transactions_with_interchange": self.transactions_with_interchange,
            "amount_with_interchange": self.amount_with_interchange,
        }


@dataclass
class VendorAggregate:
    vendor: str
    transaction_volume: int = 0
    total_amount: float = 0.0
    total_interchange: float = 0.0
    avg_interchange_rate: float = 0.0
    transactions_with_interchange: int = 0
    amount_with_interchange: float = 0.0

    def add(self, amount: float, interchange: Optional[float]) -> None:
        self.transaction_volume += 1
        self.total_amount += amount
        if interchange is not None:
            self.total_interchange += interchange
            self.transactions_with_interchange += 1
            self.amount_with_interchange += amount
        self.avg_interchange_rate = interchange_rate(self.total_interchange, self.amount_with_interchange)

    def to_dict(self) -> VendorSummaryRow:
        return {
            "vendor": self.vendor,
            "transaction_volume": self.transaction_volume,
            "total_amount": self.total_amount,
            "total_interchange": self.total_interchange,
            "avg_interchange_rate": self.avg_interchange_rate,
            "transactions_with_interchange": self.transactions_with_interchange,
            "amount_with_interchange": self.amount_with_interchange,
        }
