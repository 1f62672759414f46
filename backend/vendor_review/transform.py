"""
Transform Layer - Header mapping and monetary parsing.

This module implements:
1. Header detection for export column mapping (tolerant of case/separators)
2. Row normalization into TransactionRecord (missing columns -> "")
3. Currency string parsing ("$1,250.00" -> 1250.0)
"""
import re
from typing import Any, Dict, List, Optional

from .schema import TransactionRecord


# Canonical field -> accepted header spellings, compared after normalization
HEADER_ALIASES = {
    "direction": ["direction", "debitcredit", "drcr"],
    "amount": ["amount", "transactionamount"],
    "interchange": ["interchange", "interchangefee"],
    "summary": ["summary", "memo", "description"],
    "customer_id": ["customerid", "customer", "custid"],
}

_NUMBER_PREFIX = re.compile(r'^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')


def normalize_header(header: Any) -> str:
    return re.sub(r'[^a-z0-9]', '', str(header).lower())


def is_blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""


def try_parse_amount(value: Any) -> Optional[float]:
    """
    Parse a currency string. Strips '$' and ',' then reads the leading number,
    so "12.50 USD" is 12.5. Returns None when no number can be read.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value) if value == value else None
    match = _NUMBER_PREFIX.match(str(value).replace('$', '').replace(',', ''))
    if not match:
        return None
    return float(match.group(0))


class RecordMapper:
    """
    Maps raw export rows (keyed by CSV header) into TransactionRecord dicts.
    """

    def __init__(self, aliases: Optional[Dict[str, List[str]]] = None):
        self.aliases = aliases or HEADER_ALIASES
        self.column_map: Dict[str, str] = {}

    def build_column_map(self, headers: List[Any]) -> Dict[str, str]:
        """Canonical field -> actual header. First matching header wins."""
        self.column_map = {}
        for header in headers:
            key = normalize_header(header)
            for field, spellings in self.aliases.items():
                if field not in self.column_map and key in spellings:
                    self.column_map[field] = header
        return self.column_map

    def map_rows(self, rows: List[Dict[str, Any]]) -> List[TransactionRecord]:
        if not rows:
            return []
        self.build_column_map(list(rows[0].keys()))
        return [self.map_row(row) for row in rows]

    def map_row(self, row: Dict[str, Any]) -> TransactionRecord:
        return {
            "direction": self._get(row, "direction").strip(),
            "amount": self._get(row, "amount"),
            "interchange": self._get(row, "interchange"),
            "summary": self._get(row, "summary"),
            "customer_id": self._get(row, "customer_id"),
            "raw": row,
        }

    def _get(self, row: Dict[str, Any], field: str) -> str:
        header = self.column_map.get(field)
        if header is None:
            return ""
        value = row.get(header)
        return "" if value is None else str(value)
