"""Shared fixtures for the vendor review tests.

``make_tx`` builds TransactionRecord dicts with debit defaults so each test
only spells out the fields it cares about. ``export_csv`` writes a small
weekly export in the bank's column layout.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

# app.py configures file logging at import time
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "vendor_review_tests.log"))


EXPORT_HEADER = (
    "createdAt,id,type,amount,direction,balance,interchange,summary,customerId,"
    "accountId,counterpartyName,counterpartyCustomer,counterpartyAccount,imad,omad,"
    "paymentId,recurringPaymentId,grossInterchange,institutionId"
)

EXPORT_ROWS = [
    '2026-01-05,t1,card,$100.00,Debit,$900.00,$0.50,RIA Financial Services payment,C1,A1,,,,,,,,,',
    '2026-01-05,t2,card,$40.00,Debit,$860.00,,RMTLY* REMITLY,C1,A1,,,,,,,,,',
    '2026-01-06,t3,card,$9.99,Debit,$850.01,$0.20,APPLE COM BILL $9.99,C2,A2,,,,,,,,,',
    '2026-01-06,t4,card,"$1,200.00",Debit,$0.00,$2.00,XYZ CORP TRANSFER,C2,A2,,,,,,,,,',
    '2026-01-07,t5,ach,$500.00,Credit,$500.00,,PAYROLL,C2,A2,,,,,,,,,',
]


@pytest.fixture
def make_tx():
    def _make(summary="RIA Financial Services payment", amount="$100.00", interchange="$0.50",
              customer_id="C1", direction="Debit"):
        return {
            "direction": direction,
            "amount": amount,
            "interchange": interchange,
            "summary": summary,
            "customer_id": customer_id,
            "raw": {},
        }
    return _make


@pytest.fixture
def export_csv(tmp_path: Path) -> Path:
    path = tmp_path / "weekly_export.csv"
    path.write_text("\n".join([EXPORT_HEADER, *EXPORT_ROWS]) + "\n")
    return path
