from __future__ import annotations

import pytest

from backend.vendor_review.aggregate import APPROVED, PROBLEM, InputMissingError, VendorClassifier
from backend.vendor_review.models import VendorAggregate


@pytest.fixture
def classifier() -> VendorClassifier:
    return VendorClassifier()


def _summary(result, vendor):
    rows = [r for r in result["vendor_summary"] if r["vendor"] == vendor]
    assert len(rows) == 1
    return rows[0]


def test_single_ria_debit_is_approved(classifier, make_tx):
    result = classifier.classify([make_tx()])

    assert len(result["approved"]) == 1
    row = result["approved"][0]
    assert row["customer_id"] == "C1"
    assert row["vendor"] == "RIA"
    assert row["total_amount"] == pytest.approx(100.0)
    assert row["total_interchange"] == pytest.approx(0.5)
    assert row["interchange_rate"] == pytest.approx(0.5)
    assert result["problem"] == []
    assert result["vendor_status"] == {"RIA": APPROVED}


def test_blank_interchange_row_only_reaches_vendor_summary(classifier, make_tx):
    result = classifier.classify([make_tx(interchange="   ")])

    assert result["approved"] == []
    assert result["problem"] == []
    summary = _summary(result, "RIA")
    assert summary["transaction_volume"] == 1
    assert summary["transactions_with_interchange"] == 0
    assert summary["total_amount"] == pytest.approx(100.0)
    assert summary["avg_interchange_rate"] == 0
    assert result["vendor_status"]["RIA"] == PROBLEM


def test_blank_interchange_is_not_zero_interchange(classifier, make_tx):
    result = classifier.classify([
        make_tx(amount="$100.00", interchange="$1.00"),
        make_tx(amount="$900.00", interchange=""),
    ])
    row = result["approved"][0]
    assert row["transaction_count"] == 2
    assert row["transactions_with_interchange"] == 1
    assert row["total_amount"] == pytest.approx(1000.0)
    assert row["amount_with_interchange"] == pytest.approx(100.0)
    # 1.00 / 100.00, not 1.00 / 1000.00
    assert row["interchange_rate"] == pytest.approx(1.0)

    zero = classifier.classify([make_tx(amount="$100.00", interchange="$0.00")])
    assert zero["problem"][0]["transactions_with_interchange"] == 1
    assert zero["problem"][0]["interchange_rate"] == 0


def test_excluded_memo_only_counts_in_stats(classifier, make_tx):
    result = classifier.classify([make_tx(summary="APPLE COM BILL $9.99", amount="$9.99")])

    assert result["approved"] == []
    assert result["problem"] == []
    assert result["vendor_summary"] == []
    assert result["stats"]["filtered_out_non_remittance"] == 1
    assert result["stats"]["total_transactions"] == 1


def test_unknown_vendor_follows_normal_threshold(classifier, make_tx):
    high = classifier.classify([make_tx(summary="XYZ CORP TRANSFER", interchange="$1.00")])
    assert high["vendor_status"] == {"Unknown Vendor": APPROVED}
    assert high["approved"][0]["vendor"] == "Unknown Vendor"

    low = classifier.classify([make_tx(summary="XYZ CORP TRANSFER", interchange="$0.10")])
    assert low["vendor_status"] == {"Unknown Vendor": PROBLEM}


def test_non_debit_rows_do_not_change_output(classifier, make_tx):
    debits = [make_tx(), make_tx(customer_id="C2", summary="XOOM", interchange="$2.00")]
    noise = [
        make_tx(direction="Credit"),
        make_tx(direction="debit"),
        make_tx(direction="", summary="APPLE COM BILL"),
    ]
    base = classifier.classify(debits)
    mixed = classifier.classify(debits[:1] + noise + debits[1:])

    for key in ("approved", "problem", "vendor_summary", "vendor_status"):
        assert mixed[key] == base[key]
    assert mixed["stats"]["filtered_out_non_remittance"] == 0
    assert mixed["stats"]["total_transactions"] == 5


def test_threshold_boundary():
    classifier = VendorClassifier(always_problem=[])
    at = VendorAggregate(vendor="RIA", avg_interchange_rate=0.3)
    above = VendorAggregate(vendor="RIA", avg_interchange_rate=0.30001)
    assert classifier.classify_vendor(at) == PROBLEM
    assert classifier.classify_vendor(above) == APPROVED


def test_always_problem_vendor_ignores_rate(classifier, make_tx):
    result = classifier.classify([make_tx(summary="WorldRemit Ltd", interchange="$5.00")])
    assert _summary(result, "WorldRemit")["avg_interchange_rate"] == pytest.approx(5.0)
    assert result["vendor_status"]["WorldRemit"] == PROBLEM
    assert [r["vendor"] for r in result["problem"]] == ["WorldRemit"]


def test_vendor_status_is_shared_by_all_customers(classifier, make_tx):
    result = classifier.classify([
        make_tx(customer_id="C1", amount="$100.00", interchange="$0.10"),
        make_tx(customer_id="C2", amount="$100.00", interchange="$1.00"),
    ])
    # Vendor-wide rate is 0.55%, so C1 is approved despite its own 0.1%
    assert result["vendor_status"]["RIA"] == APPROVED
    assert [r["customer_id"] for r in result["approved"]] == ["C1", "C2"]
    assert result["approved"][0]["interchange_rate"] == pytest.approx(0.1)


def test_totals_are_additive_per_customer_vendor(classifier, make_tx):
    txs = [
        make_tx(customer_id="C1", amount="$10.25"),
        make_tx(customer_id="C2", amount="$3.00"),
        make_tx(customer_id="C1", amount="$1,000.50"),
        make_tx(customer_id="C1", summary="VIAMERICAS", amount="$7.00"),
        make_tx(customer_id="C1", amount="$2.00", direction="Credit"),
    ]
    result = classifier.classify(txs)
    rows = {(r["customer_id"], r["vendor"]): r for r in result["approved"] + result["problem"]}

    assert rows[("C1", "RIA")]["total_amount"] == pytest.approx(10.25 + 1000.50)
    assert rows[("C1", "RIA")]["transaction_count"] == 2
    assert rows[("C2", "RIA")]["total_amount"] == pytest.approx(3.00)
    assert rows[("C1", "Viamericas")]["total_amount"] == pytest.approx(7.00)
    assert _summary(result, "RIA")["total_amount"] == pytest.approx(10.25 + 1000.50 + 3.00)
    assert _summary(result, "RIA")["transaction_volume"] == 3


def test_rate_matches_reference_formula(classifier, make_tx):
    result = classifier.classify([
        make_tx(amount="$250.00", interchange="$1.10"),
        make_tx(amount="$80.00", interchange="$0.35"),
        make_tx(amount="$500.00", interchange=""),
    ])
    row = result["approved"][0]
    expected = (1.10 + 0.35) / (250.00 + 80.00) * 100
    assert row["interchange_rate"] == pytest.approx(expected)
    assert _summary(result, "RIA")["avg_interchange_rate"] == pytest.approx(expected)


def test_unparseable_amounts_degrade_to_zero(classifier, make_tx, caplog):
    with caplog.at_level("WARNING"):
        result = classifier.classify([
            make_tx(amount="N/A", interchange="$0.50"),
            make_tx(amount="12.50 USD", interchange="oops"),
        ])
    summary = _summary(result, "RIA")
    assert summary["total_amount"] == pytest.approx(12.5)
    assert summary["transactions_with_interchange"] == 2
    assert summary["total_interchange"] == pytest.approx(0.5)
    assert "could not be parsed" in caplog.text


def test_classify_is_idempotent(classifier, make_tx):
    txs = [make_tx(), make_tx(summary="XOOM"), make_tx(summary="XYZ", customer_id="C9", interchange="")]
    assert classifier.classify(txs) == classifier.classify(txs)


def test_stats(classifier, make_tx):
    result = classifier.classify([
        make_tx(),
        make_tx(summary="Remitly", interchange="$3.00"),
        make_tx(summary="Chime transfer"),
        make_tx(summary="XYZ", interchange=""),
        make_tx(direction="Credit"),
    ])
    assert result["stats"] == {
        "total_transactions": 5,
        "approved_customers": 1,
        "problem_customers": 1,
        "total_vendors": 3,
        "filtered_out_non_remittance": 1,
    }


def test_missing_input_raises(classifier):
    with pytest.raises(InputMissingError):
        classifier.classify(None)


def test_empty_input_yields_empty_tables(classifier):
    result = classifier.classify([])
    assert result["approved"] == [] and result["problem"] == [] and result["vendor_summary"] == []
    assert result["stats"]["total_transactions"] == 0


def test_threshold_is_configurable(make_tx):
    strict = VendorClassifier(threshold=1.0)
    assert strict.classify([make_tx()])["vendor_status"]["RIA"] == PROBLEM


def test_padded_debit_direction_still_counts(classifier, make_tx):
    result = classifier.classify([make_tx(direction=" Debit ")])
    assert result["vendor_status"] == {"RIA": APPROVED}
    assert len(result["approved"]) == 1
