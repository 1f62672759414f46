"""Determinism check for the vendor review pipeline"""
from backend.vendor_review.pipeline import VendorReviewPipeline
import os

# Sample export in the bank's weekly format
CSV_CONTENT = """createdAt,id,type,amount,direction,balance,interchange,summary,customerId
2026-01-05,t1,card,$100.00,Debit,$900.00,$0.50,RIA Financial Services payment,C1
2026-01-05,t2,card,$40.00,Debit,$860.00,,RMTLY* REMITLY,C1
2026-01-06,t3,card,$9.99,Debit,$850.01,$0.20,APPLE COM BILL,C2
2026-01-06,t4,card,"$1,200.00",Debit,$0.00,$2.00,XYZ CORP TRANSFER,C2
2026-01-07,t5,ach,$500.00,Credit,$500.00,,PAYROLL,C2"""

def test_determinism():
    test_file = "determinism_test.csv"
    with open(test_file, "w") as f:
        f.write(CSV_CONTENT)

    pipeline = VendorReviewPipeline()

    res1 = pipeline.run(test_file, "csv", "csv")
    res2 = pipeline.run(test_file, "csv", "csv")

    s1 = res1["stats"]
    s2 = res2["stats"]

    print("=== DETERMINISM RESULTS ===")
    print(f"Stats Match: {s1 == s2} ({s1})")
    print(f"Vendor Status Match: {res1['vendor_status'] == res2['vendor_status']}")
    same_reports = all(
        res1["outputs"][name].getvalue() == res2["outputs"][name].getvalue()
        for name in res1["outputs"]
    )
    print(f"Report Bytes Match: {same_reports}")
    print(f"Hash Match: {res1['document_hash'] == res2['document_hash']}")

    if s1["total_vendors"] == 3 and s1["filtered_out_non_remittance"] == 1:
        print("\n✅ Logic Verified: 3 vendors (RIA, Remitly, Unknown Vendor), 1 excluded.")
    else:
        print("\n❌ Logic Error: Expected 3 vendors and 1 excluded transaction.")

    os.remove(test_file)

if __name__ == "__main__":
    test_determinism()
