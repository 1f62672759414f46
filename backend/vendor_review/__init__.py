"""
Vendor Review Package - Weekly Remittance Vendor Classification

Modules:
- extract: CSV export decoding
- transform: Header mapping and currency parsing
- resolve: Memo-to-vendor rules
- aggregate: Per customer/vendor rollups and approval threshold
- load: Excel/CSV report generation and zip bundling
- pipeline: Main orchestrator
- schema: TypedDict definitions
"""
from .pipeline import VendorReviewPipeline
from .aggregate import VendorClassifier, InputMissingError
from .resolve import VendorResolver
from .schema import TransactionRecord, ReviewResult, ReviewStats

__all__ = [
    'VendorReviewPipeline', 'VendorClassifier', 'InputMissingError', 'VendorResolver',
    'TransactionRecord', 'ReviewResult', 'ReviewStats',
]
