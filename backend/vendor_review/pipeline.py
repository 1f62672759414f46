"""
Vendor Review Pipeline Orchestrator - Coordinates Extract, Transform, Classify and Load.

Flow: Extract → Transform → Resolve/Aggregate/Classify → Load → Bundle

The whole export is loaded at once; each run starts from empty state.
"""
import time
import logging
from datetime import date
from typing import Optional
from .extract import ParserFactory
from .transform import RecordMapper
from .aggregate import VendorClassifier
from .load import ReportLoader, zip_file_name


class VendorReviewPipeline:
    """
    Weekly remittance vendor review pipeline.
    """

    def __init__(self, classifier: Optional[VendorClassifier] = None):
        self.mapper = RecordMapper()
        self.classifier = classifier or VendorClassifier()
        self.loader = ReportLoader()

    def process(self, file_path: str, file_type: str, target_format: str = "xlsx", run_date: Optional[date] = None):
        """
        Process an uploaded export through the complete pipeline.
        Yields (percentage, message, result_dict)
        """
        start_time = time.time()

        try:
            # ─── 1. Extract (0-20%) ───
            yield 10, "Reading export...", None
            parser = ParserFactory.get_parser(file_type)
            raw_data = parser.parse(file_path)
            yield 20, f"Read {len(raw_data['rows'])} rows.", None

            # ─── 2. Transform (20-40%) ───
            transactions = self.mapper.map_rows(raw_data["rows"])
            missing = [f for f in ("direction", "amount", "interchange", "summary", "customer_id")
                       if f not in self.mapper.column_map]
            if transactions and missing:
                logging.warning(f"Export is missing columns {missing}; treating them as blank")
            yield 40, "Transformation Complete.", None

            # ─── 3. Classify (40-70%) ───
            yield 45, "Classifying vendors...", None
            result = self.classifier.classify(transactions)
            stats = result["stats"]
            yield 70, f"Found {stats['total_vendors']} vendors.", None

            # ─── 4. Load (70-100%) ───
            yield 80, "Preparing reports...", None
            outputs = self.loader.generate(result, target_format)
            zip_buffer = self.loader.bundle(outputs)
            yield 95, "Finalizing...", None

            processing_time = (time.time() - start_time) * 1000

            yield 100, "Done", {
                "success": True,
                "outputs": outputs,
                "zip_buffer": zip_buffer,
                "zip_file_name": zip_file_name(run_date),
                "stats": stats,
                "vendor_status": result["vendor_status"],
                "document_hash": raw_data["document_hash"],
                "processing_time_ms": processing_time,
            }

        except Exception as e:
            logging.exception("PIPELINE_ERROR")
            yield 0, f"Error: {str(e)}", {
                "success": False,
                "error": str(e),
                "stats": {}
            }

    def run(self, file_path: str, file_type: str, target_format: str = "xlsx", run_date: Optional[date] = None) -> dict:
        """Drain process() and return only the final result."""
        final_result = None
        for p, msg, res in self.process(file_path, file_type, target_format, run_date):
            if res:
                final_result = res
            else:
                logging.debug(f"[{p}%] {msg}")
        return final_result
