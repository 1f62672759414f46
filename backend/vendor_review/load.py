"""
Load Layer - Vendor review report generation.

Generates three reports from a classification result:
1. Approved vendors - customer rows whose vendor passed the threshold
2. Problem vendors - customer rows whose vendor did not
3. Vendor summary - one row per vendor across all customers

Formatting (currency, percent) happens here only; the engine hands off raw numbers.
"""
import pandas as pd
import zipfile
from collections import OrderedDict
from datetime import date
from io import BytesIO
from typing import Any, Dict, List, Optional, Tuple
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from .schema import ReviewResult


XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MIME = "text/csv"

# (header, row key, kind) where kind is 'text' | 'count' | 'currency' | 'percent'
CUSTOMER_COLUMNS: List[Tuple[str, str, str]] = [
    ("Customer ID", "customer_id", "text"),
    ("Vendor", "vendor", "text"),
    ("Total Amount", "total_amount", "currency"),
    ("Total Interchange", "total_interchange", "currency"),
    ("Transaction Count", "transaction_count", "count"),
    ("Transactions with Interchange", "transactions_with_interchange", "count"),
    ("Interchange Rate %", "interchange_rate", "percent"),
]

SUMMARY_COLUMNS: List[Tuple[str, str, str]] = [
    ("Vendor Name", "vendor", "text"),
    ("Transaction Volume", "transaction_volume", "count"),
    ("Transactions with Interchange", "transactions_with_interchange", "count"),
    ("Total Amount", "total_amount", "currency"),
    ("Total Interchange", "total_interchange", "currency"),
    ("Average Interchange Rate %", "avg_interchange_rate", "percent"),
]

# (file stem, sheet title, result key, columns)
REPORTS = [
    ("approved-vendors-customers", "Approved Vendors", "approved", CUSTOMER_COLUMNS),
    ("problem-vendors-customers", "Problem Vendors", "problem", CUSTOMER_COLUMNS),
    ("vendor-summary", "Vendor Summary", "vendor_summary", SUMMARY_COLUMNS),
]


def zip_file_name(day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"vendor-review-{day.isoformat()}.zip"


def format_currency(value: float) -> str:
    return f"${value:.2f}"


def format_percent(value: float) -> str:
    return f"{value:.3f}%"


class ReportLoader:
    """
    Renders the vendor review reports.
    Supported: 'xlsx', 'csv'
    """

    def __init__(self):
        self.currency_format = '$#,##0.00'
        # Rates are already percents (0.5 means 0.5%), so no Excel % scaling
        self.percent_format = '0.000"%"'
        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(start_color="2D5016", end_color="2D5016", fill_type="solid")
        self.border = Border(bottom=Side(style='thin', color='DDDDDD'))

    def generate(self, result: ReviewResult, target_format: str = "xlsx") -> "OrderedDict[str, BytesIO]":
        """
        Render all three reports.

        Returns:
            file name -> buffer, in report order
        """
        if target_format not in ("xlsx", "csv"):
            raise ValueError(f"Unsupported output format: {target_format}")

        outputs: "OrderedDict[str, BytesIO]" = OrderedDict()
        for stem, title, key, columns in REPORTS:
            rows = result.get(key, [])
            if target_format == "csv":
                outputs[f"{stem}.csv"] = self._generate_csv(rows, columns)
            else:
                outputs[f"{stem}.xlsx"] = self._generate_excel(rows, columns, title)
        return outputs

    def bundle(self, outputs: Dict[str, BytesIO]) -> BytesIO:
        """Zip rendered reports into a single download."""
        archive = BytesIO()
        with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for name, buffer in outputs.items():
                zf.writestr(name, buffer.getvalue())
        archive.seek(0)
        return archive

    def _generate_excel(self, rows: List[Dict[str, Any]], columns: List[Tuple[str, str, str]], title: str) -> BytesIO:
        output = BytesIO()
        wb = Workbook()
        ws = wb.active
        ws.title = title

        for col_idx, (header, _, _) in enumerate(columns, 1):
            cell = ws.cell(row=1, column=col_idx, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = Alignment(horizontal='center')

        for row_idx, row in enumerate(rows, 2):
            for col_idx, (_, key, kind) in enumerate(columns, 1):
                cell = ws.cell(row=row_idx, column=col_idx, value=row.get(key))
                if kind == "text" and isinstance(cell.value, str) and cell.value.startswith("="):
                    # Keep IDs like "=1+1" as literal text, not formulas
                    cell.data_type = "s"
                elif kind == "currency":
                    cell.number_format = self.currency_format
                elif kind == "percent":
                    cell.number_format = self.percent_format
                cell.border = self.border

        self._auto_width(ws)
        ws.freeze_panes = "A2"

        wb.save(output)
        output.seek(0)
        return output

    def _generate_csv(self, rows: List[Dict[str, Any]], columns: List[Tuple[str, str, str]]) -> BytesIO:
        """CSV export with the same string formatting the spreadsheets display"""
        flattened = []
        for row in rows:
            record = {}
            for header, key, kind in columns:
                value = row.get(key)
                if kind == "currency":
                    value = format_currency(value or 0.0)
                elif kind == "percent":
                    value = format_percent(value or 0.0)
                record[header] = value
            flattened.append(record)

        df = pd.DataFrame(flattened, columns=[header for header, _, _ in columns])
        output = BytesIO()
        df.to_csv(output, index=False)
        output.seek(0)
        return output

    def _auto_width(self, ws) -> None:
        """Auto-adjust column widths"""
        for col_idx, column in enumerate(ws.columns, 1):
            max_length = 0
            for cell in column:
                if cell.value is not None:
                    max_length = max(max_length, len(str(cell.value)))
            ws.column_dimensions[get_column_letter(col_idx)].width = min(max_length + 4, 60)
