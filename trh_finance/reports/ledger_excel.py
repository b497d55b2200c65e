"""
Ledger Excel Export Module

Generates a formatted monthly ledger workbook.
"""

import logging
from datetime import datetime
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from ..config import FinanceConfig
from ..workflow.ledger import LedgerSummary, summarize
from ..workflow.models import Transaction, TransactionType

logger = logging.getLogger(__name__)

HEADERS = ["Date", "Type", "Category", "Description", "Recorded By", "Amount"]
COLUMN_WIDTHS = {"A": 12, "B": 10, "C": 24, "D": 45, "E": 18, "F": 16}


class LedgerExcelGenerator:
    """Builds the monthly ledger workbook."""

    def __init__(self, config_dir: Path | str | None = None):
        """Initialize the generator.

        Args:
            config_dir: Path to configuration directory
        """
        self.config = FinanceConfig(config_dir)
        self._setup_styles()

    def _setup_styles(self) -> None:
        self.title_font = Font(name="Arial", size=14, bold=True)
        self.header_font = Font(name="Arial", size=10, bold=True, color="FFFFFF")
        self.header_fill = PatternFill(start_color="1E293B", end_color="1E293B", fill_type="solid")
        self.total_font = Font(name="Arial", size=10, bold=True)
        self.total_fill = PatternFill(start_color="E2E8F0", end_color="E2E8F0", fill_type="solid")
        self.normal_font = Font(name="Arial", size=10)
        self.income_font = Font(name="Arial", size=10, color="047857")
        self.expense_font = Font(name="Arial", size=10, color="BE123C")

        thin = Side(style="thin", color="000000")
        self.border = Border(left=thin, right=thin, top=thin, bottom=thin)
        self.center_align = Alignment(horizontal="center", vertical="center")
        self.right_align = Alignment(horizontal="right", vertical="center")

        self.currency_format = f'"{self.config.currency_symbol}"#,##0.00'

    def generate(
        self,
        month: str,
        transactions: list[Transaction],
        output_path: Path | str | None = None,
    ) -> Path:
        """Write the ledger for one month.

        Args:
            month: YYYY-MM period shown in the title
            transactions: Entries for the month
            output_path: Output file path (generated if None)

        Returns:
            Path to generated file
        """
        wb = Workbook()
        ws = wb.active
        ws.title = "Ledger"

        for col_letter, width in COLUMN_WIDTHS.items():
            ws.column_dimensions[col_letter].width = width

        row = self._write_title(ws, 1, month)
        row = self._write_entries(ws, row + 1, transactions)
        self._write_summary(ws, row + 1, summarize(transactions, period=month))

        if output_path is None:
            output_path = self.config.report_output_dir / f"Ledger_{month}.xlsx"
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        wb.save(output_path)
        logger.info(f"Generated ledger Excel: {output_path}")
        return output_path

    def _write_title(self, ws: Worksheet, row: int, month: str) -> int:
        period_label = datetime.strptime(month, "%Y-%m").strftime("%B %Y")
        ws.merge_cells(f"A{row}:F{row}")
        cell = ws[f"A{row}"]
        cell.value = f"{self.config.app_name} Ledger - {period_label}"
        cell.font = self.title_font
        cell.alignment = self.center_align
        return row + 1

    def _write_entries(self, ws: Worksheet, row: int, transactions: list[Transaction]) -> int:
        for col, header in enumerate(HEADERS, start=1):
            cell = ws.cell(row=row, column=col, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.border = self.border
            cell.alignment = self.center_align
        row += 1

        for txn in transactions:
            values = [
                txn.date,
                txn.type.value,
                txn.category,
                txn.description,
                txn.recorded_by,
                float(txn.signed_amount),
            ]
            for col, value in enumerate(values, start=1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.border = self.border
                cell.font = self.normal_font
            ws.cell(row=row, column=1).number_format = "yyyy-mm-dd"

            amount_cell = ws.cell(row=row, column=6)
            amount_cell.number_format = self.currency_format
            amount_cell.alignment = self.right_align
            amount_cell.font = (
                self.income_font if txn.type is TransactionType.INCOME else self.expense_font
            )
            row += 1

        if not transactions:
            ws.merge_cells(f"A{row}:F{row}")
            cell = ws[f"A{row}"]
            cell.value = "No transactions recorded for this period"
            cell.font = self.normal_font
            cell.alignment = self.center_align
            row += 1

        return row

    def _write_summary(self, ws: Worksheet, row: int, summary: LedgerSummary) -> int:
        for label, amount in (
            ("Total Income", summary.total_income),
            ("Total Expenses", summary.total_expense),
            ("Net", summary.net),
        ):
            ws.merge_cells(f"A{row}:E{row}")
            label_cell = ws[f"A{row}"]
            label_cell.value = label
            label_cell.font = self.total_font
            label_cell.fill = self.total_fill
            label_cell.border = self.border

            amount_cell = ws.cell(row=row, column=6, value=float(amount))
            amount_cell.font = self.total_font
            amount_cell.fill = self.total_fill
            amount_cell.border = self.border
            amount_cell.number_format = self.currency_format
            amount_cell.alignment = self.right_align
            row += 1
        return row
