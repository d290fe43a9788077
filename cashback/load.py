"""
Load Layer - Cashback report export.

Generates:
1. Cashback sheet - One line per period/category with cashback
2. Resumo sheet - Totals by category and grand total
CSV and plain-text renderings carry the same entries.
"""
import pandas as pd
from io import BytesIO
from typing import Union
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from .calculator import format_currency, format_percent
from .config import Config
from .rules import Category, Platform, get_platform_profile
from .schema import BatchReport

CATEGORY_LABELS = {
    Category.WEEKLY.value: "Cassino Ao Vivo (Semanal)",
    Category.DAILY.value: "Slots (Diário)",
    Category.SPORTS.value: "Esportes (Semanal)",
    Category.AVIATOR.value: "Aviator (Diário)",
}


class ReportExporter:
    """
    Exporter for cashback reports.
    Supported: 'xlsx', 'csv', 'txt'
    """

    def __init__(self):
        self.currency_format = '"R$" #,##0.00'
        self.percent_format = '0%'
        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(start_color="2D5016", end_color="2D5016", fill_type="solid")
        self.total_fill = PatternFill(start_color="DCFCE7", end_color="DCFCE7", fill_type="solid")
        self.border = Border(bottom=Side(style='thin', color='DDDDDD'))

    def generate(self, report: BatchReport, platform: Union[str, Platform],
                 target_format: str = "xlsx") -> BytesIO:
        if target_format not in Config.EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {target_format}")
        if target_format == "csv":
            return self._generate_csv(report)
        elif target_format == "txt":
            return self._generate_text(report, platform)
        return self._generate_excel(report, platform)

    def _generate_excel(self, report: BatchReport, platform) -> BytesIO:
        output = BytesIO()
        wb = Workbook()

        # ════════════════════════════════════════════════════════════════
        # SHEET 1: CASHBACK
        # ════════════════════════════════════════════════════════════════
        ws1 = wb.active
        ws1.title = "Cashback"

        headers = ["Data", "Categoria", "Perda", "Cashback", "%"]
        self._write_header(ws1, headers)

        for row_idx, entry in enumerate(report["summary"], 2):
            row_data = [
                entry["date"],
                CATEGORY_LABELS.get(entry["mode"], entry["mode"]),
                entry["loss"],
                entry["cashback"],
                entry["percent"],
            ]
            for col_idx, val in enumerate(row_data, 1):
                cell = ws1.cell(row=row_idx, column=col_idx, value=val)
                if col_idx in [3, 4]:
                    cell.number_format = self.currency_format
                elif col_idx == 5:
                    cell.number_format = self.percent_format
                cell.border = self.border

        self._auto_width(ws1)
        ws1.freeze_panes = "A2"

        # ════════════════════════════════════════════════════════════════
        # SHEET 2: RESUMO
        # ════════════════════════════════════════════════════════════════
        ws2 = wb.create_sheet("Resumo")
        profile = get_platform_profile(platform)

        ws2.cell(row=1, column=1, value=f"RESUMO DE CASHBACK - {profile.name}").font = Font(bold=True, size=14)
        ws2.merge_cells('A1:B1')

        row = 3
        for mode, amount in report["detailsByMode"].items():
            if mode in (Category.SPORTS.value, Category.AVIATOR.value) and not profile.supports(Category(mode)):
                continue
            ws2.cell(row=row, column=1, value=CATEGORY_LABELS.get(mode, mode)).font = Font(bold=True)
            ws2.cell(row=row, column=2, value=amount).number_format = self.currency_format
            row += 1

        ws2.cell(row=row, column=1, value="Total").font = Font(bold=True)
        c = ws2.cell(row=row, column=2, value=report["totalCashback"])
        c.number_format = self.currency_format
        c.fill = self.total_fill
        c.font = Font(bold=True)

        self._auto_width(ws2)

        wb.save(output)
        output.seek(0)
        return output

    def _generate_csv(self, report: BatchReport) -> BytesIO:
        flattened = [{
            "Data": entry["date"],
            "Categoria": entry["mode"],
            "Perda": entry["loss"],
            "Cashback": entry["cashback"],
            "Percentual": entry["percent"],
        } for entry in report["summary"]]

        df = pd.DataFrame(flattened, columns=["Data", "Categoria", "Perda", "Cashback", "Percentual"])
        output = BytesIO()
        df.to_csv(output, index=False)
        output.seek(0)
        return output

    def _generate_text(self, report: BatchReport, platform) -> BytesIO:
        output = BytesIO()
        profile = get_platform_profile(platform)
        lines = [f"RELATÓRIO DE CASHBACK - {profile.name}\n", "=" * 50 + "\n\n"]

        for entry in report["summary"]:
            lines.append(
                f"[{entry['date']}] {entry['mode']:<8} | Perda: {format_currency(entry['loss']):>16} "
                f"| {format_percent(entry['percent']):>4} | Cashback: {format_currency(entry['cashback'])}\n"
            )

        lines.append("\n" + "-" * 50 + "\n")
        lines.append(f"Total: {format_currency(report['totalCashback'])}\n")

        output.write("".join(lines).encode('utf-8'))
        output.seek(0)
        return output

    def _write_header(self, ws, headers) -> None:
        for col_idx, header in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col_idx, value=header)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = Alignment(horizontal='center')

    def _auto_width(self, ws) -> None:
        """Auto-adjust column widths"""
        for col_idx, column in enumerate(ws.columns, 1):
            max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
            ws.column_dimensions[get_column_letter(col_idx)].width = min(max_length + 4, 60)
