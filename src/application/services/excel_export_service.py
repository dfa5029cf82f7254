# src/application/services/excel_export_service.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

import pandas as pd
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from openpyxl.utils import get_column_letter

from src.application.services.statistics_service import StatisticsService
from src.domain.amount_helper import ZERO, truncate_or_zero
from src.domain.date_range import DateInput
from src.domain.models.daily_statistics import DailyStatistics

logger = logging.getLogger(__name__)

SHEET_NAME = "Günlük İstatistik"
TOTAL_LABEL = "TOPLAM"

COLUMNS = [
    "Tarih",
    "Toplam Ciro",
    "Toplam Net Gelir",
    "Giriş Yapılan Araç",
    "Ortalama Ciro",
    "Ortalama Net Gelir",
]
AMOUNT_COLUMNS = {"Toplam Ciro", "Toplam Net Gelir", "Ortalama Ciro", "Ortalama Net Gelir"}


class ExcelExportService:
    """
    Tarih aralığındaki günlük istatistikleri .xlsx dosyasına aktarır.
    Dosya varsa üzerine yazılır.
    """

    def __init__(self, statistics_service: StatisticsService) -> None:
        self._statistics_service = statistics_service

    def export_daily_statistics(
        self,
        start_date: DateInput,
        end_date: DateInput,
        file_path: Union[str, Path],
    ) -> Path:
        file_path = Path(file_path)

        rows = self._statistics_service.get_by_date_range(start_date, end_date)
        df = self._build_statistics_df(rows)

        self._write_excel(file_path, df)
        logger.info("Exported %d daily statistics row(s) to %s", len(rows), file_path)
        return file_path

    def _build_statistics_df(self, rows: List[DailyStatistics]) -> pd.DataFrame:
        # Excel'de eski tarih üstte olsun
        ordered = sorted(rows, key=lambda r: r.stat_date)

        records = [
            {
                "Tarih": r.stat_date,
                "Toplam Ciro": float(r.total_revenue),
                "Toplam Net Gelir": float(r.total_net_income),
                "Giriş Yapılan Araç": r.vehicle_count,
                "Ortalama Ciro": float(r.average_revenue),
                "Ortalama Net Gelir": float(r.average_net_income),
            }
            for r in ordered
        ]

        if records:
            records.append({
                "Tarih": TOTAL_LABEL,
                "Toplam Ciro": float(truncate_or_zero(sum((r.total_revenue for r in ordered), ZERO))),
                "Toplam Net Gelir": float(truncate_or_zero(sum((r.total_net_income for r in ordered), ZERO))),
                "Giriş Yapılan Araç": sum(r.vehicle_count for r in ordered),
                "Ortalama Ciro": None,
                "Ortalama Net Gelir": None,
            })

        return pd.DataFrame.from_records(records, columns=COLUMNS)

    def _write_excel(self, file_path: Path, df: pd.DataFrame) -> None:
        try:
            with pd.ExcelWriter(file_path, engine="openpyxl") as writer:
                df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
                self._apply_formatting(writer, SHEET_NAME, df)
        except PermissionError as e:
            raise PermissionError(f"Dosyaya yazılamadı: {file_path}\nDosya açık olabilir. Lütfen kapatıp tekrar deneyin.") from e

    def _apply_formatting(self, writer, sheet_name: str, df: pd.DataFrame) -> None:
        if df.empty:
            return

        worksheet = writer.sheets[sheet_name]

        # 1. BAŞLIK SATIRI
        header_fill = PatternFill(start_color="1F4E78", end_color="1F4E78", fill_type="solid")
        header_font = Font(bold=True, color="FFFFFF", size=11)
        thin_border = Border(
            left=Side(style='thin'), right=Side(style='thin'),
            top=Side(style='thin'), bottom=Side(style='thin')
        )

        for col_num in range(1, len(df.columns) + 1):
            cell = worksheet.cell(row=1, column=col_num)
            cell.fill = header_fill
            cell.font = header_font
            cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)
            cell.border = thin_border

        # 2. SATIRLAR + FORMATLAR
        light_gray = PatternFill(start_color="F2F2F2", end_color="F2F2F2", fill_type="solid")
        red_font = Font(color="9C0006", bold=True)

        for row_num in range(2, len(df) + 2):
            for col_num, col_name in enumerate(df.columns, 1):
                cell = worksheet.cell(row=row_num, column=col_num)
                if row_num % 2 == 0:
                    cell.fill = light_gray
                cell.border = thin_border
                cell.alignment = Alignment(vertical="center")

                if cell.value is None:
                    continue
                if col_name == "Tarih" and cell.value != TOTAL_LABEL:
                    cell.number_format = 'yyyy-mm-dd'
                elif col_name in AMOUNT_COLUMNS:
                    cell.number_format = '#,##0.0'
                    if isinstance(cell.value, (int, float)) and cell.value < 0:
                        cell.font = red_font
                elif col_name == "Giriş Yapılan Araç":
                    cell.number_format = '#,##0'

        # 3. TOPLAM SATIRI
        last_row = len(df) + 1
        if worksheet.cell(row=last_row, column=1).value == TOTAL_LABEL:
            summary_fill = PatternFill(start_color="E7E6E6", end_color="E7E6E6", fill_type="solid")
            for col_num in range(1, len(df.columns) + 1):
                cell = worksheet.cell(row=last_row, column=col_num)
                cell.font = Font(bold=True, size=11)
                cell.fill = summary_fill

        # 4. SÜTUN GENİŞLİKLERİ
        for idx, col in enumerate(df.columns, 1):
            max_length = len(str(col))
            for row_num in range(2, min(len(df) + 2, 100)):
                cell_value = worksheet.cell(row=row_num, column=idx).value
                if cell_value is not None:
                    max_length = max(max_length, len(str(cell_value)))
            worksheet.column_dimensions[get_column_letter(idx)].width = min(max_length + 3, 50)

        worksheet.freeze_panes = "A2"
        worksheet.auto_filter.ref = f"A1:{get_column_letter(len(df.columns))}1"
