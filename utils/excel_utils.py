# =============================================================================
# utils/excel_utils.py - XLSX utilities
# =============================================================================

import logging
from pathlib import Path
from typing import Union

import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet


class ExcelHandler:
    """Builds XLSX counterparts of written CSV files"""

    MAX_COLUMN_WIDTH = 80
    SAMPLE_ROWS = 500

    @staticmethod
    def csv_to_xlsx(csv_path: Union[str, Path], xlsx_path: Union[str, Path],
                    sheet_name: str) -> bool:
        """Convert a CSV file to a single-sheet workbook, skipping empty content"""
        logger = logging.getLogger(__name__)
        csv_path = Path(csv_path)

        if not csv_path.exists():
            logger.warning(f"{csv_path} does not exist - {xlsx_path} not created")
            return False

        # No workbook for empty or whitespace-only CSV content
        content = csv_path.read_text(encoding='utf-8-sig')
        if not content.strip():
            logger.warning(f"{csv_path} is empty - {xlsx_path} not created")
            return False

        # Keep every cell as text so 'True'/'False' and timestamps are not coerced
        df = pd.read_csv(csv_path, dtype=str, keep_default_na=False, encoding='utf-8-sig')

        try:
            with pd.ExcelWriter(xlsx_path, engine='openpyxl') as writer:
                df.to_excel(writer, sheet_name=sheet_name, index=False)
                ws = writer.sheets[sheet_name]
                ExcelHandler.keep_text_cells(ws)
                ExcelHandler.format_sheet(ws)
        except Exception as e:
            logger.error(f"Error writing XLSX: {e}")
            raise

        logger.info(f"Successfully wrote {len(df)} rows to {xlsx_path}")
        return True

    @staticmethod
    def keep_text_cells(ws: Worksheet) -> None:
        """Store values starting with '=' as strings instead of formulas"""
        for row in ws.iter_rows():
            for cell in row:
                if isinstance(cell.value, str) and cell.value.startswith("="):
                    cell.data_type = "s"

    @staticmethod
    def format_sheet(ws: Worksheet) -> None:
        """Bold header, frozen header row, autofilter and autofit columns"""
        for cell in ws[1]:
            cell.font = Font(bold=True)
        ws.freeze_panes = "A2"
        if ws.max_row > 1:
            ws.auto_filter.ref = ws.dimensions

        widths = {}
        for row in ws.iter_rows(min_row=1, max_row=min(ws.max_row, ExcelHandler.SAMPLE_ROWS),
                                values_only=True):
            for idx, value in enumerate(row, start=1):
                if value is None:
                    continue
                widths[idx] = max(widths.get(idx, 0), len(str(value)))

        for idx, width in widths.items():
            ws.column_dimensions[get_column_letter(idx)].width = min(max(10, width + 2),
                                                                     ExcelHandler.MAX_COLUMN_WIDTH)
