"""Excel workbook parser"""

import io
from pathlib import Path
from typing import Any, List

import openpyxl
import pandas as pd

from core.enums import FileType
from core.exceptions import FileParseError
from .base import SheetParser

OPENPYXL_TYPES = (FileType.EXCEL_XLSX, FileType.EXCEL_XLSM)


class ExcelParser(SheetParser):
    """Parser for Excel workbooks (.xlsx, .xlsm, .xls); first sheet only"""

    @property
    def supported_extensions(self) -> List[str]:
        return [f".{t.value}" for t in (FileType.EXCEL_XLSX, FileType.EXCEL_XLSM, FileType.EXCEL_XLS)]

    def read_rows(self, data: bytes, file_name: str = "") -> List[List[Any]]:
        """Read the first worksheet as a grid starting at its used range"""
        suffix = Path(file_name).suffix.lower()

        try:
            if not suffix or suffix in (f".{t.value}" for t in OPENPYXL_TYPES):
                rows = self._read_openpyxl(data)
            else:
                rows = self._read_pandas(data)
        except Exception as e:
            raise FileParseError(
                f"Failed to parse Excel file: {e}",
                file_name
            ) from e

        return self.trim_to_used_range(self.normalize_rows(rows))

    def _read_openpyxl(self, data: bytes) -> List[List[Any]]:
        workbook = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        try:
            sheet = workbook.worksheets[0]
            # The stored <dimension> tag can be wrong; read every cell instead
            sheet.reset_dimensions()
            return [list(row) for row in sheet.iter_rows(values_only=True)]
        finally:
            workbook.close()

    def _read_pandas(self, data: bytes) -> List[List[Any]]:
        df = pd.read_excel(
            io.BytesIO(data),
            sheet_name=0,
            header=None,
            keep_default_na=False
        )
        return df.astype(object).values.tolist()
