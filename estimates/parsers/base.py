"""Base sheet parser"""

from abc import ABC, abstractmethod
from datetime import date, datetime, time
from typing import Any, List

import pandas as pd

from core.interfaces import SheetParser as ISheetParser


class SheetParser(ISheetParser, ABC):
    """Abstract base class for sheet parsers"""

    @abstractmethod
    def read_rows(self, data: bytes, file_name: str = "") -> List[List[Any]]:
        """Decode the first sheet into rows of cell values"""
        pass

    def normalize_cell(self, value: Any) -> Any:
        """Empty cells become '', dates become dotted date strings"""
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, (datetime, date)):
            if pd.isna(value):
                return ""
            return value.strftime("%Y.%m.%d")
        if isinstance(value, time):
            return value.strftime("%H:%M:%S")
        if pd.isna(value):
            return ""
        return value

    def normalize_rows(self, rows) -> List[List[Any]]:
        return [[self.normalize_cell(v) for v in row] for row in rows]

    def trim_to_used_range(self, rows: List[List[Any]]) -> List[List[Any]]:
        """Drop leading blank rows and columns so the grid starts at the first used cell"""
        used = [[c for c, value in enumerate(row) if value != ""] for row in rows]
        filled = [r for r, cols in enumerate(used) if cols]
        if not filled:
            return []
        first_col = min(min(used[r]) for r in filled)
        return [row[first_col:] for row in rows[filled[0]:]]
