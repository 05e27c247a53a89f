"""CSV file parser"""

import io
from typing import Any, List

import pandas as pd

from core.enums import FileType
from core.exceptions import FileParseError
from .base import SheetParser
from utils.encoding import detect_encoding


class CSVParser(SheetParser):
    """Parser for CSV exports of estimate sheets"""

    @property
    def supported_extensions(self) -> List[str]:
        return [f".{FileType.CSV.value}"]

    def read_rows(self, data: bytes, file_name: str = "") -> List[List[Any]]:
        """Read CSV bytes as rows of strings"""
        try:
            encoding = detect_encoding(data)
            delimiter = self._detect_delimiter(data, encoding)

            df = pd.read_csv(
                io.BytesIO(data),
                encoding=encoding,
                delimiter=delimiter,
                header=None,
                dtype=str,
                keep_default_na=False,
                on_bad_lines='skip'
            )
        except pd.errors.EmptyDataError:
            return []
        except Exception as e:
            raise FileParseError(
                f"Failed to parse CSV file: {e}",
                file_name
            ) from e

        return self.normalize_rows(df.values.tolist())

    def _detect_delimiter(self, data: bytes, encoding: str) -> str:
        """Detect CSV delimiter"""
        delimiters = [',', '\t', '|', ';']
        sample = data[:4096].decode(encoding, errors='ignore')

        scores = {}
        for delim in delimiters:
            counts = [line.count(delim) for line in sample.split('\n')[:10] if line.strip()]
            if counts and min(counts) > 0:
                avg = sum(counts) / len(counts)
                variance = sum((c - avg) ** 2 for c in counts) / len(counts)
                scores[delim] = min(counts) if variance < 2 else 0

        return max(scores, key=scores.get) if scores else ','
