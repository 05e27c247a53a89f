"""Estimate reception - read an uploaded workbook and extract the estimate"""

import asyncio
import logging
from pathlib import Path
from typing import Union

from core.models import ExtractedEstimate
from core.exceptions import FileReadError, FileParseError, UnsupportedFileError
from .extractor import extract_estimate
from .parsers import ExcelParser, CSVParser

logger = logging.getLogger(__name__)


class EstimateReceiver:
    """Parse estimate files into ExtractedEstimate; holds no per-call state"""

    def __init__(self):
        self.parsers = {
            ext: parser
            for parser in (ExcelParser(), CSVParser())
            for ext in parser.supported_extensions
        }

    def supports(self, file_name: str) -> bool:
        return Path(file_name).suffix.lower() in self.parsers

    async def read_file(self, file_path: Union[str, Path]) -> bytes:
        """Read the whole file into memory"""
        path = Path(file_path)
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as e:
            raise FileReadError(f"Failed to read file: {e}", str(path)) from e

    def parse_bytes(self, data: bytes, file_name: str) -> ExtractedEstimate:
        """Decode the first sheet and run the extractor"""
        ext = Path(file_name).suffix.lower()
        if ext not in self.parsers:
            raise UnsupportedFileError(
                f"Unsupported file type: {ext or '(none)'}. Supported: {', '.join(self.parsers.keys())}",
                file_name
            )

        try:
            rows = self.parsers[ext].read_rows(data, file_name)
        except FileParseError:
            logger.exception("Workbook decoding failed for %s", file_name)
            raise

        return extract_estimate(rows, Path(file_name).name)

    async def parse_upload(self, data: bytes, file_name: str) -> ExtractedEstimate:
        """Parse bytes received from an upload off the event loop"""
        return await asyncio.to_thread(self.parse_bytes, data, file_name)

    async def parse_file(self, file_path: Union[str, Path]) -> ExtractedEstimate:
        """Read a file from disk and parse it"""
        data = await self.read_file(file_path)
        return await asyncio.to_thread(self.parse_bytes, data, Path(file_path).name)
