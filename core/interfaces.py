"""Abstract base classes for Windesk components"""

from abc import ABC, abstractmethod
from typing import Any, List


class SheetParser(ABC):
    """Abstract base class for spreadsheet readers"""

    @property
    @abstractmethod
    def supported_extensions(self) -> List[str]:
        """List of supported file extensions"""
        pass

    @abstractmethod
    def read_rows(self, data: bytes, file_name: str = "") -> List[List[Any]]:
        """Decode the first sheet into a grid of cell values"""
        pass
