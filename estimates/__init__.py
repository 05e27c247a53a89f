"""Estimate extraction and pricing"""

from .extractor import extract_estimate, extract_price, parse_filename
from .pricing import calculate_estimate, fixed_package_table, build_estimate_record
from .receiver import EstimateReceiver

__all__ = [
    "extract_estimate",
    "extract_price",
    "parse_filename",
    "calculate_estimate",
    "fixed_package_table",
    "build_estimate_record",
    "EstimateReceiver",
]
