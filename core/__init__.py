"""Core abstractions for Windesk"""

from .models import *
from .enums import *
from .exceptions import *
from .interfaces import *

__all__ = [
    # Models
    "LineItem",
    "SheetScan",
    "ExtractedEstimate",
    "SubscriptionFees",
    "EstimateCalculation",
    "FixedPackageOption",
    "EstimateRecord",
    "PartnerStats",
    "DashboardSummary",
    # Enums
    "FileType",
    "DateFilter",
    "EstimateStatusType",
    "PartnerStatus",
    "CustomerStatus",
    "CUSTOMER_STATUSES",
    # Exceptions
    "WindeskError",
    "FileReadError",
    "FileParseError",
    "UnsupportedFileError",
    "ValidationError",
    "DatabaseError",
    "NotFoundError",
    "DuplicateError",
    "AuthError",
    "InvalidCredentialsError",
    "PartnerNotApprovedError",
    "ExportError",
    # Interfaces
    "SheetParser",
]
