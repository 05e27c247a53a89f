"""Core enumerations for Windesk"""

from enum import Enum


class FileType(str, Enum):
    """Supported estimate file types"""
    EXCEL_XLSX = "xlsx"
    EXCEL_XLSM = "xlsm"
    EXCEL_XLS = "xls"
    CSV = "csv"


class DateFilter(str, Enum):
    """Date range presets used by the dashboard and exports"""
    CURRENT_MONTH = "currentMonth"
    LAST_MONTH = "lastMonth"
    THREE_MONTHS = "3months"
    SIX_MONTHS = "6months"
    ONE_YEAR = "1year"
    ALL = "all"
    CUSTOM = "custom"


class EstimateStatusType(str, Enum):
    """Estimate stage"""
    PRELIMINARY = "가견적"
    RESPONSIBLE = "책임견적"
    FINAL = "최종견적"


class PartnerStatus(str, Enum):
    """Partner approval state"""
    PENDING = "승인대기"
    APPROVED = "승인"


class CustomerStatus(str, Enum):
    """Customer progress status"""
    RECEIVED = "접수"
    ABSENT = "부재"
    CALLBACK = "예약콜"
    REFUSED = "거부"
    SIZE_REQUEST = "사이즈요청"
    PRE_QUOTE_REQUEST = "가견적요청"
    PRE_QUOTE_SENT = "가견적전달"
    PRE_QUOTE_UNAVAILABLE = "가견적불가"
    MEASURE_REQUEST = "실측요청"
    MEASURE_IN_PROGRESS = "실측진행"
    MEASURE_CANCELLED = "실측취소"
    FINAL_QUOTE_REQUEST = "최종견적요청"
    FINAL_QUOTE_SENT = "최종견적전달"
    FINAL_CONSIDERING = "최종고민중"
    CANCELLED_AFTER_QUOTE = "견적후취소"
    CONTRACT_IN_PROGRESS = "계약진행"
    PAYMENT_COMPLETE = "결제완료"
    CONSTRUCTION_COMPLETE = "공사완료"
    REQUOTE = "재견적작업"
    REVISED_QUOTE_SENT = "수정견적전달"


CUSTOMER_STATUSES = [status.value for status in CustomerStatus]
