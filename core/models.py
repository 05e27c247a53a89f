"""Core data models for Windesk"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


# ─────────────────────────────────────────────────────────────
# Estimate extraction
# ─────────────────────────────────────────────────────────────

class LineItem(BaseModel):
    """One priced row of an estimate"""
    model_config = ConfigDict(protected_namespaces=())

    no: int = Field(ge=1)
    loc: str = ""
    prod: str = ""
    model: str = ""
    price: int = Field(ge=0, default=0)
    is_etc: bool = False


class SheetScan(BaseModel):
    """Values found by the full-sheet keyword scan"""
    address: str = ""
    sheet_phone: str = ""
    start_row: Optional[int] = None  # row index after the sequence-number header
    excel_total_sum: int = 0


class ExtractedEstimate(BaseModel):
    """Structured estimate parsed from a workbook"""
    customer_name: str = ""
    customer_phone: str = ""
    address: str = ""
    items: list[LineItem] = []
    total_material: int = 0
    total_etc: int = 0
    total_sum: int = 0


# ─────────────────────────────────────────────────────────────
# Pricing
# ─────────────────────────────────────────────────────────────

class SubscriptionFees(BaseModel):
    """Monthly subscription fee per term"""
    sub24: int = 0
    sub36: int = 0
    sub48: int = 0
    sub60: int = 0


class EstimateCalculation(BaseModel):
    """Derived quote figures"""
    kcc_quote: int = 0
    final_quote: int = 0
    final_benefit: int = 0
    margin_amount: int = 0
    margin_rate: float = 0.0
    subs: SubscriptionFees = Field(default_factory=SubscriptionFees)


class FixedPackageOption(BaseModel):
    """Upfront payment for one fixed-package loan amount"""
    loan: int
    upfront: Optional[int] = None  # None when the loan exceeds the benefit
    label: str


class EstimateRecord(BaseModel):
    """Persisted estimate"""
    id: Optional[str] = None
    date: str  # yyyy-MM-dd
    branch: Optional[str] = None
    status_type: str
    customer_name: str
    customer_phone: str
    address: Optional[str] = None
    total_sum: int
    final_quote: int
    final_benefit: int
    discount_rate: float
    extra_discount: int
    margin_amount: int
    margin_rate: float
    subs: SubscriptionFees
    items: str  # JSON array of line items
    pdf_url: Optional[str] = None
    remark: Optional[str] = None
    created_at: Optional[int] = None  # epoch milliseconds


# ─────────────────────────────────────────────────────────────
# Dashboard
# ─────────────────────────────────────────────────────────────

class PartnerStats(BaseModel):
    """Partner approval counts"""
    total: int = 0
    pending: int = 0
    approved: int = 0


class DashboardSummary(BaseModel):
    """Dashboard figures for one date range"""
    start: datetime
    end: datetime
    customer_count: int = 0
    partner_count: int = 0
    customer_stats: dict[str, int] = {}
    partner_stats: PartnerStats = Field(default_factory=PartnerStats)
