"""Estimate pricing: quote, discount, margin and subscription figures"""

import json
import math
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from config import settings
from core.exceptions import ValidationError
from core.models import (
    EstimateCalculation, EstimateRecord, FixedPackageOption, LineItem,
    SubscriptionFees
)
from utils.formatting import format_krw

NOT_APPLICABLE = "해당없음"


def _floor_to(value: float, unit: int) -> int:
    return math.floor(value / unit) * unit


def monthly_installment(principal: float, months: int, annual_rate: Optional[float] = None) -> int:
    """Level monthly payment for principal over months, floored to 10 won"""
    if months <= 0:
        raise ValidationError("Subscription term must be positive", "months")
    rate = settings.SUBSCRIPTION_ANNUAL_RATE if annual_rate is None else annual_rate
    r = rate / 12
    if r == 0:
        payment = principal / months
    else:
        payment = (principal * r) / (1 - math.pow(1 + r, -months))
    return _floor_to(payment, 10)


def calculate_estimate(
    total_sum: float,
    supply_cost: float,
    total_etc: float = 0,
    price_multiplier: Optional[float] = None,
    discount_rate: Optional[float] = None,
    extra_discount: float = 0,
    annual_rate: Optional[float] = None,
    months: Optional[Sequence[int]] = None
) -> EstimateCalculation:
    """
    Derive customer-facing figures from the supply cost

    Args:
        total_sum: Total read from the supplier workbook
        supply_cost: Purchase cost; values <= 0 count as 0
        total_etc: Sundry cost that is passed through without markup
        price_multiplier: Markup applied to material cost
        discount_rate: Discount in percent of the final quote
        extra_discount: Flat discount in won
        annual_rate: Interest rate for subscription fees
        months: Subscription terms to price

    Returns:
        EstimateCalculation
    """
    multiplier = settings.PRICE_MULTIPLIER if price_multiplier is None else price_multiplier
    rate = settings.DEFAULT_DISCOUNT_RATE if discount_rate is None else discount_rate
    terms = list(months) if months is not None else settings.get_subscription_months()

    if multiplier < 0:
        raise ValidationError("Price multiplier cannot be negative", "price_multiplier")

    base_cost = supply_cost if supply_cost > 0 else 0
    other_cost = total_etc or 0
    material_cost = max(0, base_cost - other_cost)

    final_quote = _floor_to(material_cost * multiplier + other_cost, 100)
    discount = _floor_to(final_quote * (rate / 100), 100)
    final_benefit = final_quote - discount - math.floor(extra_discount or 0)

    margin_amount = final_benefit - math.floor(base_cost)
    if base_cost > 0 and final_benefit != 0:
        margin_rate = margin_amount / final_benefit * 100
    else:
        margin_rate = 0.0

    subs = {f"sub{m}": monthly_installment(final_benefit, m, annual_rate) for m in terms}

    return EstimateCalculation(
        kcc_quote=math.floor(total_sum or 0),
        final_quote=final_quote,
        final_benefit=final_benefit,
        margin_amount=margin_amount,
        margin_rate=margin_rate,
        subs=SubscriptionFees(**{k: v for k, v in subs.items() if k in SubscriptionFees.model_fields})
    )


def derive_supply_cost(final_benefit: float, margin_amount: float) -> float:
    """Supply cost recovered from a saved estimate"""
    return final_benefit - margin_amount


def fixed_package_upfront(final_benefit: float, loan: int) -> Optional[int]:
    """Upfront payment for a fixed package, None when the loan exceeds the benefit"""
    upfront = math.floor(final_benefit or 0) - loan
    return upfront if upfront >= 0 else None


def format_upfront(upfront: Optional[int]) -> str:
    return NOT_APPLICABLE if upfront is None else format_krw(upfront)


def fixed_package_table(final_benefit: float, loans: Optional[Iterable[int]] = None) -> List[FixedPackageOption]:
    """Upfront payment for each fixed-package loan amount"""
    options = []
    for loan in (loans if loans is not None else settings.get_fixed_package_loans()):
        upfront = fixed_package_upfront(final_benefit, loan)
        options.append(FixedPackageOption(loan=loan, upfront=upfront, label=format_upfront(upfront)))
    return options


def apply_price_multiplier(items: Iterable[LineItem], multiplier: float) -> List[LineItem]:
    """Mark up material items for the customer copy; sundry items keep their price"""
    marked = []
    for item in items:
        if item.is_etc:
            marked.append(item)
        else:
            marked.append(item.model_copy(update={"price": math.floor(item.price * multiplier)}))
    return marked


def build_estimate_record(
    customer_name: str,
    customer_phone: str,
    total_sum: int,
    calculation: EstimateCalculation,
    items: Iterable[LineItem],
    status_type: str,
    discount_rate: float,
    extra_discount: int,
    price_multiplier: float,
    address: Optional[str] = None,
    branch: Optional[str] = None,
    date: Optional[str] = None
) -> EstimateRecord:
    """Assemble the record saved for an estimate"""
    marked = apply_price_multiplier(items, price_multiplier)
    return EstimateRecord(
        date=date or datetime.now().strftime("%Y-%m-%d"),
        branch=branch,
        status_type=status_type,
        customer_name=customer_name,
        customer_phone=customer_phone,
        address=address,
        total_sum=total_sum,
        final_quote=calculation.final_quote,
        final_benefit=calculation.final_benefit,
        discount_rate=discount_rate,
        extra_discount=extra_discount,
        margin_amount=calculation.margin_amount,
        margin_rate=calculation.margin_rate,
        subs=calculation.subs,
        items=json.dumps([item.model_dump() for item in marked], ensure_ascii=False)
    )
