"""
Dashboard Summaries

DESIGN DECISION: Summary figures are computed DETERMINISTICALLY from
the in-memory document. Nothing is cached or stored; every call
reflects the records as they are right now.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from rentlog.models.document import Document, Payment


class TenantSummary(BaseModel):
    """One row of the tenants table."""

    tenant_id: int
    tenant_name: str
    property_name: str = Field(..., description="Property name, or N/A when orphaned")
    rent: Decimal
    outstanding: Decimal
    paid: Decimal
    unpaid_bills: int


class DocumentSummary(BaseModel):
    """Figures for the dashboard."""

    total_tenants: int
    total_properties: int
    rent_expected: Decimal = Field(..., description="Sum of every tenant's monthly rent")
    outstanding: Decimal = Field(..., description="Sum of unpaid bills")
    payments_received: Decimal
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    tenants: list[TenantSummary] = Field(default_factory=list)


def _in_range(payment: Payment, date_from: Optional[date], date_to: Optional[date]) -> bool:
    if date_from and payment.payment_date < date_from:
        return False
    if date_to and payment.payment_date > date_to:
        return False
    return True


def summarize(
    document: Document,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> DocumentSummary:
    """
    Summarize a document.

    Args:
        document: The records to summarize
        date_from: Only count payments on or after this date
        date_to: Only count payments on or before this date
    """
    zero = Decimal("0")
    rows = []
    for tenant in document.tenants:
        paid = sum(
            (p.amount for p in tenant.payments if _in_range(p, date_from, date_to)),
            zero,
        )
        rows.append(TenantSummary(
            tenant_id=tenant.id,
            tenant_name=tenant.name,
            property_name=document.property_name_for(tenant),
            rent=tenant.rent,
            outstanding=tenant.outstanding,
            paid=paid,
            unpaid_bills=sum(1 for b in tenant.bills if not b.is_paid),
        ))

    return DocumentSummary(
        total_tenants=len(document.tenants),
        total_properties=len(document.properties),
        rent_expected=sum((t.rent for t in document.tenants), zero),
        outstanding=sum((row.outstanding for row in rows), zero),
        payments_received=sum((row.paid for row in rows), zero),
        date_from=date_from,
        date_to=date_to,
        tenants=rows,
    )


def _group_indian(digits: str) -> str:
    """Group digits the Indian way: 12,34,567."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_money(amount: Decimal, symbol: str = "₹") -> str:
    """
    Format an amount for display.

    Whole amounts have no decimals; others show two.
    >>> format_money(Decimal("150000"))
    '₹1,50,000'
    """
    sign = "-" if amount < 0 else ""
    amount = abs(amount)
    if amount == amount.to_integral_value():
        whole, fraction = str(int(amount)), ""
    else:
        text = f"{amount.quantize(Decimal('0.01')):f}"
        whole, fraction = text.split(".")
        fraction = "." + fraction
    return f"{sign}{symbol}{_group_indian(whole)}{fraction}"
