"""
Billing helpers: installment status, month summary and the installment
schedule a launch request produces.
"""

import calendar
from datetime import date
from decimal import ROUND_DOWN, Decimal
from typing import Iterable, List

from core.converters import in_month
from schemas.billing import (
    BillingSummary,
    Installment,
    InstallmentPreview,
    InstallmentRead,
    InvoiceLaunch,
)

PAID = "PAGO"
PENDING = "PENDENTE"
OVERDUE = "ATRASADO"

CENT = Decimal("0.01")


def installment_status(installment: Installment, today: date) -> str:
    if installment.status == PAID:
        return PAID
    if installment.due_date < today:
        return OVERDUE
    return PENDING


def is_overdue(installment: Installment, today: date) -> bool:
    return installment_status(installment, today) == OVERDUE


def _read(installment: Installment, today: date) -> InstallmentRead:
    return InstallmentRead(
        id=installment.id,
        due_date=installment.due_date,
        amount=installment.amount,
        document_number=installment.document_number,
        number=installment.number,
        total=installment.total,
        status=installment_status(installment, today),
        customer_name=installment.customer.name if installment.customer else None,
    )


def billing_summary(installments: Iterable[Installment], month: str, today: date) -> BillingSummary:
    all_items = list(installments)
    in_period = [i for i in all_items if in_month(i.due_date, month)]
    zero = Decimal("0")
    return BillingSummary(
        month=month,
        expected=sum((i.amount for i in in_period), zero),
        received=sum((i.amount for i in in_period if i.status == PAID), zero),
        receivable=sum((i.amount for i in in_period if i.status != PAID), zero),
        # across every month, so late payments are never out of sight
        overdue_total=sum((i.amount for i in all_items if is_overdue(i, today)), zero),
        installments=[_read(i, today) for i in sorted(in_period, key=lambda i: (i.due_date, i.id))],
    )


def add_months(d: date, months: int) -> date:
    """Same day ``months`` later, clamped to the last day of a shorter month."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def preview_installments(request: InvoiceLaunch) -> List[InstallmentPreview]:
    n = request.installments
    total = request.total_amount.quantize(CENT)
    share = (total / n).quantize(CENT, rounding=ROUND_DOWN)
    out: List[InstallmentPreview] = []
    for k in range(n):
        # the last installment absorbs the rounding remainder
        amount = share if k < n - 1 else total - share * (n - 1)
        out.append(
            InstallmentPreview(
                number=k + 1,
                total=n,
                due_date=add_months(request.first_due_date, k),
                amount=amount,
            )
        )
    return out
