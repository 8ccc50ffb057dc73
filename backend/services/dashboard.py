from datetime import date
from decimal import Decimal
from typing import Iterable

from core.converters import in_month
from schemas.billing import Installment
from schemas.dashboard import DashboardSummary
from schemas.expenses import Expense
from schemas.service_orders import ServiceOrder
from services.billing import PAID, PENDING
from services.service_orders import count_open


def monthly_overview(
    installments: Iterable[Installment],
    expenses: Iterable[Expense],
    orders: Iterable[ServiceOrder],
    month: str,
    today: date,
) -> DashboardSummary:
    """Cash view of one month plus the live counters shown next to it.

    Received money is what was paid among installments due in the month;
    "today" figures ignore the selected month.
    """
    installments = list(installments)
    zero = Decimal("0")
    received = sum((i.amount for i in installments if i.status == PAID and in_month(i.due_date, month)), zero)
    spent = sum((e.amount for e in expenses if in_month(e.expense_date, month)), zero)
    return DashboardSummary(
        month=month,
        today=today,
        received=received,
        expenses=spent,
        balance=received - spent,
        receivable_in_month=sum(
            (i.amount for i in installments if i.status != PAID and in_month(i.due_date, month)), zero
        ),
        open_service_orders=count_open(orders),
        receivable_today=sum(
            (i.amount for i in installments if i.status == PENDING and i.due_date == today), zero
        ),
    )
