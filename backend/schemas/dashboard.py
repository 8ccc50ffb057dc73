from datetime import date
from decimal import Decimal

from pydantic import BaseModel


class DashboardSummary(BaseModel):
    month: str
    today: date
    received: Decimal
    expenses: Decimal
    balance: Decimal
    receivable_in_month: Decimal
    open_service_orders: int
    receivable_today: Decimal
