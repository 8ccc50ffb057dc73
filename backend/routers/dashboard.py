import asyncio
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from clients.shop_api import ShopApi
from core.converters import iso_month
from core.dependencies import get_shop_api, http_error
from core.errors import DataApiError
from schemas.dashboard import DashboardSummary
from services.dashboard import monthly_overview

router = APIRouter()

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


@router.get("/", response_model=DashboardSummary)
async def get_dashboard(
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN, description="YYYY-MM, defaults to the current month"),
    shop: ShopApi = Depends(get_shop_api),
):
    """Received, spent and balance for the month, plus today's alerts"""
    today = date.today()
    try:
        installments, expenses, orders = await asyncio.gather(
            shop.installments.list(),
            shop.expenses.list(),
            shop.service_orders.list(),
        )
    except DataApiError as e:
        raise http_error(e)
    return monthly_overview(installments, expenses, orders, month or iso_month(today), today)
