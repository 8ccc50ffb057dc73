from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from clients.shop_api import ShopApi
from core.converters import iso_month
from core.dependencies import get_shop_api, http_error
from core.errors import DataApiError
from routers.dashboard import MONTH_PATTERN
from schemas.expenses import ExpenseCreate, ExpenseSummary
from services.expenses import ALL_DEPARTMENTS, expense_summary, normalize_department

router = APIRouter()


@router.get("/", response_model=ExpenseSummary)
async def get_expenses(
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    department: str = Query(ALL_DEPARTMENTS),
    shop: ShopApi = Depends(get_shop_api),
):
    try:
        expenses = await shop.expenses.list()
    except DataApiError as e:
        raise http_error(e)
    return expense_summary(expenses, month or iso_month(date.today()), department)


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_expense(payload: ExpenseCreate, shop: ShopApi = Depends(get_shop_api)):
    try:
        await shop.create_expense(payload, normalize_department(payload.department))
    except DataApiError as e:
        raise http_error(e)
    return Response(status_code=status.HTTP_201_CREATED)
