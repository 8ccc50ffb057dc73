from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status

from clients.shop_api import ShopApi
from core.converters import iso_month
from core.dependencies import get_shop_api, http_error
from core.errors import DataApiError
from routers.dashboard import MONTH_PATTERN
from schemas.billing import BillingSummary, Customer, CustomerCreate, InstallmentPreview, InvoiceLaunch
from services.billing import billing_summary, preview_installments

router = APIRouter()


@router.get("/", response_model=BillingSummary)
async def get_billing(
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    shop: ShopApi = Depends(get_shop_api),
):
    """Installments due in the month, with totals and the overall overdue amount"""
    today = date.today()
    try:
        installments = await shop.installments.list()
    except DataApiError as e:
        raise http_error(e)
    return billing_summary(installments, month or iso_month(today), today)


@router.get("/customers", response_model=List[Customer])
async def list_customers(shop: ShopApi = Depends(get_shop_api)):
    try:
        customers = await shop.customers.list()
    except DataApiError as e:
        raise http_error(e)
    return sorted(customers, key=lambda c: c.name.lower())


@router.post("/customers", status_code=status.HTTP_201_CREATED)
async def create_customer(payload: CustomerCreate, shop: ShopApi = Depends(get_shop_api)):
    """Register a customer so invoices can be launched for it"""
    try:
        await shop.create_customer(payload)
    except DataApiError as e:
        raise http_error(e)
    return Response(status_code=status.HTTP_201_CREATED)


@router.post("/preview", response_model=List[InstallmentPreview])
async def preview_invoice(payload: InvoiceLaunch):
    """Installment schedule the launch would produce (nothing is saved)"""
    return preview_installments(payload)


@router.post("/", status_code=status.HTTP_201_CREATED, response_model=List[InstallmentPreview])
async def launch_invoice(payload: InvoiceLaunch, shop: ShopApi = Depends(get_shop_api)):
    try:
        await shop.launch_invoice(payload)
    except DataApiError as e:
        raise http_error(e)
    return preview_installments(payload)


@router.put("/{installment_id}/pay", status_code=status.HTTP_204_NO_CONTENT)
async def pay_installment(installment_id: int, shop: ShopApi = Depends(get_shop_api)):
    """Record the payment of one installment"""
    try:
        await shop.pay_installment(installment_id)
    except DataApiError as e:
        raise http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
