import asyncio
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from clients.shop_api import ShopApi
from core.converters import to_number
from core.dependencies import get_inventory_controller, get_shop_api, http_error
from core.errors import DataApiError, ValidationError
from schemas.service_orders import LineItemCreate, ServiceOrder, ServiceOrderCreate, ServiceOrderDetail
from services.service_orders import is_open, line_item_description, order_totals
from workflow.controller import InventoryController

router = APIRouter()


async def _load_detail(shop: ShopApi, order_id: int) -> ServiceOrderDetail:
    order, items = await asyncio.gather(
        shop.get_service_order(order_id),
        shop.list_order_items(order_id),
    )
    return ServiceOrderDetail(order=order, items=items, totals=order_totals(items))


@router.get("/", response_model=List[ServiceOrder])
async def list_service_orders(shop: ShopApi = Depends(get_shop_api)):
    try:
        orders = await shop.service_orders.list()
    except DataApiError as e:
        raise http_error(e)
    return sorted(orders, key=lambda o: o.id, reverse=True)


@router.post("/", status_code=status.HTTP_201_CREATED)
async def open_service_order(payload: ServiceOrderCreate, shop: ShopApi = Depends(get_shop_api)):
    try:
        await shop.open_service_order(payload)
    except DataApiError as e:
        raise http_error(e)
    return Response(status_code=status.HTTP_201_CREATED)


@router.get("/{order_id}", response_model=ServiceOrderDetail)
async def get_service_order(order_id: int, shop: ShopApi = Depends(get_shop_api)):
    """Order header, line items and the part/service totals printed on the sheet"""
    try:
        return await _load_detail(shop, order_id)
    except DataApiError as e:
        raise http_error(e)


@router.post("/{order_id}/items", response_model=ServiceOrderDetail, status_code=status.HTTP_201_CREATED)
async def add_line_item(
    order_id: int,
    payload: LineItemCreate,
    shop: ShopApi = Depends(get_shop_api),
    inventory: InventoryController = Depends(get_inventory_controller),
):
    try:
        order = await shop.get_service_order(order_id)
        if not is_open(order):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Service order is not open")
        description = line_item_description(payload, inventory.state.catalog)
        await shop.add_order_item(order_id, payload, description)
        detail = await _load_detail(shop, order_id)
    except (DataApiError, ValidationError) as e:
        raise http_error(e)
    # parts leave stock on the server side
    if payload.kind == "PECA":
        await inventory.refresh()
    return detail


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_line_item(
    item_id: int,
    shop: ShopApi = Depends(get_shop_api),
    inventory: InventoryController = Depends(get_inventory_controller),
):
    try:
        await shop.remove_order_item(item_id)
    except DataApiError as e:
        raise http_error(e)
    await inventory.refresh()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{order_id}/finalize", response_model=ServiceOrderDetail)
async def finalize_service_order(order_id: int, shop: ShopApi = Depends(get_shop_api)):
    """Close the order with the total of its line items"""
    try:
        detail = await _load_detail(shop, order_id)
        if not is_open(detail.order):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Service order is not open")
        await shop.finalize_order(order_id, to_number(detail.totals.total))
        return await _load_detail(shop, order_id)
    except DataApiError as e:
        raise http_error(e)
