from typing import Any, List

from clients.data_api import DataApiClient, Resource, parse_list
from core.converters import (
    customer_to_payload,
    expense_to_payload,
    invoice_launch_to_payload,
    line_item_to_payload,
    service_order_to_payload,
    stock_item_to_payload,
)
from core.errors import NotFoundError
from schemas.billing import Customer, CustomerCreate, Installment, InvoiceLaunch
from schemas.expenses import Expense, ExpenseCreate
from schemas.service_orders import LineItem, LineItemCreate, ServiceOrder, ServiceOrderCreate
from schemas.stock import StockItem


class ShopApi:
    """Every collection of the shop data API the console reads or writes."""

    def __init__(self, client: DataApiClient):
        self.client = client
        self.stock_items: Resource[StockItem] = Resource(client, "/produtos", StockItem, stock_item_to_payload)
        self.installments: Resource[Installment] = Resource(client, "/faturamentos", Installment)
        self.customers: Resource[Customer] = Resource(client, "/clientes", Customer)
        self.expenses: Resource[Expense] = Resource(client, "/despesas", Expense)
        self.service_orders: Resource[ServiceOrder] = Resource(client, "/os", ServiceOrder)

    async def aclose(self) -> None:
        await self.client.aclose()

    # Billing

    async def launch_invoice(self, request: InvoiceLaunch) -> Any:
        """Calls: POST /faturamentos/lancar (the API splits it into installments)."""
        return await self.client.request("POST", "/faturamentos/lancar", json=invoice_launch_to_payload(request))

    async def pay_installment(self, installment_id: int) -> Any:
        return await self.client.request("PUT", f"/faturamentos/{installment_id}/pagar")

    async def create_customer(self, customer: CustomerCreate) -> Any:
        return await self.client.request("POST", "/clientes", json=customer_to_payload(customer))

    # Expenses

    async def create_expense(self, expense: ExpenseCreate, department: str) -> Any:
        return await self.client.request("POST", "/despesas", json=expense_to_payload(expense, department))

    # Service orders

    async def open_service_order(self, order: ServiceOrderCreate) -> Any:
        return await self.client.request("POST", "/os", json=service_order_to_payload(order))

    async def get_service_order(self, order_id: int) -> ServiceOrder:
        orders = await self.service_orders.list()
        for order in orders:
            if order.id == order_id:
                return order
        raise NotFoundError(order_id=order_id)

    async def list_order_items(self, order_id: int) -> List[LineItem]:
        data = await self.client.request("GET", f"/os/{order_id}/itens")
        return parse_list(LineItem, data or [])

    async def add_order_item(self, order_id: int, item: LineItemCreate, description: str) -> Any:
        """Calls: POST /os/{id}/itens (parts are taken out of stock by the API)."""
        payload = line_item_to_payload(order_id, item, description)
        return await self.client.request("POST", f"/os/{order_id}/itens", json=payload)

    async def remove_order_item(self, item_id: int) -> None:
        """Calls: DELETE /os/itens/{id} (parts go back to stock)."""
        await self.client.request("DELETE", f"/os/itens/{item_id}")

    async def finalize_order(self, order_id: int, total: Any) -> Any:
        return await self.client.request("PUT", f"/os/{order_id}/finalizar", json={"total": total})
