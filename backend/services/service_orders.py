from decimal import Decimal
from typing import Iterable

from core.errors import ValidationError
from schemas.service_orders import LineItem, LineItemCreate, ServiceOrder, ServiceOrderTotals
from schemas.stock import StockItem

OPEN = "ABERTA"
PART = "PECA"
SERVICE = "SERVICO"


def line_item_description(item: LineItemCreate, catalog: Iterable[StockItem]) -> str:
    """A part picked from stock is printed as ``<code> - <description>``."""
    if item.kind == PART and item.product_id:
        product = next((p for p in catalog if p.id == item.product_id), None)
        if product is not None:
            return f"{product.code} - {product.description}"
    description = item.description.strip()
    if not description:
        raise ValidationError(fields={"product_id": "unknown stock item"})
    return description


def order_totals(items: Iterable[LineItem]) -> ServiceOrderTotals:
    items = list(items)
    zero = Decimal("0")
    return ServiceOrderTotals(
        parts=sum((i.subtotal for i in items if i.kind == PART), zero),
        services=sum((i.subtotal for i in items if i.kind == SERVICE), zero),
        total=sum((i.subtotal for i in items), zero),
    )


def is_open(order: ServiceOrder) -> bool:
    return order.status == OPEN


def count_open(orders: Iterable[ServiceOrder]) -> int:
    return sum(1 for o in orders if is_open(o))
