from decimal import Decimal
from typing import Iterable, List, Optional

from schemas.stock import StockItem, StockItemRead, StockSummary


def is_low_stock(item: StockItem, threshold: int) -> bool:
    return item.current_quantity < threshold


def to_read(item: StockItem, threshold: int) -> StockItemRead:
    return StockItemRead(
        id=item.id,
        code=item.code,
        description=item.description,
        brand=item.brand,
        current_quantity=item.current_quantity,
        unit_cost=item.unit_cost,
        unit=item.unit,
        stock_value=item.stock_value,
        low_stock=is_low_stock(item, threshold),
    )


def search(catalog: Iterable[StockItem], query: Optional[str]) -> List[StockItem]:
    """Substring match on code, description or brand, ignoring case."""
    items = list(catalog)
    q = (query or "").strip().casefold()
    if not q:
        return items
    return [
        i for i in items
        if q in i.code.casefold() or q in i.description.casefold() or q in i.brand.casefold()
    ]


def stock_summary(catalog: Iterable[StockItem], threshold: int, query: Optional[str] = None) -> StockSummary:
    # totals always cover the whole catalog; the query only narrows the list
    items = list(catalog)
    return StockSummary(
        item_count=len(items),
        total_value=sum((i.stock_value for i in items), Decimal("0")),
        low_stock_count=sum(1 for i in items if is_low_stock(i, threshold)),
        low_stock_threshold=threshold,
        items=[to_read(i, threshold) for i in search(items, query)],
    )
