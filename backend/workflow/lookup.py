from typing import Iterable, Optional

from schemas.stock import StockItem


def normalize_code(code: Optional[str]) -> str:
    return (code or "").strip().casefold()


def find_by_code(catalog: Iterable[StockItem], code: Optional[str]) -> Optional[StockItem]:
    """Case-insensitive, trimmed exact match on the item code.

    Shared by auto-fill and by the duplicate check at submit time so both
    always agree on what "the same code" means.
    """
    key = normalize_code(code)
    if not key:
        return None
    for item in catalog:
        if normalize_code(item.code) == key:
            return item
    return None
