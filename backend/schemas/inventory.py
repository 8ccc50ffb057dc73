from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from schemas.stock import StockItemRead


class IntakeDraftRead(BaseModel):
    code: str
    description: str
    brand: str
    incoming_quantity: Any
    unit_cost: Any
    unit: str


class IntakeRead(BaseModel):
    draft: IntakeDraftRead
    feedback_active: bool


class MergeRead(BaseModel):
    existing: StockItemRead
    current_quantity: Decimal
    incoming_quantity: int
    new_quantity: Decimal
    description: str
    brand: str
    unit_cost: Decimal


class DeletionRead(BaseModel):
    stage: str
    target: Optional[StockItemRead] = None
    typed_text: str
    can_confirm: bool


class InventorySnapshot(BaseModel):
    loading: bool
    catalog: List[StockItemRead]
    item_count: int
    total_value: Decimal
    low_stock_count: int
    intake: Optional[IntakeRead] = None
    merge: Optional[MergeRead] = None
    deletion: DeletionRead
    busy: List[str]
    error: Optional[str] = None
    notice: Optional[str] = None


class DraftPatch(BaseModel):
    fields: Dict[str, Any]


class CodeBlur(BaseModel):
    code: str


class TypedText(BaseModel):
    text: str
