from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from core.converters import parse_decimal

DEFAULT_UNIT = "UN"


class StockItem(BaseModel):
    """A stock item as stored by the shop data API (``/produtos``)."""

    id: Optional[int] = None
    code: str = Field(validation_alias="codigo")
    description: str = Field(validation_alias="descricao")
    brand: str = Field("", validation_alias="marca")
    # read as sent: stock may go negative when service orders consume parts
    current_quantity: Decimal = Field(Decimal("0"), validation_alias="qtdeAtual")
    unit_cost: Decimal = Field(Decimal("0"), validation_alias="precoCusto")
    unit: str = Field(DEFAULT_UNIT, validation_alias="unidade")

    class Config:
        populate_by_name = True

    @field_validator("code", "description", mode="before")
    @classmethod
    def _strip(cls, v: Any) -> str:
        return str(v if v is not None else "").strip()

    @field_validator("brand", mode="before")
    @classmethod
    def _brand(cls, v: Any) -> str:
        return str(v).strip() if v is not None else ""

    @field_validator("current_quantity", "unit_cost", mode="before")
    @classmethod
    def _number_or_zero(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return Decimal("0")
        return v

    @field_validator("unit", mode="before")
    @classmethod
    def _unit(cls, v: Any) -> str:
        v = str(v).strip().upper() if v is not None else ""
        return v or DEFAULT_UNIT

    @property
    def stock_value(self) -> Decimal:
        return self.unit_cost * self.current_quantity


class IntakeEntry(BaseModel):
    """A validated intake draft: what the operator is adding to stock."""

    code: str
    description: str
    brand: str = ""
    incoming_quantity: int
    unit_cost: Decimal
    unit: str = DEFAULT_UNIT

    @field_validator("code", "description", mode="before")
    @classmethod
    def _strip_required(cls, v: Any) -> str:
        v = str(v if v is not None else "").strip()
        if not v:
            raise ValueError("field is required")
        return v

    @field_validator("brand", mode="before")
    @classmethod
    def _strip_optional(cls, v: Any) -> str:
        return str(v).strip() if v is not None else ""

    @field_validator("unit", mode="before")
    @classmethod
    def _unit(cls, v: Any) -> str:
        v = str(v).strip().upper() if v is not None else ""
        return v or DEFAULT_UNIT

    @field_validator("incoming_quantity", mode="before")
    @classmethod
    def _positive_integer(cls, v: Any) -> int:
        d = parse_decimal(v)
        if d is None:
            raise ValueError("quantity must be a number")
        if d != d.to_integral_value():
            raise ValueError("quantity must be a whole number")
        if d <= 0:
            raise ValueError("quantity must be > 0")
        return int(d)

    @field_validator("unit_cost", mode="before")
    @classmethod
    def _non_negative_cost(cls, v: Any) -> Decimal:
        d = parse_decimal(v)
        if d is None:
            raise ValueError("unit cost must be a number")
        if d < 0:
            raise ValueError("unit cost must be >= 0")
        return d

    def as_new_item(self) -> StockItem:
        return StockItem(
            code=self.code,
            description=self.description,
            brand=self.brand,
            current_quantity=Decimal(self.incoming_quantity),
            unit_cost=self.unit_cost,
            unit=self.unit,
        )


class StockItemRead(BaseModel):
    id: Optional[int] = None
    code: str
    description: str
    brand: str
    current_quantity: Decimal
    unit_cost: Decimal
    unit: str
    stock_value: Decimal
    low_stock: bool


class StockSummary(BaseModel):
    item_count: int
    total_value: Decimal
    low_stock_count: int
    low_stock_threshold: int
    items: List[StockItemRead]
