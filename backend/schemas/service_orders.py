from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from schemas.billing import CustomerRef

LineItemKind = Literal["PECA", "SERVICO"]


class ServiceOrder(BaseModel):
    """A work order (``/os``)."""

    id: int
    plate: str = Field("", validation_alias="placa")
    vehicle: str = Field("", validation_alias="veiculo")
    status: str = "ABERTA"
    total: Decimal = Decimal("0")
    problem_description: Optional[str] = Field(None, validation_alias="descricao_problema")
    opened_at: Optional[str] = Field(None, validation_alias="data_abertura")
    customer: Optional[CustomerRef] = Field(None, validation_alias="clientes_empresas")

    class Config:
        populate_by_name = True

    @field_validator("total", mode="before")
    @classmethod
    def _total(cls, v):
        return v if v not in (None, "") else Decimal("0")


class ServiceOrderCreate(BaseModel):
    customer_id: int
    plate: str
    vehicle: str = ""
    problem_description: str = ""

    @field_validator("plate")
    @classmethod
    def _plate(cls, v: str) -> str:
        v = (v or "").strip().upper()
        if not v:
            raise ValueError("field is required")
        return v

    @field_validator("vehicle", "problem_description")
    @classmethod
    def _strip_optional(cls, v: str) -> str:
        return (v or "").strip()


class LineItem(BaseModel):
    id: int
    kind: str = Field(validation_alias="tipo")
    description: str = Field("", validation_alias="descricao")
    quantity: Decimal = Field(Decimal("0"), validation_alias="quantidade")
    unit_price: Decimal = Field(Decimal("0"), validation_alias="preco_un")
    subtotal: Decimal = Decimal("0")
    product_id: Optional[int] = Field(None, validation_alias="produto_id")

    class Config:
        populate_by_name = True


class LineItemCreate(BaseModel):
    kind: LineItemKind = "PECA"
    product_id: Optional[int] = None
    description: str = ""
    quantity: Decimal = Decimal("1")
    unit_price: Decimal = Decimal("0")

    @field_validator("quantity")
    @classmethod
    def _quantity_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("quantity must be > 0")
        return v

    @field_validator("unit_price")
    @classmethod
    def _price_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("unit_price must be >= 0")
        return v

    @model_validator(mode="after")
    def _described(self):
        # a part may take its description from the chosen stock item
        if self.kind == "SERVICO" and not self.description.strip():
            raise ValueError("SERVICO requires a description")
        if self.kind == "PECA" and not self.product_id and not self.description.strip():
            raise ValueError("PECA requires product_id or a description")
        return self


class ServiceOrderTotals(BaseModel):
    parts: Decimal
    services: Decimal
    total: Decimal


class ServiceOrderDetail(BaseModel):
    order: ServiceOrder
    items: List[LineItem]
    totals: ServiceOrderTotals
