from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from core.converters import date_prefix

InstallmentStatus = Literal["PENDENTE", "PAGO", "ATRASADO"]


class CustomerRef(BaseModel):
    name: str = Field("", validation_alias="nome_razao_social")
    tax_id: Optional[str] = Field(None, validation_alias="cnpj_cpf")
    phone: Optional[str] = Field(None, validation_alias="telefone")

    class Config:
        populate_by_name = True


class Customer(CustomerRef):
    id: int


class CustomerCreate(BaseModel):
    name: str
    tax_id: str = ""
    phone: str = ""

    @field_validator("name")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v

    @field_validator("tax_id", "phone")
    @classmethod
    def _strip_optional(cls, v: str) -> str:
        return (v or "").strip()


class Installment(BaseModel):
    """One billing installment (``/faturamentos``)."""

    id: int
    due_date: date = Field(validation_alias="data_vencimento")
    amount: Decimal = Field(validation_alias="valor_parcela")
    document_number: Optional[str] = Field(None, validation_alias="numero_documento")
    status: str = "PENDENTE"
    number: int = Field(1, validation_alias="numero_parcela")
    total: int = Field(1, validation_alias="total_parcelas")
    customer: Optional[CustomerRef] = Field(None, validation_alias="clientes_empresas")

    class Config:
        populate_by_name = True

    @field_validator("due_date", mode="before")
    @classmethod
    def _due_date(cls, v):
        return date_prefix(v)

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, v) -> str:
        return (v or "PENDENTE").strip().upper()


class InvoiceLaunch(BaseModel):
    customer_id: int
    total_amount: Decimal
    installments: int = 1
    document_number: str
    first_due_date: date

    @field_validator("total_amount")
    @classmethod
    def _amount_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("total_amount must be > 0")
        return v

    @field_validator("installments")
    @classmethod
    def _installments_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("installments must be >= 1")
        return v

    @field_validator("document_number")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v


class InstallmentPreview(BaseModel):
    number: int
    total: int
    due_date: date
    amount: Decimal


class InstallmentRead(BaseModel):
    id: int
    due_date: date
    amount: Decimal
    document_number: Optional[str] = None
    number: int
    total: int
    status: InstallmentStatus
    customer_name: Optional[str] = None


class BillingSummary(BaseModel):
    month: str
    expected: Decimal
    received: Decimal
    receivable: Decimal
    overdue_total: Decimal
    installments: List[InstallmentRead]
