from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from core.converters import date_prefix


class Expense(BaseModel):
    """An expense record (``/despesas``)."""

    id: int
    expense_date: date = Field(validation_alias="data_despesa")
    invoice_number: Optional[str] = Field(None, validation_alias="numero_nf")
    invoice_type: Optional[str] = Field(None, validation_alias="tipo_nf")
    amount: Decimal = Field(validation_alias="valor")
    supplier: Optional[str] = Field(None, validation_alias="fornecedor")
    department: str = Field("", validation_alias="departamento")
    notes: Optional[str] = Field(None, validation_alias="observacoes")

    class Config:
        populate_by_name = True

    @field_validator("expense_date", mode="before")
    @classmethod
    def _expense_date(cls, v):
        return date_prefix(v)

    @field_validator("department", mode="before")
    @classmethod
    def _department(cls, v) -> str:
        return (v or "").strip()


class ExpenseCreate(BaseModel):
    expense_date: date
    invoice_number: str = ""
    invoice_type: str = "Nota Fiscal"
    amount: Decimal
    supplier: str = ""
    department: str
    notes: str = ""

    @field_validator("amount")
    @classmethod
    def _amount_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("amount must be > 0")
        return v

    @field_validator("department")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("field is required")
        return v


class ExpenseSummary(BaseModel):
    month: str
    department: str
    total: Decimal
    by_department: Dict[str, Decimal]
    departments: List[str]
    largest_department_total: Decimal
    expenses: List[Expense]
