from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Union

Number = Union[int, float]


def to_number(value: Decimal) -> Number:
    """Decimal -> JSON number, keeping whole values as ints."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Lenient numeric parse for operator input ("12,50", " 3 ", 7.5).

    Returns None when the value is blank or not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        d = value
    elif isinstance(value, (int, float)):
        d = Decimal(str(value))
    else:
        raw = str(value).strip().replace(",", ".")
        if not raw:
            return None
        try:
            d = Decimal(raw)
        except InvalidOperation:
            return None
    if not d.is_finite():
        return None
    return d


def date_prefix(value: Any) -> Any:
    # The shop API sends dates as ISO strings, sometimes with a time part.
    if isinstance(value, str):
        return value.strip()[:10]
    return value


def format_money(value: Any) -> str:
    """Render a BRL amount the way the shop prints it: ``R$ 1.234,56``."""
    if value is None or value == "":
        return "R$ 0,00"
    amount = parse_decimal(value)
    if amount is None:
        return "R$ 0,00"
    quantized = amount.quantize(Decimal("0.01"))
    sign = "-" if quantized < 0 else ""
    us = f"{abs(quantized):,.2f}"
    br = us.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {br}"


def stock_item_to_payload(item) -> Dict[str, Any]:
    """Convert a StockItem schema to the shop API body (id travels in the URL)."""
    return {
        "codigo": item.code,
        "descricao": item.description,
        "marca": item.brand,
        "qtdeAtual": to_number(item.current_quantity),
        "precoCusto": to_number(item.unit_cost),
        "unidade": item.unit,
    }


def invoice_launch_to_payload(request) -> Dict[str, Any]:
    return {
        "clienteId": request.customer_id,
        "valorTotal": to_number(request.total_amount),
        "qtdeParcelas": request.installments,
        "numeroDocumento": request.document_number,
        "dataPrimeiroVencimento": request.first_due_date.isoformat(),
    }


def customer_to_payload(customer) -> Dict[str, Any]:
    return {
        "nome": customer.name,
        "cnpj": customer.tax_id,
        "telefone": customer.phone,
    }


def service_order_to_payload(order) -> Dict[str, Any]:
    return {
        "clienteId": order.customer_id,
        "placa": order.plate,
        "veiculo": order.vehicle,
        "descricao": order.problem_description,
    }


def expense_to_payload(expense, department: str) -> Dict[str, Any]:
    return {
        "dataDespesa": expense.expense_date.isoformat(),
        "numeroNf": expense.invoice_number,
        "tipoNf": expense.invoice_type,
        "valor": to_number(expense.amount),
        "fornecedor": expense.supplier,
        "departamento": department,
        "observacoes": expense.notes,
    }


def line_item_to_payload(order_id: int, item, description: str) -> Dict[str, Any]:
    return {
        "osId": order_id,
        "produtoId": item.product_id,
        "descricao": description,
        "tipo": item.kind,
        "quantidade": to_number(item.quantity),
        "preco": to_number(item.unit_price),
    }


def iso_month(d: date) -> str:
    return d.isoformat()[:7]


def in_month(d: date, month: str) -> bool:
    """``month`` is ``YYYY-MM``."""
    return iso_month(d) == month
