"""Pytest configuration and fixtures."""

import asyncio
import json
import re
from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from clients.data_api import DataApiClient
from clients.shop_api import ShopApi
from core.errors import DataApiError
from main import create_app
from schemas.stock import StockItem

BASE_URL = "http://shop.test"


def _product_rows() -> Dict[int, dict]:
    return {
        1: {"id": 1, "codigo": "FLT-001", "descricao": "Filtro de óleo", "marca": "Tecfil",
            "qtdeAtual": 10, "precoCusto": 25.5, "unidade": "UN"},
        2: {"id": 2, "codigo": "PAS-220", "descricao": "Pastilha de freio", "marca": "Cobreq",
            "qtdeAtual": 3, "precoCusto": 80, "unidade": "JG"},
    }


class FakeShopBackend:
    """
    In-memory stand-in for the shop data API, mounted on httpx.MockTransport.

    ``fail_next[(method, path)]`` holds a canned error response for the next
    matching call.
    """

    def __init__(self, today: Optional[date] = None):
        self.today = today or date.today()
        self.products = _product_rows()
        self.customers = [
            {"id": 7, "nome_razao_social": "Transportes Silva", "cnpj_cpf": "12.345.678/0001-90", "telefone": None},
            {"id": 3, "nome_razao_social": "auto peças beta", "cnpj_cpf": None, "telefone": "11 9999-0000"},
        ]
        t = self.today
        self.installments = [
            {"id": 1, "data_vencimento": f"{t.isoformat()}T00:00:00", "valor_parcela": 500,
             "numero_documento": "NF-10", "status": "PAGO", "numero_parcela": 1, "total_parcelas": 2,
             "clientes_empresas": {"nome_razao_social": "Transportes Silva"}},
            {"id": 2, "data_vencimento": t.isoformat(), "valor_parcela": 300,
             "numero_documento": "NF-11", "status": "PENDENTE", "numero_parcela": 1, "total_parcelas": 1,
             "clientes_empresas": None},
            {"id": 3, "data_vencimento": (t.replace(day=1) - timedelta(days=40)).isoformat(), "valor_parcela": 120,
             "numero_documento": "NF-02", "status": "PENDENTE", "numero_parcela": 2, "total_parcelas": 2,
             "clientes_empresas": None},
        ]
        self.expenses = [
            {"id": 1, "data_despesa": t.isoformat(), "numero_nf": "123", "tipo_nf": "Nota Fiscal",
             "valor": 200, "fornecedor": "Posto Central", "departamento": "Oficina", "observacoes": None},
            {"id": 2, "data_despesa": t.isoformat(), "numero_nf": None, "tipo_nf": "Recibo",
             "valor": 50, "fornecedor": None, "departamento": "Administrativo", "observacoes": "café"},
        ]
        self.orders = [
            {"id": 10, "placa": "ABC1D23", "veiculo": "Volvo FH", "status": "ABERTA", "total": None,
             "descricao_problema": "Barulho no freio", "data_abertura": t.isoformat(),
             "clientes_empresas": {"nome_razao_social": "Transportes Silva"}},
            {"id": 11, "placa": "XYZ9K88", "veiculo": "Scania R450", "status": "FINALIZADA", "total": 950,
             "descricao_problema": None, "data_abertura": t.isoformat(), "clientes_empresas": None},
        ]
        self.order_items: List[dict] = [
            {"id": 100, "os_id": 10, "tipo": "SERVICO", "descricao": "Mão de obra", "quantidade": 2,
             "preco_un": 150, "subtotal": 300, "produto_id": None},
        ]
        self.calls: List[Tuple[str, str, Optional[dict]]] = []
        self.fail_next: Dict[Tuple[str, str], httpx.Response] = {}

    # Transport

    def handler(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        body = json.loads(request.content) if request.content else None
        self.calls.append((method, path, body))

        canned = self.fail_next.pop((method, path), None)
        if canned is not None:
            return canned

        for pattern, route_method, fn in self._routes():
            m = re.fullmatch(pattern, path)
            if m and method == route_method:
                return fn(body, *(int(g) for g in m.groups()))
        return httpx.Response(404, json={"error": "rota não encontrada"})

    def _routes(self):
        return [
            (r"/produtos", "GET", self._list_products),
            (r"/produtos", "POST", self._create_product),
            (r"/produtos/(\d+)", "PUT", self._update_product),
            (r"/produtos/(\d+)", "DELETE", self._delete_product),
            (r"/faturamentos", "GET", lambda body: httpx.Response(200, json=self.installments)),
            (r"/faturamentos/lancar", "POST", lambda body: httpx.Response(201, json={"ok": True})),
            (r"/faturamentos/(\d+)/pagar", "PUT", self._pay),
            (r"/clientes", "GET", lambda body: httpx.Response(200, json=self.customers)),
            (r"/clientes", "POST", self._create_customer),
            (r"/despesas", "GET", lambda body: httpx.Response(200, json=self.expenses)),
            (r"/despesas", "POST", self._create_expense),
            (r"/os", "GET", lambda body: httpx.Response(200, json=self.orders)),
            (r"/os", "POST", self._open_order),
            (r"/os/(\d+)/itens", "GET", self._list_items),
            (r"/os/(\d+)/itens", "POST", self._add_item),
            (r"/os/itens/(\d+)", "DELETE", self._remove_item),
            (r"/os/(\d+)/finalizar", "PUT", self._finalize),
        ]

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    # Handlers

    def _list_products(self, body):
        return httpx.Response(200, json=list(self.products.values()))

    def _create_product(self, body):
        code = body["codigo"].strip().lower()
        if any(p["codigo"].strip().lower() == code for p in self.products.values()):
            return httpx.Response(400, json={"error": "duplicate key value violates unique constraint"})
        new_id = max(self.products, default=0) + 1
        self.products[new_id] = {"id": new_id, **body}
        return httpx.Response(201, json=self.products[new_id])

    def _update_product(self, body, item_id):
        if item_id not in self.products:
            return httpx.Response(404, json={"error": "Produto não encontrado"})
        self.products[item_id] = {"id": item_id, **body}
        return httpx.Response(200, json=self.products[item_id])

    def _delete_product(self, body, item_id):
        if self.products.pop(item_id, None) is None:
            return httpx.Response(404, json={"error": "Produto não encontrado"})
        return httpx.Response(204)

    def _pay(self, body, installment_id):
        for row in self.installments:
            if row["id"] == installment_id:
                row["status"] = "PAGO"
                return httpx.Response(200, json=row)
        return httpx.Response(404, json={"message": "Parcela não encontrada"})

    def _create_customer(self, body):
        row = {"id": max(c["id"] for c in self.customers) + 1, "nome_razao_social": body["nome"],
               "cnpj_cpf": body["cnpj"] or None, "telefone": body["telefone"] or None}
        self.customers.append(row)
        return httpx.Response(201, json=row)

    def _open_order(self, body):
        row = {"id": max(o["id"] for o in self.orders) + 1, "placa": body["placa"], "veiculo": body["veiculo"],
               "status": "ABERTA", "total": None, "descricao_problema": body["descricao"],
               "data_abertura": self.today.isoformat(), "cliente_id": body["clienteId"], "clientes_empresas": None}
        self.orders.append(row)
        return httpx.Response(201, json=row)

    def _create_expense(self, body):
        row = {
            "id": len(self.expenses) + 1,
            "data_despesa": body["dataDespesa"],
            "numero_nf": body["numeroNf"],
            "tipo_nf": body["tipoNf"],
            "valor": body["valor"],
            "fornecedor": body["fornecedor"],
            "departamento": body["departamento"],
            "observacoes": body["observacoes"],
        }
        self.expenses.append(row)
        return httpx.Response(201, json=row)

    def _list_items(self, body, order_id):
        return httpx.Response(200, json=[i for i in self.order_items if i["os_id"] == order_id])

    def _add_item(self, body, order_id):
        qty, price = Decimal(str(body["quantidade"])), Decimal(str(body["preco"]))
        row = {
            "id": 100 + len(self.order_items) + 1,
            "os_id": order_id,
            "tipo": body["tipo"],
            "descricao": body["descricao"],
            "quantidade": body["quantidade"],
            "preco_un": body["preco"],
            "subtotal": float(qty * price),
            "produto_id": body["produtoId"],
        }
        self.order_items.append(row)
        product = self.products.get(body["produtoId"] or 0)
        if body["tipo"] == "PECA" and product is not None:
            product["qtdeAtual"] = product["qtdeAtual"] - body["quantidade"]
        return httpx.Response(201, json=row)

    def _remove_item(self, body, item_id):
        self.order_items = [i for i in self.order_items if i["id"] != item_id]
        return httpx.Response(204)

    def _finalize(self, body, order_id):
        for row in self.orders:
            if row["id"] == order_id:
                row["status"] = "FINALIZADA"
                row["total"] = body["total"]
                return httpx.Response(200, json=row)
        return httpx.Response(404, json={"error": "OS não encontrada"})


class FakeStockStore:
    """
    In-memory StockItemStore for controller tests.

    ``gate`` (an asyncio.Event) holds every write until it is set, so a test
    can observe the state while a call is still running.
    """

    def __init__(self, items: Optional[List[StockItem]] = None):
        self.items: Dict[int, StockItem] = {i.id: i for i in (items or [])}
        self.fail: Dict[str, DataApiError] = {}
        self.gate: Optional[asyncio.Event] = None
        self.calls: List[tuple] = []

    async def _hold(self, op: str) -> None:
        if self.gate is not None:
            await self.gate.wait()
        error = self.fail.pop(op, None)
        if error is not None:
            raise error

    async def list(self) -> List[StockItem]:
        self.calls.append(("list",))
        await self._hold("list")
        return list(self.items.values())

    async def create(self, item: StockItem) -> StockItem:
        self.calls.append(("create", item))
        await self._hold("create")
        new_id = max(self.items, default=0) + 1
        created = item.model_copy(update={"id": new_id})
        self.items[new_id] = created
        return created

    async def update(self, item_id: int, item: StockItem) -> StockItem:
        self.calls.append(("update", item_id, item))
        await self._hold("update")
        self.items[item_id] = item
        return item

    async def delete(self, item_id: int) -> None:
        self.calls.append(("delete", item_id))
        await self._hold("delete")
        self.items.pop(item_id, None)


def make_item(item_id: int, code: str, description: str, quantity="0", cost="0", brand="", unit="UN") -> StockItem:
    return StockItem(
        id=item_id,
        code=code,
        description=description,
        brand=brand,
        current_quantity=Decimal(quantity),
        unit_cost=Decimal(cost),
        unit=unit,
    )


@pytest.fixture
def catalog() -> List[StockItem]:
    return [
        make_item(1, "FLT-001", "Filtro de óleo", "10", "25.50", "Tecfil"),
        make_item(2, "PAS-220", "Pastilha de freio", "3", "80", "Cobreq", "JG"),
    ]


@pytest.fixture
def stock_store(catalog) -> FakeStockStore:
    return FakeStockStore(catalog)


@pytest.fixture
def shop_backend() -> FakeShopBackend:
    return FakeShopBackend()


@pytest.fixture
def data_api(shop_backend):
    return DataApiClient(BASE_URL, transport=shop_backend.transport())


@pytest.fixture
def shop_api(data_api) -> ShopApi:
    return ShopApi(data_api)


@pytest.fixture
def client(shop_backend):
    """Test client wired to the fake shop backend (lifespan loads the catalog)."""
    app = create_app(shop_api=ShopApi(DataApiClient(BASE_URL, transport=shop_backend.transport())))
    with TestClient(app) as test_client:
        yield test_client
