"""
Async client for the shop data API.

What it provides:
- DataApiClient: one shared httpx.AsyncClient, JSON in/out, HTTP failures
  mapped onto core.errors.DataApiError subclasses
- Resource: list/create/update/delete for one REST collection, with every
  payload validated into its pydantic schema at this boundary

Status mapping:
- 404            -> NotFoundError
- other 4xx      -> ConflictError
- 5xx / network  -> TransientError

The server's own message (``message``, ``error`` or ``detail`` in the JSON
body) is kept verbatim on ``exc.server_message``.
"""

import logging
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from core.errors import ConflictError, DataApiError, NotFoundError, TransientError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)
ItemId = Union[int, str]

INVALID_RESPONSE = "Resposta inválida do servidor"


def _server_message(resp: httpx.Response) -> Optional[str]:
    try:
        data = resp.json()
    except ValueError:
        if resp.headers.get("content-type", "").startswith("text/plain"):
            return resp.text.strip() or None
        return None
    if isinstance(data, str):
        return data.strip() or None
    if not isinstance(data, dict):
        return None
    for key in ("message", "error", "detail"):
        value = data.get(key)
        if isinstance(value, dict):
            value = value.get("message")
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


class DataApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    def _error_for(self, method: str, path: str, resp: httpx.Response) -> DataApiError:
        server_message = _server_message(resp)
        status_code = resp.status_code
        logger.warning("%s %s failed (%s): %s", method, path, status_code, server_message or resp.text[:200])
        if status_code == 404:
            cls: Type[DataApiError] = NotFoundError
        elif status_code < 500:
            cls = ConflictError
        else:
            cls = TransientError
        return cls(status_code=status_code, server_message=server_message, method=method, path=path)

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = f"/{path.lstrip('/')}"
        try:
            resp = await self._client.request(method, url, json=json, params=params)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %r", method, path, e)
            raise TransientError(method=method, path=path) from e

        if resp.status_code >= 400:
            raise self._error_for(method, path, resp)

        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            logger.warning("%s %s returned a non-JSON body", method, path)
            raise TransientError(INVALID_RESPONSE, method=method, path=path) from e


def parse_as(schema: Type[T], data: Any) -> T:
    try:
        return schema.model_validate(data)
    except SchemaValidationError as e:
        logger.warning("invalid %s payload: %s", schema.__name__, e)
        raise TransientError(INVALID_RESPONSE, schema=schema.__name__) from e


def parse_list(schema: Type[T], data: Any) -> List[T]:
    if not isinstance(data, list):
        raise TransientError(INVALID_RESPONSE, schema=schema.__name__)
    return [parse_as(schema, row) for row in data]


class Resource(Generic[T]):
    """One REST collection of the shop API (``GET/POST path``, ``PUT/DELETE path/{id}``)."""

    def __init__(
        self,
        client: DataApiClient,
        path: str,
        schema: Type[T],
        to_payload: Optional[Callable[[T], Dict[str, Any]]] = None,
    ):
        self.client = client
        self.path = "/" + path.strip("/")
        self.schema = schema
        self.to_payload = to_payload

    def _maybe_parse(self, data: Any) -> Optional[T]:
        # create/update answers vary between endpoints; the caller reloads anyway
        if not isinstance(data, dict):
            return None
        try:
            return self.schema.model_validate(data)
        except SchemaValidationError:
            return None

    async def list(self) -> List[T]:
        data = await self.client.request("GET", self.path)
        return parse_list(self.schema, data or [])

    def _payload(self, item: T) -> Dict[str, Any]:
        if self.to_payload is None:
            raise TypeError(f"{self.path} is read-only in this client")
        return self.to_payload(item)

    async def create(self, item: T) -> Optional[T]:
        data = await self.client.request("POST", self.path, json=self._payload(item))
        return self._maybe_parse(data)

    async def update(self, item_id: ItemId, item: T) -> Optional[T]:
        data = await self.client.request("PUT", f"{self.path}/{item_id}", json=self._payload(item))
        return self._maybe_parse(data)

    async def delete(self, item_id: ItemId) -> None:
        await self.client.request("DELETE", f"{self.path}/{item_id}")
