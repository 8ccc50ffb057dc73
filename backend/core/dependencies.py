from fastapi import HTTPException, Request, status

from clients.shop_api import ShopApi
from core.errors import ConflictError, DataApiError, NotFoundError, ValidationError, WorkflowError
from workflow.controller import InventoryController


def get_shop_api(request: Request) -> ShopApi:
    return request.app.state.shop_api


def get_inventory_controller(request: Request) -> InventoryController:
    return request.app.state.inventory


def http_error(e: Exception) -> HTTPException:
    """Map console errors onto the HTTP status the UI expects."""
    if isinstance(e, ValidationError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.as_dict())
    if isinstance(e, WorkflowError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.as_dict())
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    if isinstance(e, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    if isinstance(e, DataApiError):
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message)
    raise TypeError(f"not a console error: {e!r}")
