import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clients.data_api import DataApiClient
from clients.shop_api import ShopApi
from core.config import settings
from routers.billing import router as billing_router
from routers.dashboard import router as dashboard_router
from routers.expenses import router as expenses_router
from routers.inventory import router as inventory_router
from routers.service_orders import router as service_orders_router
from workflow.controller import InventoryController

logger = logging.getLogger(__name__)


def create_app(shop_api: Optional[ShopApi] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        shop = shop_api or ShopApi(DataApiClient(settings.data_api_url, timeout=settings.data_api_timeout))
        inventory = InventoryController(shop.stock_items, feedback_seconds=settings.autofill_feedback_seconds)
        app.state.shop_api = shop
        app.state.inventory = inventory
        await inventory.refresh()
        logger.info("inventory loaded: %s items from %s", len(inventory.state.catalog), shop.client.base_url)
        yield
        inventory.close()
        await shop.aclose()

    app = FastAPI(
        title="Oficina Console API",
        description="Stock intake, billing, expenses and service orders for the repair shop",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Inventory screen (stateful workflow)
    app.include_router(inventory_router, prefix="/inventory", tags=["inventory"])

    # Shop data views
    app.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
    app.include_router(billing_router, prefix="/billing", tags=["billing"])
    app.include_router(expenses_router, prefix="/expenses", tags=["expenses"])
    app.include_router(service_orders_router, prefix="/service-orders", tags=["service-orders"])
    return app


logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
