# orderdesk/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from orderdesk.core.config import get_settings

# Routers
from orderdesk.routers.auth import router as auth_router
from orderdesk.routers.cart import router as cart_router
from orderdesk.routers.customers import router as customers_router
from orderdesk.routers.orders import router as orders_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Log which ERP backend requests are forwarded to.

    Shutdown:
      - Carts are in-memory only; nothing to flush.
    """
    logger.info(f"Startup: forwarding ERP calls to {settings.ERP_API_BASE_URL}")
    yield
    logger.info("Shutdown: in-progress carts discarded")


app = FastAPI(
    title=settings.PROJECT_NAME or "Order Desk API",
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(auth_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)
app.include_router(customers_router, prefix=settings.API_V1_STR)
app.include_router(orders_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "orderdesk"}
