# app/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI
from sqlmodel import Session

from app.core.config import get_settings
from app.database import create_db_and_tables, engine
from app.seed import seed_demo_data
from app.services.cart_store import CartSessionStore

# Import models so SQLModel metadata is populated before create_all()
from app.models import user as _user_models  # noqa: F401
from app.models import product as _product_models  # noqa: F401
from app.models import promotion as _promotion_models  # noqa: F401
from app.models import order as _order_models  # noqa: F401


# Routers
from app.routers.cashier import router as cashier_router
from app.routers.orders import router as orders_router
from app.routers.products import router as products_router
from app.routers.promotions import router as promotions_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.
      - Optionally seed the demo catalog.
      - Create the in-memory cashier cart store.

    Shutdown:
      - Open cashier carts are dropped with the process.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise

    if settings.SEED_DEMO_DATA:
        with Session(engine) as session:
            seed_demo_data(session)

    app.state.carts = CartSessionStore(ttl_seconds=settings.CART_SESSION_TTL_MINUTES * 60)
    yield
    logger.info("Shutdown: discarding %d open cashier carts", len(app.state.carts))


app = FastAPI(
    title=settings.PROJECT_NAME or "Laundry Cashier API",
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(cashier_router, prefix=settings.API_V1_STR)
app.include_router(orders_router, prefix=settings.API_V1_STR)
app.include_router(products_router, prefix=settings.API_V1_STR)
app.include_router(promotions_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "laundry-cashier"}
