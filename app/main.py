"""
DarkStore - Backend API
Catálogo, checkout, pedidos e integrações da loja
"""
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables before settings are read
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import auth, cart, catalog, checkout, coupons, dashboard, integrations, media, orders, partners, products, shipping
from app.core.config import settings
from app.core.database import CONNECTION_TIMEOUT, get_db_connection, init_schema
from app.core.rate_limit import RateLimitMiddleware

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.DB_AUTO_CREATE:
        try:
            init_schema()
        except Exception as e:
            logger.error(f"Could not create database schema: {e}")
    logger.info(f"{settings.API_TITLE} {settings.API_VERSION} started")
    yield


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    lifespan=lifespan,
)

# Rate limiting runs inside CORS so 429 responses still carry CORS headers
app.add_middleware(RateLimitMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"https://.*\.vercel\.app",  # Vercel preview/production deployments
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["*"],
)

# Include API routers
app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(catalog.categories_router)
app.include_router(catalog.brands_router)
app.include_router(catalog.promotions_router)
app.include_router(media.router)
app.include_router(coupons.router, prefix="/api/v1/coupons", tags=["Coupons"])
app.include_router(partners.router, prefix="/api/v1/partners", tags=["Partners"])
app.include_router(shipping.router, prefix="/api/v1/shipping", tags=["Shipping"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])

# Checkout (Mercado Pago)
app.include_router(checkout.checkout_router)
app.include_router(checkout.payments_router)

# Cart sync and the abandoned-cart cron
app.include_router(cart.cart_router)
app.include_router(cart.cron_router)

app.include_router(integrations.router)
app.include_router(dashboard.router)


@app.get("/")
async def root():
    """Endpoint raiz - verificação de estado da API"""
    return {
        "message": f"{settings.API_TITLE} - {settings.STORE_NAME}",
        "status": "online",
        "version": settings.API_VERSION,
    }


@app.get("/health")
async def health():
    """Health check endpoint para monitoramento - testa a conexão com o banco"""
    start_time = time.time()

    db_status = "unknown"
    db_latency_ms = None
    db_error = None

    try:
        # Minimal retry (fast check)
        conn = get_db_connection(max_retries=1, retry_delay=0.5)
        cursor = conn.cursor()

        db_start = time.time()
        cursor.execute("SELECT 1")
        cursor.fetchone()
        db_latency_ms = round((time.time() - db_start) * 1000, 2)

        cursor.close()
        conn.close()
        db_status = "connected"
    except Exception as e:
        db_status = "disconnected"
        db_error = str(e)

    total_latency_ms = round((time.time() - start_time) * 1000, 2)

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "service": "darkstore-api",
        "version": settings.API_VERSION,
        "database": {
            "status": db_status,
            "latency_ms": db_latency_ms,
            "error": db_error,
            "connection_timeout_s": CONNECTION_TIMEOUT
        },
        "total_latency_ms": total_latency_ms
    }
