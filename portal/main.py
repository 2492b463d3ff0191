from contextlib import asynccontextmanager
from fastapi import FastAPI
import logging
from portal.core.config import settings
from portal.core.middleware import AuditMiddleware
from portal.db.store import store
from portal.api import audit, collections, health, payments, payslips

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Seed the process-wide active tenant once at startup
    store.seed_default_users()
    logger.info(f"{settings.PROJECT_NAME} started; active org: {store.active_org()}")
    yield

app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
app.add_middleware(AuditMiddleware)

# Include routers
app.include_router(health.router)
app.include_router(collections.router)
app.include_router(payments.router)
app.include_router(payslips.router)
app.include_router(audit.router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
