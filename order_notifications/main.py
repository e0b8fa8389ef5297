# order_notifications/main.py
from fastapi import FastAPI
from contextlib import asynccontextmanager
from order_notifications.presentation.api import router
from order_notifications.database import create_tables, engine
import logging

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await create_tables()
        logger.info("Tables ready")
    except Exception as e:
        logger.error(f"Could not create tables: {e}")

    yield

    await engine.dispose()
    logger.info("Shutting down")

app = FastAPI(
    title="Order Notifications",
    description="Order status notifications over email, WhatsApp and internal records",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(router, prefix="/api")


@app.get("/health")
async def health():
    return {"status": "healthy"}
