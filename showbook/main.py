import logging
import os
import time

from fastapi import FastAPI
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from showbook.api.routes.routes import router
from showbook.infrastructure.db.session import engine
from showbook.infrastructure.db.models import Base

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Show Booking Service")
app.include_router(router)


def _wait_for_db() -> None:
    max_retries = int(os.getenv("DB_CONNECT_MAX_RETRIES", "30"))
    retry_delay_seconds = float(os.getenv("DB_CONNECT_RETRY_DELAY", "1.5"))
    backend = engine.url.get_backend_name()

    for attempt in range(1, max_retries + 1):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("%s store is reachable.", backend)
            return
        except OperationalError:
            if attempt == max_retries:
                logger.exception(
                    "%s store not reachable after %s attempts. Check DATABASE_URL.",
                    backend,
                    max_retries,
                )
                raise
            logger.warning(
                "Waiting for %s store (attempt %s/%s), next try in %.1f s",
                backend,
                attempt,
                max_retries,
                retry_delay_seconds,
            )
            time.sleep(retry_delay_seconds)


@app.on_event("startup")
def on_startup() -> None:
    _wait_for_db()
    Base.metadata.create_all(bind=engine)
    logger.info(
        "Show booking store ready. backend=%s tables=%s",
        engine.url.get_backend_name(),
        sorted(Base.metadata.tables),
    )
