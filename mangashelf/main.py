import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from mangashelf.api.library import router as library_router
from mangashelf.api.reader import router as reader_router
from mangashelf.core.config import LOG_LEVEL
from mangashelf.db.init_db import init_db
from mangashelf.services.extractor import get_extractor

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("library database ready")
    yield
    await get_extractor().close()

app = FastAPI(title="mangashelf", lifespan=lifespan)
app.include_router(library_router, prefix="/library")
app.include_router(reader_router, prefix="/reader")
