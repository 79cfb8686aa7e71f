import asyncio
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.example_suggestion_routes import router as example_suggestion_router
from .api.word_suggestion_routes import router as word_suggestion_router
from .config import CORS_ORIGINS, LOG_LEVEL
from .db import ensure_indexes
from .error_handlers import register_exception_handlers

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(title="Igbo Editor API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Range"],
)

register_exception_handlers(app)

app.include_router(word_suggestion_router)
app.include_router(example_suggestion_router)


@app.on_event("startup")
async def startup_indexes():
    # Index setup must not block boot.
    asyncio.create_task(ensure_indexes())


@app.get("/health")
async def health_check():
    return {"status": "ok"}
