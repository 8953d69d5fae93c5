import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.router import router
from storefront.config import settings
from storefront.logging_config import configure_logging
from storefront.models.catalog import warn_missing_size_prices
from storefront.services.gemini import GeminiClient
from storefront.services.sessions import SessionRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup: one upstream client and an empty session registry
    configure_logging(settings.LOG_LEVEL)
    if not settings.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY is not set; assistant and image search will fall back to error messages")
    warn_missing_size_prices()
    app.state.gemini = GeminiClient(
        api_key=settings.GEMINI_API_KEY,
        base_url=settings.GEMINI_API_BASE,
        timeout=settings.GEMINI_TIMEOUT,
    )
    app.state.registry = SessionRegistry(app.state.gemini, settings)
    yield
    # shutdown: close the upstream client
    await app.state.gemini.close()


app = FastAPI(
    title="Zephyra Storefront",
    description="Storefront backend for the Zephyra beauty brand: catalog, cart, checkout and an AI shopping assistant.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}
