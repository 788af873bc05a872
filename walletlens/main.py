from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from .routes import blockchain

from .config import GZIP_MINIMUM_SIZE, EnvConfigSource
from .services.registry import ProviderRegistry
from .utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.registry = ProviderRegistry(EnvConfigSource())
    logger.info("Provider registry ready")
    yield
    await app.state.registry.close()
    logger.info("Provider registry closed")


app = FastAPI(title="walletlens", lifespan=lifespan)

app.add_middleware(GZipMiddleware, minimum_size=GZIP_MINIMUM_SIZE)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(blockchain.router)
