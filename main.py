from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
from dotenv import load_dotenv

# Load environment variables from .env file FIRST
env_path = os.path.join(os.path.dirname(__file__), '.env')
load_dotenv(dotenv_path=env_path)

from app.config import settings, validate_settings
from app.infra.mongodb import create_client, get_database, close_client, ensure_indexes
from app.routes import contracts_router, memory_router, webhooks_router, admin_router
from app.utils.openai_service import OpenAIService

logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    validate_settings()

    client = create_client()
    app.state.mongo_client = client
    app.state.db = get_database(client)
    ensure_indexes(app.state.db)

    if settings.OPENAI_API_KEY:
        app.state.openai_service = OpenAIService(
            api_key=settings.OPENAI_API_KEY,
            llm_model=settings.OPENAI_LLM_MODEL,
            extraction_model=settings.OPENAI_EXTRACTION_MODEL
        )
    else:
        logger.warning("OpenAI API key not configured, contracts will use the local template")
        app.state.openai_service = None

    yield

    close_client(client)


app = FastAPI(
    title="ProposalFast Contract Service",
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
async def root():
    return {
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    return {"status": "ok"}


app.include_router(contracts_router)
app.include_router(memory_router)
app.include_router(webhooks_router)
app.include_router(admin_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level="info",
    )
