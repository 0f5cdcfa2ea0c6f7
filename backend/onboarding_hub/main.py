import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from onboarding_hub.config import settings
from onboarding_hub.routers import (
    clients,
    content,
    deliverables,
    documents,
    engagements,
    insight,
    onboarding_steps,
    reporting,
    risks,
    signatures,
    signing,
    storage,
    universal_documents,
)

logger = logging.getLogger("onboarding_hub")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.setLevel(settings.log_level.upper())
    # Startup: create the schema and storage buckets if missing
    from onboarding_hub.database import init_db
    from onboarding_hub.utils.filesystem import ensure_storage_dirs
    try:
        init_db(settings.db_path)
        ensure_storage_dirs(settings.storage_path)
        logger.info("Database and storage ready under %s", settings.data_path)
    except Exception as exc:
        logger.error("Could not initialise database or storage: %s", exc)
    yield


app = FastAPI(
    title="Client Onboarding Hub",
    description="Client onboarding, delivery tracking and e-signature backend",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(clients.router, prefix=settings.api_prefix)
app.include_router(documents.router, prefix=settings.api_prefix)
app.include_router(universal_documents.router, prefix=settings.api_prefix)
app.include_router(storage.router, prefix=settings.api_prefix)
app.include_router(onboarding_steps.router, prefix=settings.api_prefix)
app.include_router(engagements.router, prefix=settings.api_prefix)
app.include_router(risks.router, prefix=settings.api_prefix)
app.include_router(deliverables.router, prefix=settings.api_prefix)
app.include_router(signatures.router, prefix=settings.api_prefix)
app.include_router(signing.router, prefix=settings.api_prefix)
app.include_router(content.router, prefix=settings.api_prefix)
app.include_router(insight.router, prefix=settings.api_prefix)
app.include_router(reporting.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}
