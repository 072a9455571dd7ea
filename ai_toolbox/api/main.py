"""AI Toolbox API.

HTTP surface over the workflow execution core:
- Workflow definitions and the tokens they expose
- Configured providers (credentials redacted)
- Synchronous workflow runs
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ai_toolbox import __version__, config
from ai_toolbox.api.routes import executor, providers, workflows
from ai_toolbox.providers.registry import get_provider_registry
from ai_toolbox.workflows.registry import get_workflow_registry

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: Pre-load registries
    logger.info("Loading provider definitions...")
    provider_registry = get_provider_registry()
    logger.info(f"Loaded {provider_registry.count()} providers")

    logger.info("Loading workflow definitions...")
    workflow_registry = get_workflow_registry()
    logger.info(f"Loaded {workflow_registry.count()} workflows")

    logger.info("AI Toolbox API ready")
    yield
    logger.info("Shutting down AI Toolbox API")


app = FastAPI(
    title="AI Toolbox API",
    description="""
## Workflow execution core

Runs user-defined workflows of chat and transcription actions.

### Key Endpoints

- `GET /v1/workflows` - List all workflows
- `GET /v1/workflows/{id}/tokens` - Tokens a workflow exposes
- `GET /v1/providers` - Configured providers
- `POST /v1/executor/workflows/{id}/run` - Run a workflow
""",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(workflows.router, prefix="/v1")
app.include_router(providers.router, prefix="/v1")
app.include_router(executor.router, prefix="/v1")


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "AI Toolbox API",
        "version": __version__,
        "docs": "/docs",
        "endpoints": {
            "workflows": "/v1/workflows",
            "providers": "/v1/providers",
            "executor": "/v1/executor",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "workflows_loaded": get_workflow_registry().count(),
        "providers_loaded": get_provider_registry().count(),
    }
