# coding=utf-8
# SPDX-License-Identifier: Apache-2.0
"""
param-patch FastAPI server.

Exposes stored entities and a single apply call for compare-and-set
parameter patches.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import HOST, LOG_FORMAT, PARAMPATCH_LOG_LEVEL, PORT, WORKERS

# Configure logging
logging.basicConfig(
    level=PARAMPATCH_LOG_LEVEL,
    format=LOG_FORMAT,
)
logger = logging.getLogger(__name__)

# CORS configuration
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for store initialization."""
    display_host = "localhost" if HOST == "0.0.0.0" else HOST
    logger.info(f"param-patch {__version__} starting on http://{display_host}:{PORT}")
    logger.info(f"API Documentation: http://{display_host}:{PORT}/docs")

    try:
        from .stores import get_store
        store = get_store()
        logger.info(f"Parameter store '{store.get_store_name()}' ready")
    except Exception as e:
        logger.warning(f"Parameter store initialization delayed: {e}")

    yield

    from .services.patch_service import reset_entity_locks
    reset_entity_locks()
    logger.info("Server shutting down...")


# Initialize FastAPI app
app = FastAPI(
    title="param-patch API",
    description="""
## param-patch

Compare-and-set patches for CI project parameters.

Each change names a parameter, the value it must currently hold and the
value to set. A patch is applied entirely or not at all.

```
POST /v1/entities/DistributedGradle_Check/patch
{"changes": [{"key": "env.X", "expected": "%a%", "newValue": "secretref:1"}]}
```
""",
    version=__version__,
    lifespan=lifespan,
    openapi_url="/openapi.json",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
from .routers.entities import router as entities_router
app.include_router(entities_router, prefix="/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint with store information."""
    try:
        from .stores import get_store

        store = get_store()
        return {
            "status": "healthy",
            "store": store.get_store_info(),
            "version": __version__,
        }
    except Exception as e:
        logger.error(f"Health check error: {e}")
        return {
            "status": "error",
            "error": str(e),
            "store": {"name": os.getenv("PARAMPATCH_STORE", "json")},
            "version": __version__,
        }


def main():
    """Run the server using uvicorn."""
    import uvicorn

    uvicorn.run(
        "parampatch.main:app",
        host=HOST,
        port=PORT,
        workers=WORKERS,
        reload=False,
    )


if __name__ == "__main__":
    main()
