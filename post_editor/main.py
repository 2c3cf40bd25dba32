import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from post_editor import dependencies as deps
from post_editor.routers import backends, files
from post_editor.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Post Editor API", description="Blog posts as a virtual filesystem")


@asynccontextmanager
async def lifespan(app: FastAPI):
    registry = deps.get_registry()
    logger.info(f"Registered backends: {', '.join(registry.names())}")

    try:
        yield
    finally:
        deps.close_backend()
        logger.info("Post editor backend released")


app.router.lifespan_context = lifespan

app.include_router(backends.router)
app.include_router(files.router)


@app.get("/")
async def root():
    return {"message": "Post Editor API is running"}
