import logging

logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
)
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from prometheus_fastapi_instrumentator import Instrumentator

from coderunner.config import get_settings
from coderunner.controllers.health import router as health_router
from coderunner.controllers.language import router as language_router
from coderunner.controllers.submissions import router as submissions_router
from coderunner.errors import register_exception_handlers
from coderunner.lifespan import cleanup_resources, setup_resources
from coderunner.middleware import SubmissionLogMiddleware

settings = get_settings()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    resources = setup_resources()
    try:
        yield
    finally:
        cleanup_resources(resources)


app = FastAPI(title="Code Runner", version="1.0.0", lifespan=lifespan)
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.debug.request:
    logging.getLogger("coderunner.http").setLevel(logging.DEBUG)
    app.add_middleware(SubmissionLogMiddleware)

app.include_router(health_router)
app.include_router(language_router)
app.include_router(submissions_router)

Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

# Mounted last so the API routes above take precedence over client files
if settings.client.directory.is_dir():
    app.mount("/", StaticFiles(directory=settings.client.directory, html=True), name="client")
