import logging
import time
import uuid

import uvicorn
from fastapi import FastAPI, Request

from relay.api.endpoints.ingress import router as ingress_router
from relay.api.errors import register_exception_handlers
from relay.config import Settings, settings

logger = logging.getLogger("relay.api")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def create_app(settings: Settings = settings) -> FastAPI:
    app = FastAPI(title="Request Relay API")
    app.state.settings = settings

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Tag the request with X-Request-ID (caller's or a fresh UUID4) and log it."""

        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = request_id
        logger.info(
            "access request_id=%s method=%s path=%s status=%s duration_ms=%.2f",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response

    register_exception_handlers(app)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    app.include_router(ingress_router)
    if settings.api_prefix:
        app.include_router(ingress_router, prefix=settings.api_prefix)
    return app


configure_logging(settings.log_level)
app = create_app()


def run() -> None:
    """Serve the ingress API (``relay-api``)."""

    uvicorn.run("relay.main:app", host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())
