"""FastAPI application entrypoint.

This module assembles the application: entity routers, the auth router,
problem-details exception handlers and the request-context middleware.

Endpoints implemented (per entity: Heater, Fruit, Offer, FruitProduct,
SensorLocation, SensorSystem):
- GET /<Entity>
- GET /<Entity>/{id}
- POST /<Entity>
- PUT /<Entity>/{id}
- DELETE /<Entity>/{id}

Plus:
- POST /auth/register
- GET /auth/me
- GET /csrf
- GET /health
"""

import json
import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from .config import settings
from .database import create_db_and_tables
from .problems import install_problem_handlers
from .routers import ENTITY_ROUTERS, auth_router

app = FastAPI(title="Unconv API")
logger = logging.getLogger("unconv.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

# Wide-open CORS keeps local frontends working without extra config in dev.
if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

install_problem_handlers(app)
app.include_router(auth_router)
for router in ENTITY_ROUTERS:
    app.include_router(router)

create_db_and_tables()


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info(
        "request_done %s",
        json.dumps(
            {
                "request_id": req_id,
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
                "client": request.client.host if request.client else "unknown",
            },
            ensure_ascii=True,
        ),
    )
    return response


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}
