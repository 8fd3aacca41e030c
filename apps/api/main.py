from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from notevault_api.dependencies import get_settings, get_vault
from notevault_api.domain.exceptions import VaultError
from notevault_api.interface.api.routes import STATUS_BY_CODE, router


def create_app() -> FastAPI:
    app = FastAPI(title="Notevault API", version="0.1.0")

    get_settings.cache_clear()
    get_vault.cache_clear()
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    logger = logging.getLogger("notevault.api")

    @app.exception_handler(VaultError)
    async def vault_error_handler(request: Request, exc: VaultError):
        rid = getattr(request.state, "request_id", "")
        logger.info("vault_error", extra={"rid": rid, "code": exc.code.value, "detail": exc.message})
        return JSONResponse(
            status_code=STATUS_BY_CODE.get(exc.code, 500),
            content={"detail": exc.message, "code": exc.code.value},
        )

    @app.middleware("http")
    async def request_id_and_logging(request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()

        if settings.api_auth_mode == "bearer":
            if request.url.path != "/health":
                token = settings.api_auth_token or ""
                auth = request.headers.get("authorization") or ""
                if not token or auth != f"Bearer {token}":
                    return JSONResponse(
                        status_code=401,
                        content={"detail": "unauthorized", "code": "unauthorized"},
                        headers={"X-Request-ID": request_id},
                    )

        try:
            response = await call_next(request)
        except Exception:
            dt_ms = (time.perf_counter() - start) * 1000.0
            logger.exception("request_error", extra={"rid": request_id, "path": request.url.path, "ms": dt_ms})
            return JSONResponse(
                status_code=500,
                content={"detail": "internal_error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )

        dt_ms = (time.perf_counter() - start) * 1000.0
        fields = {
            "rid": request_id,
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "ms": dt_ms,
        }
        if settings.api_debug_log:
            fields["query"] = request.url.query
        logger.info("request", extra=fields)
        response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(router)
    return app


app = create_app()
