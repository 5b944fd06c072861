"""
HTTP adapter for the processing entry point.

    POST /api/order/{order_id}/process

200 with the JSON result payload on success; 400 with the message text for
client-side failures (unknown order, insufficient stock, already
processed); 500 with ``Internal server error: ...`` for notification
failures and any unexpected kernel error.
"""

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from order_config import OrderKernelConfig, get_active_config
from order_kernel.domain.dtos import INTERNAL_ERROR_PREFIX
from order_kernel.exceptions import OrderKernelError
from order_kernel.logging_config import get_logger
from order_api.routes import router
from order_api.wiring import ProcessingPipeline, build_pipeline

logger = get_logger("api")


def create_app(pipeline: ProcessingPipeline) -> FastAPI:
    app = FastAPI(title="Order Processing API")
    app.state.pipeline = pipeline
    app.include_router(router)

    @app.exception_handler(OrderKernelError)
    async def _kernel_error(request: Request, exc: OrderKernelError) -> PlainTextResponse:
        logger.error(
            "request_failed",
            extra={"path": request.url.path, "error_code": exc.code},
        )
        return PlainTextResponse(f"{INTERNAL_ERROR_PREFIX}{exc}", status_code=500)

    return app


def create_app_from_config(config: OrderKernelConfig | None = None) -> FastAPI:
    return create_app(build_pipeline(config or get_active_config()))
