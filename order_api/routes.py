from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from order_api.wiring import ProcessingPipeline

router = APIRouter(prefix="/api/order", tags=["orders"])


def _pipeline(request: Request) -> ProcessingPipeline:
    return request.app.state.pipeline


@router.post("/{order_id}/process")
def process_order(order_id: int, request: Request) -> Response:
    outcome = _pipeline(request).process(order_id)
    if outcome.is_success:
        return JSONResponse(outcome.to_payload())
    status_code = 400 if outcome.is_client_error else 500
    return PlainTextResponse(outcome.message, status_code=status_code)
