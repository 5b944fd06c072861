"""FastAPI adapter exposing order processing over HTTP."""

from order_api.app import create_app, create_app_from_config
from order_api.wiring import ProcessingPipeline, build_pipeline

__all__ = [
    "ProcessingPipeline",
    "build_pipeline",
    "create_app",
    "create_app_from_config",
]
