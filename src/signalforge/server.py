"""HTTP front end: FastAPI app exposing ``POST /run`` and ``GET /health``."""

import argparse
import logging
from pathlib import Path
from typing import Any

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request

from signalforge.config import create_from_config, get_default_config_path, load_config
from signalforge.data import RunRequest
from signalforge.errors import ConfigurationError
from signalforge.pipeline import Pipeline

logger = logging.getLogger(__name__)


def get_pipeline(request: Request) -> Pipeline:
    """Pipeline configured on the app, or 503 when none is available."""
    pipeline: Pipeline | None = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        raise HTTPException(status_code=503, detail="Pipeline not configured")
    return pipeline


def create_app(pipeline: Pipeline | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        pipeline: Pipeline serving ``POST /run``. Without one the endpoint
            answers 503.

    Returns:
        Configured FastAPI app.
    """
    application = FastAPI(title="SignalForge", version="0.1.0")
    application.state.pipeline = pipeline

    @application.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "pipeline_ready": application.state.pipeline is not None}

    @application.post("/run")
    async def run(
        payload: RunRequest,
        pipeline: Pipeline = Depends(get_pipeline),
    ) -> dict[str, Any]:
        """Execute one run and return its summary."""
        try:
            result = await pipeline.run(payload)
        except ConfigurationError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return result.to_response()

    return application


def main() -> None:
    """Serve the API with uvicorn using a YAML config."""
    parser = argparse.ArgumentParser(description="Serve the SignalForge HTTP API.")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    parser.add_argument("--port", type=int, default=8000, help="Bind port")

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()
    config = load_config(config_path)
    pipeline, _run_logger = create_from_config(config)

    logger.info(f"Serving SignalForge on {ns.host}:{ns.port} (config: {config_path})")
    uvicorn.run(create_app(pipeline), host=ns.host, port=ns.port)


if __name__ == "__main__":
    main()
