#!/usr/bin/env python3
"""FastAPI server runner."""

import argparse

import structlog
import uvicorn

from signal_gate.api.app import create_app
from signal_gate.config.loader import load_config
from signal_gate.gate import build_gate
from signal_gate.logging.setup import setup_logging

logger = structlog.get_logger()


def main(config_path: str | None = None, host: str = "0.0.0.0", port: int = 8000) -> None:
    """Run the FastAPI server."""
    config = load_config(config_path)
    setup_logging(level=config.logging.level, log_format=config.logging.format)
    gate = build_gate(config)
    app = create_app(gate)

    logger.info("Starting FastAPI server", port=port)

    try:
        uvicorn.run(
            app,
            host=host,
            port=port,
            log_config=None  # Use our structlog setup
        )
    except Exception as e:
        logger.error("Failed to start server", error=str(e))
        raise
    finally:
        gate.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Signal gate HTTP API")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()
    main(config_path=args.config, port=args.port)
