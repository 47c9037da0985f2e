"""Entrypoint launching the grading API."""

from __future__ import annotations

import argparse
from pathlib import Path

import uvicorn

from grading.config import load_engine_config
from grading.server import create_app
from utils.logger_setup import setup_logging_from_config


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the grading API server")
    parser.add_argument("--host", default="127.0.0.1", help="Host interface to bind")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind")
    parser.add_argument("--config", default=None, help="Engine config YAML (default weights, grade bands, logging)")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    config_path = Path(args.config) if args.config else None
    config = load_engine_config(config_path)
    if config_path is not None:
        setup_logging_from_config(config_path)
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
