"""Entry point for running GameHub via ``python -m gamehub``."""

from __future__ import annotations

import os

import uvicorn

from .logging_setup import setup_logging


def main() -> None:
    """Start the FastAPI-powered GameHub web server."""

    setup_logging()
    host = os.environ.get("GAMEHUB_HOST", "0.0.0.0")
    port = int(os.environ.get("GAMEHUB_PORT", "8000"))
    uvicorn.run("gamehub.ui:app", host=host, port=port, reload=False, log_config=None)


if __name__ == "__main__":
    main()
