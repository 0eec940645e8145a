"""Entry point for running ClassicXO via ``python -m classicxo``."""

from __future__ import annotations

import logging
import os

import uvicorn


def main() -> None:
    """Start the FastAPI-powered ClassicXO web server."""

    log_level = os.environ.get("CLASSICXO_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    host = os.environ.get("CLASSICXO_HOST", "0.0.0.0")
    port = int(os.environ.get("CLASSICXO_PORT", "8000"))
    uvicorn.run(
        "classicxo.ui:app",
        host=host,
        port=port,
        reload=False,
        log_level=log_level.lower(),
    )


if __name__ == "__main__":
    main()
