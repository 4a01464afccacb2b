"""Entry point for running the Pinboard application with Uvicorn."""
from __future__ import annotations

import os

import uvicorn


def main() -> None:
  host = os.getenv("PINBOARD_SERVER_HOST", "0.0.0.0")
  port = int(os.getenv("PINBOARD_SERVER_PORT", "8000"))
  # Development only; uploads under media/ must not trigger restarts.
  reload = os.getenv("UVICORN_RELOAD", "false").lower() == "true"
  log_level = os.getenv("LOG_LEVEL", "info").lower()
  uvicorn.run(
    "pinboard.main:app",
    host=host,
    port=port,
    reload=reload,
    reload_dirs=["pinboard"] if reload else None,
    log_level=log_level,
  )


if __name__ == "__main__":
  main()
