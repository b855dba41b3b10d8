# catalog_api/server.py
"""
Punct de intrare CLI (`catalog-api`): citește configurația, pornește uvicorn pe HOST:PORT.

Excepțiile ne-prinse (proces sau thread-uri) sunt logate critic și opresc procesul cu cod 1;
SIGINT/SIGTERM sunt logate; oprirea grațioasă o face uvicorn.
"""
from __future__ import annotations

import argparse
import logging
import os
import signal
import sys
import threading
from typing import Optional, Sequence

import uvicorn

from catalog_api.core.logging import setup_logging
from catalog_api.core.settings import Settings, get_settings
from catalog_api.database import mask_url
from catalog_api.main import create_app

logger = logging.getLogger("catalog-api")


def _fatal(exc_type, exc, tb) -> None:
    logger.critical("Uncaught exception, shutting down", exc_info=(exc_type, exc, tb))
    sys.exit(1)


def _thread_fatal(args: threading.ExceptHookArgs) -> None:
    if args.exc_type is SystemExit:
        return
    logger.critical(
        "Uncaught exception in thread %s, shutting down",
        args.thread.name if args.thread else "?",
        exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
    )
    # din thread secundar sys.exit nu oprește procesul
    logging.shutdown()
    os._exit(1)


def _on_signal(signum, frame) -> None:
    # uvicorn își pune propriii handleri cât rulează și re-emite semnalul după shutdown
    logger.info("Received %s, exiting", signal.Signals(signum).name)
    sys.exit(0)


def _install_hooks() -> None:
    sys.excepthook = _fatal
    threading.excepthook = _thread_fatal

    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, _on_signal)


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="catalog-api", description="Product catalog HTTP API")
    p.add_argument("--host", default=None, help="override HOST")
    p.add_argument("--port", type=int, default=None, help="override PORT")
    p.add_argument("--reload", action="store_true", help="dev: auto-reload la modificări")
    return p.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    settings: Settings = get_settings()
    setup_logging(settings.log_level)
    _install_hooks()

    host = args.host or settings.host
    port = args.port or settings.port
    logger.info(
        "Starting %s v%s (env=%s) on %s:%s db=%s",
        settings.app_name, settings.app_version, settings.app_env, host, port, mask_url(settings.database_url),
    )

    if args.reload:
        # reload cere import string, nu instanță
        uvicorn.run("catalog_api.main:app", host=host, port=port, reload=True, log_config=None)
        return
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)


if __name__ == "__main__":  # pragma: no cover
    main()
