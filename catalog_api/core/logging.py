import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"

# access log-ul e scris de middleware-ul nostru (cu request id), nu de uvicorn
_QUIET_LOGGERS = {"uvicorn.access": logging.WARNING, "sqlalchemy.engine": logging.WARNING}


def _resolve_level(level) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level="INFO") -> None:
    """Idempotent: aliniază nivelurile la fiecare apel, dar adaugă handler-ul stdout o singură dată."""
    lvl = _resolve_level(level)
    root = logging.getLogger()
    root.setLevel(lvl)
    for name in ("uvicorn", "uvicorn.error", "catalog-api"):
        logging.getLogger(name).setLevel(lvl)
    for name, quiet in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(lvl, quiet))

    if root.handlers:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(handler)
