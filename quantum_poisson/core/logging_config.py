"""
Console + optional rotating file logging.
"""
import logging
import logging.handlers
import sys
from pathlib import Path

from quantum_poisson.core.config import settings


def setup_logging(level: str | None = None, log_file: str | None = None) -> logging.Logger:
    fmt = logging.Formatter(
        "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)-40s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    root = logging.getLogger()
    root.setLevel(getattr(logging, (level or settings.log_level).upper(), logging.INFO))

    # evita handler duplicati se chiamato piu' volte
    for h in list(root.handlers):
        if getattr(h, "_quantum_poisson", False):
            root.removeHandler(h)

    ch = logging.StreamHandler(sys.stdout)
    ch.setFormatter(fmt)
    ch._quantum_poisson = True
    root.addHandler(ch)

    path = log_file or settings.log_file
    if path:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        # 10 MB x 3 backups
        fh = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=10 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        fh.setFormatter(fmt)
        fh._quantum_poisson = True
        root.addHandler(fh)

    return logging.getLogger("quantum_poisson")
