"""
Logging setup for the storefront.

Every module logs through ``get_logger(__name__)``. A stdout handler is
installed on the root logger the first time this module is imported.
Cart keys and other client-supplied ids go through ``safe_log_id`` before
they are interpolated into a message.
"""
import logging
import os
import sys
from functools import cache

_VERBOSE_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
# Vercel stamps its own time on each line
_TERSE_FORMAT = "%(levelname)s [%(name)s] %(message)s"

# HTTP clients used under supabase and upstash-redis
_CHATTY_LOGGERS = ("httpx", "httpcore", "hpack")

_CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def _install_handler() -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    level = logging.getLevelName(os.environ.get("LOG_LEVEL", "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    on_vercel = os.environ.get("VERCEL") == "1"
    handler.setFormatter(logging.Formatter(_TERSE_FORMAT if on_vercel else _VERBOSE_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_install_handler()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def safe_log_id(value, max_length: int = 40) -> str:
    """
    Render a cart key, session or line id so it cannot forge log lines.

    Control characters are escaped and the result is cut to ``max_length``.
    Empty values render as ``N/A``.
    """
    if not value:
        return "N/A"
    return str(value).translate(_CONTROL_CHARS)[:max_length]
