import logging
import sys

from storefront.config import settings


def get_logger(name: str) -> logging.Logger:
    """
    Return a named logger writing to stdout with a bracketed prefix, e.g.
    "[CART] added 2 x prod-1". Handlers are attached once per name so repeated
    imports don't duplicate output.
    """
    log = logging.getLogger(f"storefront.{name}")
    log.setLevel(settings.LOG_LEVEL.upper())
    if not log.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter(f"[{name.upper()}] %(levelname)s %(message)s"))
        log.addHandler(h)
        log.propagate = False
    return log
