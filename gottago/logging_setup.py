import logging
import sys
from typing import Optional

from gottago import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger once.
    Level comes from the explicit argument, then LOG_LEVEL, then INFO.
    """
    root = logging.getLogger()
    if getattr(root, "_gottago_configured", False):
        return

    lvl_name = (level or settings.log_level()).upper()
    lvl = getattr(logging, lvl_name, None)
    if not isinstance(lvl, int):
        lvl = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root.addHandler(handler)
    root.setLevel(lvl)
    root._gottago_configured = True  # type: ignore[attr-defined]
