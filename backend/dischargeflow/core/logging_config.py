import logging
from typing import Optional

from .config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """Install the root handler once; later calls only adjust the level."""
    root = logging.getLogger()
    resolved = (level or settings.LOG_LEVEL).upper()
    if not root.handlers:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
    root.setLevel(resolved)
