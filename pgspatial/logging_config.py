from datetime import datetime
import logging
from logging.handlers import TimedRotatingFileHandler
import os
from typing import Optional

from pgspatial.core.config import RawConfig
from pgspatial.core.config import get_default_config
from pgspatial.utils.config import get_log_dir


def setup_logging(rc: Optional[RawConfig] = None) -> logging.Logger:
    rc = rc or get_default_config()

    logger: logging.Logger = logging.getLogger('pgspatial')
    if any(getattr(h, '_pgspatial', False) for h in logger.handlers):
        return logger

    log_dir = get_log_dir(rc)
    os.makedirs(log_dir, exist_ok=True)
    log_file = f"pgspatial_{datetime.now().strftime('%Y-%m-%d')}.log"
    log_path = os.path.join(log_dir, log_file)

    logger.setLevel(logging.DEBUG)

    # Create a timed rotating file handler that rotates every day and keeps logs for 7 days
    file_handler = TimedRotatingFileHandler(log_path, when="midnight", interval=1, backupCount=7)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    file_handler.setFormatter(file_formatter)

    # Create a console handler that only logs configured level and above
    console_handler = logging.StreamHandler()
    console_handler.setLevel(rc.get('log', 'level', default='WARNING').upper())
    console_formatter = logging.Formatter("%(levelname)s - %(message)s")
    console_handler.setFormatter(console_formatter)

    for handler in (file_handler, console_handler):
        handler._pgspatial = True
        logger.addHandler(handler)

    return logger
