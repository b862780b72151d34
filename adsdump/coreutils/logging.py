import logging
import os
from datetime import datetime
from typing import Optional


def setup_logging(level=logging.INFO, log_dir: Optional[str] = None):
    """Setup basic logging configuration

    Logs always go to stderr; when ``log_dir`` is given a dated log file is
    written there as well.
    """
    handlers = [logging.StreamHandler()]
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(
            logging.FileHandler(
                os.path.join(log_dir, f"run_{datetime.now().strftime('%Y-%m-%d')}.log")
            )
        )

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
        handlers=handlers,
        force=True,
    )
    # urllib3 logs full request URLs, access token included, at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))
    return logging.getLogger("adsdump")
