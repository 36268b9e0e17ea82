import logging
import os

DEFAULT_TRIALS = int(os.getenv("SIM_DEFAULT_TRIALS", "20000"))
MAX_TRIALS = int(os.getenv("SIM_MAX_TRIALS", "1000000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
