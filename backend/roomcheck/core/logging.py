"""Logging setup shared by the API process."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())

    # Clear existing handlers (uvicorn --reload re-imports the app)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    # Firestore watch threads are chatty at INFO
    logging.getLogger("google.cloud.firestore_v1.watch").setLevel(logging.WARNING)
