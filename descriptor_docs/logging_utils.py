import logging
import sys
from typing import Iterable

LOG_FORMAT = "%(asctime)s %(name)s - %(levelname)s - %(message)s"

# Libraries that log every request Gradio serves.
NOISY_LOGGERS = ('httpx', 'gradio', 'urllib3')


def configure_logging(level: int = logging.INFO, quiet: Iterable[str] = NOISY_LOGGERS) -> None:
    """Send the app's own records to stdout and warnings/errors to stderr.

    Called once by app.py before launch; replaces any root handlers.
    """
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.addFilter(lambda record: record.levelno < logging.WARNING)
    stdout_handler.setFormatter(formatter)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(formatter)

    root.addHandler(stdout_handler)
    root.addHandler(stderr_handler)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)
