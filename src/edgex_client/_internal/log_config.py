"""Console logging setup for scripts and examples."""

import logging
import sys


def setup_logging(level: int = logging.INFO):
    """
    Send edgex_client log records to stdout.

    Library code only logs through module loggers; call this from an
    application or example script to see the output.
    """
    log_format = "%(asctime)s.%(msecs)03d [%(levelname)-8s] [%(name)-24s] %(message)s"
    formatter = logging.Formatter(log_format, datefmt="%Y-%m-%d %H:%M:%S")

    package_logger = logging.getLogger("edgex_client")
    package_logger.setLevel(level)

    # Replace our own console handler if called twice
    for handler in package_logger.handlers[:]:
        if isinstance(handler, logging.StreamHandler):
            package_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)
