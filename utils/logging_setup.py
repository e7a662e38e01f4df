import logging
from rich.logging import RichHandler
import os
from datetime import datetime

def setup_logging(log_dir: str = "logs", log_to_file: bool = True):
    """Configures the root logger for console and, optionally, file output."""

    DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(module)s.%(funcName)s:%(lineno)d] - %(message)s"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    if log_to_file:
        os.makedirs(log_dir, exist_ok=True)

        timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
        file_name = f"{log_dir}/bustimes_run_{timestamp}.log"

        file_handler = logging.FileHandler(file_name, mode='w')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(DETAILED_FORMAT))
        root_logger.addHandler(file_handler)

    # Log lines carry raw stop names and URLs, keep rich markup off
    console_handler = RichHandler(rich_tracebacks=True, tracebacks_show_locals=True, markup=False)
    console_handler.setLevel(logging.INFO)
    root_logger.addHandler(console_handler)

    # httpx logs every request at INFO, the clients already log their own
    logging.getLogger("httpx").setLevel(logging.WARNING)
