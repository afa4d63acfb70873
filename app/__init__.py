import os
import sys

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

logger.remove()

fmt = """{level} @ {time:YYYY-MM-DD HH:mm:ss} ({file}:{line} in {function}):
>   {message}"""

if os.getenv("CONTACTS_DEBUG") == "1":
    logger.add(
        sys.stdout, colorize=True,
        format=fmt, level="DEBUG"
    )
else:
    logger.add(
        sys.stdout, colorize=True,
        format=fmt, level="INFO"
    )


def add_file_sinks(log_dir=None):
    """
    Log to daily rotated files, used by the server process only.

    :param log_dir: Directory for the .log and .err files, CONTACTS_LOG_DIR by default
    :return: Ids of the added loguru sinks
    """
    log_dir = log_dir or os.getenv("CONTACTS_LOG_DIR", "logs")
    date = "{time:YYYY-MM-DD}"
    return [
        logger.add(
            f"{log_dir}/contacts_{date}.log", format=fmt, level="INFO",
            colorize=False, rotation="1 day"
        ),
        logger.add(
            f"{log_dir}/contacts_{date}.err", format=fmt, level="ERROR",
            colorize=False, rotation="1 day"
        ),
    ]


CONTACTS_FILE = os.getenv("CONTACTS_FILE", "data/contacts.json")
CORS_ORIGINS = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "http://127.0.0.1:5500").split(",")
    if origin.strip()
]
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "3001"))
