import logging
import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE = os.getenv("LOG_FILE")

handlers = [logging.StreamHandler()]  # Output to console
if LOG_FILE:
    os.makedirs(os.path.dirname(LOG_FILE) or ".", exist_ok=True)
    handlers.append(logging.FileHandler(LOG_FILE))

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=handlers,
)

# SQL echo is controlled by the engine, keep the driver quiet otherwise
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def get_logger(name: str):
    return logging.getLogger(name)
